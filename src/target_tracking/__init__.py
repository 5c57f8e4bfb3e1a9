"""Emission target progress: linear projection, status and quarterly milestones."""

from .progress import (
    AT_RISK_TOLERANCE,
    QUARTER_FRACTIONS,
    QUARTER_LABELS,
    TARGET_PERIODS,
    TARGET_STATUSES,
    Milestone,
    TargetPeriod,
    TargetProgress,
    TargetStatus,
    build_quarterly_milestones,
    calculate_target_progress,
    classify_projection,
    linear_projection,
    sum_period_emissions,
    to_naive_utc,
)
from .runner import TargetDefinition, progress_to_frame, run_from_config, write_target_progress

__all__ = [
    "AT_RISK_TOLERANCE",
    "QUARTER_FRACTIONS",
    "QUARTER_LABELS",
    "TARGET_PERIODS",
    "TARGET_STATUSES",
    "Milestone",
    "TargetDefinition",
    "TargetPeriod",
    "TargetProgress",
    "TargetStatus",
    "build_quarterly_milestones",
    "calculate_target_progress",
    "classify_projection",
    "linear_projection",
    "progress_to_frame",
    "run_from_config",
    "sum_period_emissions",
    "to_naive_utc",
    "write_target_progress",
]

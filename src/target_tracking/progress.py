"""Progress of accumulated emissions against a reduction target.

The status of an open target comes from a linear projection: emissions so far
are extrapolated at their average daily rate to the end of the target window.

=================  ===============================================
status             condition
=================  ===============================================
``completed``      ``now >= end_date`` (terminal, no projection)
``on-track``       projection <= target
``at-risk``        projection <= target × 1.15
``off-track``      otherwise
=================  ===============================================

Annual targets also get four quarterly milestones at 25/50/75/100 % of the
window. The reference instant ``now`` is always passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Literal

from vehicle_emissions.rounding import round2

TargetStatus = Literal["completed", "on-track", "at-risk", "off-track"]
TargetPeriod = Literal["Annual", "Monthly"]

TARGET_STATUSES: tuple[TargetStatus, ...] = ("completed", "on-track", "at-risk", "off-track")
TARGET_PERIODS: tuple[TargetPeriod, ...] = ("Annual", "Monthly")

TARGET_STATUS_LABELS: dict[TargetStatus, str] = {
    "on-track": "On track",
    "at-risk": "At risk",
    "off-track": "Off track",
    "completed": "Completed",
}

TARGET_PERIOD_LABELS: dict[TargetPeriod, str] = {
    "Annual": "Annual",
    "Monthly": "Monthly",
}

AT_RISK_TOLERANCE = 1.15
MIN_TOTAL_DAYS = 1.0
MIN_ELAPSED_DAYS = 0.01

QUARTER_LABELS = ("Q1", "Q2", "Q3", "Q4")
QUARTER_FRACTIONS = (0.25, 0.5, 0.75, 1.0)

_SECONDS_PER_DAY = 86_400.0


@dataclass
class Milestone:
    label: str
    date: datetime
    expected_value: float
    achieved: bool  # milestone date has passed
    on_track: bool


@dataclass
class TargetProgress:
    target_value: float
    current_value: float
    percentage: float
    remaining: float
    status: TargetStatus
    milestones: list[Milestone] = field(default_factory=list)
    projection: float | None = None  # None once the target is completed


def to_naive_utc(value: date | datetime) -> datetime:
    """Bring a date or datetime onto naive UTC so instants compare cleanly.

    Plain dates become midnight, naive datetimes are taken to be UTC already and
    aware ones are converted to UTC before their offset is dropped.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return datetime(value.year, value.month, value.day)


def _days(delta: timedelta) -> float:
    return delta.total_seconds() / _SECONDS_PER_DAY


def classify_projection(
    projection: float,
    target_value: float,
    tolerance: float = AT_RISK_TOLERANCE,
) -> TargetStatus:
    """Classify an end-of-window projection against its target."""
    if projection <= target_value:
        return "on-track"
    if projection <= target_value * tolerance:
        return "at-risk"
    return "off-track"


def linear_projection(
    current_emissions: float,
    start_date: datetime,
    end_date: datetime,
    now: datetime,
) -> float:
    """Extrapolate emissions to ``end_date`` at the average daily rate observed so far."""
    total_days = max(_days(end_date - start_date), MIN_TOTAL_DAYS)
    days_elapsed = max(_days(now - start_date), MIN_ELAPSED_DAYS)
    return (current_emissions / days_elapsed) * total_days


def build_quarterly_milestones(
    target_value: float,
    current_emissions: float,
    percentage: float,
    start_date: datetime,
    end_date: datetime,
    now: datetime,
) -> list[Milestone]:
    """Four cumulative checkpoints at 25/50/75/100 % of the target window.

    A passed milestone is on track when actual emissions stayed within its
    expected value. A future one is on track while the share of target
    already consumed does not exceed the milestone's fraction.
    """
    window = end_date - start_date
    milestones: list[Milestone] = []
    for label, fraction in zip(QUARTER_LABELS, QUARTER_FRACTIONS):
        milestone_date = start_date + window * fraction
        expected_value = round2(target_value * fraction)
        achieved = now >= milestone_date
        if achieved:
            on_track = current_emissions <= expected_value
        else:
            on_track = percentage <= fraction * 100
        milestones.append(
            Milestone(
                label=label,
                date=milestone_date,
                expected_value=expected_value,
                achieved=achieved,
                on_track=on_track,
            )
        )
    return milestones


def calculate_target_progress(
    target_value: float,
    current_emissions: float,
    start_date: date | datetime,
    end_date: date | datetime,
    now: date | datetime,
    period: TargetPeriod = "Annual",
) -> TargetProgress:
    """Compute consumption, remaining budget, status and milestones for a target.

    Parameters
    ----------
    target_value:
        Emission budget for the window, kg CO₂e.
    current_emissions:
        Emissions accrued since ``start_date``, kg CO₂e.
    start_date, end_date:
        Target window. Plain dates are read as midnight.
    now:
        Reference instant for the projection and milestone checks.
    period:
        ``"Annual"`` targets get quarterly milestones, ``"Monthly"`` ones none.
    """
    start = to_naive_utc(start_date)
    end = to_naive_utc(end_date)
    reference = to_naive_utc(now)

    percentage = 0.0 if target_value == 0 else round2((current_emissions / target_value) * 100)
    remaining = round2(target_value - current_emissions)

    projection: float | None
    if reference >= end:
        status: TargetStatus = "completed"
        projection = None
    else:
        raw_projection = linear_projection(current_emissions, start, end, reference)
        status = classify_projection(raw_projection, target_value)
        projection = round2(raw_projection)

    milestones: list[Milestone] = []
    if period == "Annual":
        milestones = build_quarterly_milestones(
            target_value, current_emissions, percentage, start, end, reference
        )

    return TargetProgress(
        target_value=target_value,
        current_value=current_emissions,
        percentage=percentage,
        remaining=remaining,
        status=status,
        milestones=milestones,
        projection=projection,
    )


def sum_period_emissions(values: Iterable[float]) -> float:
    """Total real emissions of several vehicles or periods, rounded once."""
    return round2(sum(values))

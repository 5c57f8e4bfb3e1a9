"""Evaluate the emission targets defined in ``config.yaml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Mapping

import pandas as pd

from config_paths import load_config

from .progress import (
    QUARTER_LABELS,
    TARGET_PERIODS,
    TARGET_STATUS_LABELS,
    TargetPeriod,
    TargetProgress,
    calculate_target_progress,
    sum_period_emissions,
    to_naive_utc,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "results/targets/target_progress.csv"


@dataclass(slots=True)
class TargetDefinition:
    name: str
    target_value: float
    period: TargetPeriod
    start_date: datetime
    end_date: datetime
    current_emissions: float | None


def _parse_datetime(value: object, label: str) -> datetime:
    if isinstance(value, date):
        return to_naive_utc(value)
    if isinstance(value, str) and value.strip():
        try:
            return to_naive_utc(datetime.fromisoformat(value.strip()))
        except ValueError as exc:
            raise ValueError(f"{label} must be an ISO date, got {value!r}.") from exc
    raise ValueError(f"{label} must be a date, got {value!r}.")


def _parse_current_emissions(value: object, label: str) -> float | None:
    if value is None:
        return None
    try:
        if isinstance(value, (list, tuple)):
            return sum_period_emissions(float(item) for item in value)
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be numeric or a list of numbers.") from exc


def parse_target(entry: Mapping[str, object]) -> TargetDefinition:
    name = str(entry.get("name", "")).strip()
    if not name:
        raise ValueError("Every target must define a 'name'.")
    if "target_value" not in entry:
        raise ValueError(f"Target '{name}' must define 'target_value'.")
    period = str(entry.get("period", "Annual")).strip().capitalize()
    if period not in TARGET_PERIODS:
        raise ValueError(
            f"Target '{name}' has period '{period}'; expected one of {TARGET_PERIODS}."
        )
    start = _parse_datetime(entry.get("start_date"), f"Target '{name}' start_date")
    end = _parse_datetime(entry.get("end_date"), f"Target '{name}' end_date")
    try:
        target_value = float(entry["target_value"])  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Target '{name}' target_value must be numeric, got {entry['target_value']!r}."
        ) from exc
    if end < start:
        raise ValueError(f"Target '{name}' ends before it starts.")
    return TargetDefinition(
        name=name,
        target_value=target_value,
        period=period,  # type: ignore[arg-type]
        start_date=start,
        end_date=end,
        current_emissions=_parse_current_emissions(
            entry.get("current_emissions"), f"Target '{name}' current_emissions"
        ),
    )


def run_from_config(
    config_path: Path | str | None = None,
    *,
    now: date | datetime | None = None,
    default_current_emissions: float | None = None,
) -> dict[str, TargetProgress]:
    """Compute progress for every target under ``target_tracking.targets``.

    ``now`` takes precedence over ``target_tracking.now``; when neither is set
    the current UTC time is used. Timezone-aware values are converted to UTC;
    naive ones are taken to be UTC already. ``default_current_emissions``
    fills in targets that do not declare their own ``current_emissions``.
    """
    config_path, config = load_config(config_path)
    module_cfg = config.get("target_tracking", {})
    if not isinstance(module_cfg, Mapping) or not module_cfg:
        raise ValueError("'target_tracking' section missing from config.yaml")

    if now is not None:
        reference = _parse_datetime(now, "now")
    elif module_cfg.get("now") is not None:
        reference = _parse_datetime(module_cfg["now"], "target_tracking.now")
    else:
        reference = to_naive_utc(datetime.now(timezone.utc))

    targets_cfg = module_cfg.get("targets") or []
    if not isinstance(targets_cfg, list) or not targets_cfg:
        raise ValueError("'target_tracking.targets' must list at least one target.")

    LOGGER.info("Evaluating %d targets as of %s", len(targets_cfg), reference.isoformat())
    results: dict[str, TargetProgress] = {}
    for entry in targets_cfg:
        if not isinstance(entry, Mapping):
            raise ValueError("Each entry under 'target_tracking.targets' must be a mapping.")
        target = parse_target(entry)
        if target.name in results:
            raise ValueError(f"Target '{target.name}' is listed more than once.")
        current = target.current_emissions
        if current is None:
            if default_current_emissions is None:
                raise ValueError(
                    f"Target '{target.name}' has no current_emissions and no default was supplied."
                )
            current = default_current_emissions
        progress = calculate_target_progress(
            target.target_value,
            current,
            target.start_date,
            target.end_date,
            reference,
            target.period,
        )
        results[target.name] = progress
        LOGGER.info(
            "  • %s: %.2f / %.2f kg (%.2f%%) → %s",
            target.name,
            current,
            target.target_value,
            progress.percentage,
            TARGET_STATUS_LABELS[progress.status],
        )
    return results


def progress_to_frame(results: Mapping[str, TargetProgress]) -> pd.DataFrame:
    """One row per target; milestone fields are spread over ``q1_*``..``q4_*`` columns."""
    records = []
    for name, progress in results.items():
        record: dict[str, object] = {
            "target": name,
            "target_value": progress.target_value,
            "current_value": progress.current_value,
            "percentage": progress.percentage,
            "remaining": progress.remaining,
            "projection": progress.projection,
            "status": progress.status,
        }
        for milestone in progress.milestones:
            prefix = milestone.label.lower()
            record[f"{prefix}_date"] = milestone.date.date().isoformat()
            record[f"{prefix}_expected"] = milestone.expected_value
            record[f"{prefix}_achieved"] = milestone.achieved
            record[f"{prefix}_on_track"] = milestone.on_track
        records.append(record)

    columns = [
        "target",
        "target_value",
        "current_value",
        "percentage",
        "remaining",
        "projection",
        "status",
    ]
    for label in QUARTER_LABELS:
        prefix = label.lower()
        columns.extend(
            [f"{prefix}_date", f"{prefix}_expected", f"{prefix}_achieved", f"{prefix}_on_track"]
        )
    return pd.DataFrame.from_records(records, columns=columns)


def write_target_progress(results: Mapping[str, TargetProgress], destination: Path) -> Path:
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8", newline="") as fh:
        fh.write("# unit: kgCO2e\n")
        progress_to_frame(results).to_csv(fh, index=False)
    return destination

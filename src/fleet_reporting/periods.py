"""Calendar periods used to bucket fleet activity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

import pandas as pd

PeriodGranularity = Literal["MONTHLY", "QUARTERLY", "YEARLY"]
PERIOD_GRANULARITIES: tuple[PeriodGranularity, ...] = ("MONTHLY", "QUARTERLY", "YEARLY")

_PANDAS_FREQ: dict[PeriodGranularity, str] = {
    "MONTHLY": "M",
    "QUARTERLY": "Q",
    "YEARLY": "Y",
}

MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(slots=True)
class Period:
    """A calendar bucket clipped to the reporting range; both bounds inclusive."""

    key: str
    label: str
    start: pd.Timestamp
    end: pd.Timestamp


def _check_granularity(granularity: str) -> PeriodGranularity:
    value = str(granularity).strip().upper()
    if value not in PERIOD_GRANULARITIES:
        raise ValueError(
            f"Unknown period granularity '{granularity}'. Expected one of {PERIOD_GRANULARITIES}."
        )
    return value  # type: ignore[return-value]


def end_of_day(value: date | datetime | str | pd.Timestamp) -> pd.Timestamp:
    """Last instant of the calendar day containing ``value``."""
    return pd.Timestamp(value).normalize() + pd.Timedelta(days=1) - pd.Timedelta(1, unit="ns")


def _format(period: pd.Period, granularity: PeriodGranularity) -> tuple[str, str]:
    year = period.year
    if granularity == "MONTHLY":
        return f"{year}-{period.month:02d}", f"{MONTH_LABELS[period.month - 1]} {year}"
    if granularity == "QUARTERLY":
        return f"{year}-Q{period.quarter}", f"Q{period.quarter} {year}"
    return str(year), str(year)


def period_key(timestamp: date | datetime | str | pd.Timestamp, granularity: str) -> str:
    """Key of the period containing ``timestamp`` (``2025-01``, ``2025-Q1`` or ``2025``)."""
    granularity = _check_granularity(granularity)
    period = pd.Timestamp(timestamp).to_period(_PANDAS_FREQ[granularity])
    return _format(period, granularity)[0]


def generate_periods(
    start: date | datetime | str | pd.Timestamp,
    end: date | datetime | str | pd.Timestamp,
    granularity: str = "MONTHLY",
) -> list[Period]:
    """Contiguous periods covering ``[start, end]``; the first and last are clipped."""
    granularity = _check_granularity(granularity)
    start_ts = pd.Timestamp(start)
    end_ts = pd.Timestamp(end)
    if end_ts < start_ts:
        raise ValueError(f"Reporting range ends ({end_ts}) before it starts ({start_ts}).")

    periods: list[Period] = []
    for period in pd.period_range(start=start_ts, end=end_ts, freq=_PANDAS_FREQ[granularity]):
        key, label = _format(period, granularity)
        periods.append(
            Period(
                key=key,
                label=label,
                start=max(period.start_time, start_ts),
                end=min(period.end_time, end_ts),
            )
        )
    return periods

"""Fleet-level emission reports: per group, per period and per fuel type."""

from .aggregation import (
    AGGREGATION_LEVELS,
    NO_CARLIST_ID,
    AggregationLevel,
    FleetMetadata,
    FleetReport,
    aggregate_emissions,
    build_breakdown,
    build_fleet_report,
    build_period_rows,
    build_time_series,
    compute_metadata,
)
from .periods import PERIOD_GRANULARITIES, Period, PeriodGranularity, end_of_day, generate_periods, period_key
from .runner import load_events, load_vehicles, run_from_config, write_fleet_report

__all__ = [
    "AGGREGATION_LEVELS",
    "NO_CARLIST_ID",
    "PERIOD_GRANULARITIES",
    "AggregationLevel",
    "FleetMetadata",
    "FleetReport",
    "Period",
    "PeriodGranularity",
    "aggregate_emissions",
    "build_breakdown",
    "build_fleet_report",
    "build_period_rows",
    "build_time_series",
    "compute_metadata",
    "end_of_day",
    "generate_periods",
    "load_events",
    "load_vehicles",
    "period_key",
    "run_from_config",
    "write_fleet_report",
]

"""Build a fleet emission report from the CSV inputs named in ``config.yaml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import pandas as pd
import yaml

from config_paths import load_config, resolve_input_path
from vehicle_emissions.inputs import EnergySource
from vehicle_emissions.runner import EmissionSettings, load_module_config

from .aggregation import FleetReport, build_fleet_report
from .periods import end_of_day

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIRECTORY = "results/fleet_report"

VEHICLE_COLUMNS = ("vehicle_id", "fuel_type", "co2_g_km")
EVENT_COLUMNS = ("vehicle_id", "date", "odometer_km")
CARLIST_SEPARATOR = ";"


def _require_columns(df: pd.DataFrame, required: tuple[str, ...], path: Path) -> None:
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing required columns: {', '.join(missing)}")


def _split_carlists(value: object) -> list[str]:
    if not isinstance(value, str):
        return []
    return [name.strip() for name in value.split(CARLIST_SEPARATOR) if name.strip()]


def load_vehicles(path: Path) -> pd.DataFrame:
    """Read the vehicle register; ``carlists`` holds ``;``-separated names."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vehicle file not found: {path}")
    df = pd.read_csv(path, dtype={"vehicle_id": str})
    _require_columns(df, VEHICLE_COLUMNS, path)
    if df["vehicle_id"].duplicated().any():
        duplicated = sorted(df.loc[df["vehicle_id"].duplicated(), "vehicle_id"].unique())
        raise ValueError(f"{path} lists vehicles more than once: {', '.join(duplicated)}")
    if "label" not in df.columns:
        df["label"] = df["vehicle_id"]
    if "carlists" in df.columns:
        df["carlists"] = df["carlists"].map(_split_carlists)
    else:
        df["carlists"] = [[] for _ in range(len(df))]
    df["fuel_type"] = df["fuel_type"].astype(str).str.strip().str.lower()
    df["co2_g_km"] = pd.to_numeric(df["co2_g_km"], errors="raise")
    return df


def load_events(path: Path) -> pd.DataFrame:
    """Read refuelling and odometer events; missing quantities count as zero."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Events file not found: {path}")
    df = pd.read_csv(path, dtype={"vehicle_id": str}, parse_dates=["date"])
    _require_columns(df, EVENT_COLUMNS, path)
    for column in ("fuel_litres", "fuel_kwh"):
        if column not in df.columns:
            df[column] = 0.0
        df[column] = pd.to_numeric(df[column], errors="raise").fillna(0.0)
    df["odometer_km"] = pd.to_numeric(df["odometer_km"], errors="raise")
    return df


def resolve_sources_by_fuel_type(
    settings: EmissionSettings,
    fuel_types: list[str],
) -> dict[str, list[EnergySource]]:
    """Energy sources for each fuel type that has any; the rest are left out."""
    resolved: dict[str, list[EnergySource]] = {}
    for fuel_type in sorted(set(fuel_types)):
        try:
            resolved[fuel_type] = settings.sources_for(fuel_type)
        except KeyError:
            LOGGER.warning("Fuel type '%s' has no configured energy source", fuel_type)
    return resolved


def load_report_config(config: Mapping[str, object]) -> Mapping[str, object]:
    module_cfg = config.get("fleet_reporting", {})
    if not isinstance(module_cfg, Mapping) or not module_cfg:
        raise ValueError("'fleet_reporting' section missing from config.yaml")
    for key in ("vehicles_file", "events_file", "start_date", "end_date"):
        if module_cfg.get(key) is None:
            raise ValueError(f"'fleet_reporting.{key}' must be set.")
    return module_cfg


def run_from_config(config_path: Path | str | None = None) -> FleetReport:
    """Aggregate fleet emissions over ``fleet_reporting.start_date``..``end_date``."""
    config_path, config = load_config(config_path)
    settings = EmissionSettings.from_config(load_module_config(config))
    module_cfg = load_report_config(config)

    vehicles = load_vehicles(resolve_input_path(config, str(module_cfg["vehicles_file"])))
    events = load_events(resolve_input_path(config, str(module_cfg["events_file"])))
    granularity = str(module_cfg.get("granularity", "MONTHLY"))
    level = str(module_cfg.get("aggregation_level", "VEHICLE"))
    labels = module_cfg.get("fuel_type_labels") or {}
    if not isinstance(labels, Mapping):
        raise ValueError("'fleet_reporting.fuel_type_labels' must be a mapping.")

    LOGGER.info(
        "Building %s fleet report by %s for %d vehicles and %d events",
        granularity.lower(),
        level.lower(),
        len(vehicles),
        len(events),
    )
    report = build_fleet_report(
        vehicles,
        events,
        resolve_sources_by_fuel_type(settings, vehicles["fuel_type"].tolist()),
        pd.Timestamp(module_cfg["start_date"]),
        end_of_day(module_cfg["end_date"]),  # type: ignore[arg-type]
        granularity=granularity,
        level=level,
        fuel_type_labels={str(k).lower(): str(v) for k, v in labels.items()},
    )
    LOGGER.info(
        "Fleet totals: theoretical %.2f kg, real %.2f kg, delta %+.2f%%",
        report.metadata.total_theoretical,
        report.metadata.total_real,
        report.metadata.delta_percentage,
    )
    return report


def _write_frame(df: pd.DataFrame, destination: Path) -> None:
    with destination.open("w", encoding="utf-8", newline="") as fh:
        fh.write("# unit: kgCO2e\n")
        df.to_csv(fh, index=False)


def write_fleet_report(report: FleetReport, directory: Path) -> dict[str, Path]:
    """Write the three report tables plus a YAML summary of the totals."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    paths = {
        "aggregations": directory / "aggregations.csv",
        "time_series": directory / "time_series.csv",
        "breakdown": directory / "breakdown.csv",
        "summary": directory / "summary.yaml",
    }
    _write_frame(report.aggregations, paths["aggregations"])
    _write_frame(report.time_series, paths["time_series"])
    _write_frame(report.breakdown, paths["breakdown"])

    meta = report.metadata
    summary = {
        "unit": "kgCO2e",
        "start": meta.start.isoformat(),
        "end": meta.end.isoformat(),
        "vehicle_count": int(meta.vehicle_count),
        "total_theoretical": float(meta.total_theoretical),
        "total_real": float(meta.total_real),
        "delta_absolute": float(meta.delta_absolute),
        "delta_percentage": float(meta.delta_percentage),
        "total_km": float(meta.total_km),
        "total_fuel_litres": float(meta.total_fuel_litres),
    }
    with paths["summary"].open("w", encoding="utf-8") as fh:
        yaml.safe_dump(summary, fh, sort_keys=False)
    return paths

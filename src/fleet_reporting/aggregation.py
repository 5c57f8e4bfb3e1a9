"""Aggregate per-vehicle, per-period emissions into fleet reports.

Activity is first reduced to one row per vehicle and period (distance from the
odometer, litres and kWh summed), each row is run through the emission engine,
and the rows are then grouped:

* ``aggregate_emissions`` by vehicle, carlist, fuel type or period;
* ``build_time_series`` by period, covering every period of the range;
* ``build_breakdown`` by fuel type, with each type's share of real emissions.

Group totals are summed from the already rounded row values and rounded again,
so the figures match what a reader would get adding up the row table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Mapping, Sequence

import numpy as np
import pandas as pd

from vehicle_emissions.calculator import calculate_delta, calculate_vehicle_emissions_v2
from vehicle_emissions.inputs import EnergySource, build_vehicle_input
from vehicle_emissions.rounding import round2

from .periods import Period, generate_periods

LOGGER = logging.getLogger(__name__)

AggregationLevel = Literal["VEHICLE", "CARLIST", "FUEL_TYPE", "PERIOD"]
AGGREGATION_LEVELS: tuple[AggregationLevel, ...] = ("VEHICLE", "CARLIST", "FUEL_TYPE", "PERIOD")

NO_CARLIST_ID = "__no_carlist__"
NO_CARLIST_LABEL = "No carlist"

ROW_COLUMNS = [
    "vehicle_id",
    "label",
    "fuel_type",
    "carlists",
    "period_key",
    "period_label",
    "co2_g_km",
    "km_travelled",
    "fuel_litres",
    "fuel_kwh",
    "theoretical_kg",
    "real_kg",
]

AGGREGATION_COLUMNS = [
    "id",
    "label",
    "theoretical_kg",
    "real_kg",
    "delta_kg",
    "delta_pct",
    "total_km",
    "total_fuel_litres",
]

TIME_SERIES_COLUMNS = ["period", "period_label", "theoretical_kg", "real_kg", "delta_kg"]

BREAKDOWN_COLUMNS = ["category_id", "category", "real_kg", "share_pct"]


@dataclass
class FleetMetadata:
    total_theoretical: float
    total_real: float
    delta_absolute: float
    delta_percentage: float
    total_km: float
    total_fuel_litres: float
    vehicle_count: int
    start: pd.Timestamp
    end: pd.Timestamp


@dataclass
class FleetReport:
    aggregations: pd.DataFrame
    time_series: pd.DataFrame
    breakdown: pd.DataFrame
    metadata: FleetMetadata


def _check_level(level: str) -> AggregationLevel:
    value = str(level).strip().upper()
    if value not in AGGREGATION_LEVELS:
        raise ValueError(
            f"Unknown aggregation level '{level}'. Expected one of {AGGREGATION_LEVELS}."
        )
    return value  # type: ignore[return-value]


def _odometer_distance(events: pd.DataFrame) -> float:
    readings = events.sort_values("date", kind="stable")["odometer_km"].dropna()
    if len(readings) < 2:
        return 0.0
    return float(readings.iloc[-1] - readings.iloc[0])


def build_period_rows(
    vehicles: pd.DataFrame,
    events: pd.DataFrame,
    periods: Sequence[Period],
    sources_by_fuel_type: Mapping[str, Sequence[EnergySource]],
) -> pd.DataFrame:
    """Compute theoretical and real emissions for every vehicle in every period.

    ``vehicles`` needs ``vehicle_id``, ``fuel_type`` and ``co2_g_km`` columns
    (``label`` and ``carlists`` are optional). ``events`` needs ``vehicle_id``,
    ``date``, ``odometer_km``, ``fuel_litres`` and ``fuel_kwh``; refuelling and
    plain odometer readings share the table.
    """
    events = events.assign(vehicle_id=events["vehicle_id"].astype(str))
    events_by_vehicle = {
        vehicle_id: group for vehicle_id, group in events.groupby("vehicle_id", sort=False)
    }
    no_events = events.iloc[0:0]

    records: list[dict[str, object]] = []
    for vehicle in vehicles.to_dict("records"):
        vehicle_id = str(vehicle["vehicle_id"])
        fuel_type = str(vehicle["fuel_type"]).strip().lower()
        sources = sources_by_fuel_type.get(fuel_type)
        if not sources:
            LOGGER.warning(
                "Skipping vehicle %s: no energy source configured for fuel type '%s'",
                vehicle_id,
                fuel_type,
            )
            continue

        co2_g_km = float(vehicle["co2_g_km"])
        carlists = vehicle.get("carlists")
        carlists = list(carlists) if isinstance(carlists, (list, tuple)) else []
        label = vehicle.get("label")
        label = str(label) if isinstance(label, str) and label.strip() else vehicle_id
        vehicle_events = events_by_vehicle.get(vehicle_id, no_events)
        for period in periods:
            in_period = vehicle_events[
                (vehicle_events["date"] >= period.start) & (vehicle_events["date"] <= period.end)
            ]
            km_travelled = _odometer_distance(in_period)
            fuel_litres = float(in_period["fuel_litres"].sum())
            fuel_kwh = float(in_period["fuel_kwh"].sum())
            result = calculate_vehicle_emissions_v2(
                build_vehicle_input(co2_g_km, km_travelled, sources, fuel_litres, fuel_kwh)
            )
            records.append(
                {
                    "vehicle_id": vehicle_id,
                    "label": label,
                    "fuel_type": fuel_type,
                    "carlists": carlists,
                    "period_key": period.key,
                    "period_label": period.label,
                    "co2_g_km": co2_g_km,
                    "km_travelled": km_travelled,
                    "fuel_litres": fuel_litres,
                    "fuel_kwh": fuel_kwh,
                    "theoretical_kg": result.theoretical,
                    "real_kg": result.real,
                }
            )
    return pd.DataFrame.from_records(records, columns=ROW_COLUMNS)


def _with_group_keys(
    rows: pd.DataFrame,
    level: AggregationLevel,
    fuel_type_labels: Mapping[str, str],
) -> pd.DataFrame:
    if level == "VEHICLE":
        return rows.assign(group_id=rows["vehicle_id"], group_label=rows["label"])
    if level == "FUEL_TYPE":
        return rows.assign(
            group_id=rows["fuel_type"],
            group_label=rows["fuel_type"].map(lambda ft: fuel_type_labels.get(ft, ft)),
        )
    if level == "PERIOD":
        return rows.assign(group_id=rows["period_key"], group_label=rows["period_label"])

    # a vehicle listed in several carlists counts towards each of them
    exploded = rows.explode("carlists")
    carlist = exploded["carlists"]
    group_id = carlist.where(carlist.notna(), NO_CARLIST_ID).astype(str)
    return exploded.assign(
        group_id=group_id,
        group_label=group_id.replace({NO_CARLIST_ID: NO_CARLIST_LABEL}),
    )


def aggregate_emissions(
    rows: pd.DataFrame,
    level: str = "VEHICLE",
    fuel_type_labels: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """Sum period rows per group and compare real against theoretical totals."""
    level = _check_level(level)
    if rows.empty:
        return pd.DataFrame(columns=AGGREGATION_COLUMNS)

    keyed = _with_group_keys(rows, level, fuel_type_labels or {})
    grouped = keyed.groupby("group_id", sort=False).agg(
        label=("group_label", "first"),
        theoretical=("theoretical_kg", "sum"),
        real=("real_kg", "sum"),
        km=("km_travelled", "sum"),
        fuel=("fuel_litres", "sum"),
    )

    records = []
    for group_id, group in grouped.iterrows():
        theoretical = round2(float(group["theoretical"]))
        real = round2(float(group["real"]))
        delta = calculate_delta(theoretical, real)
        records.append(
            {
                "id": group_id,
                "label": group["label"],
                "theoretical_kg": theoretical,
                "real_kg": real,
                "delta_kg": delta.absolute,
                "delta_pct": delta.percentage,
                "total_km": round2(float(group["km"])),
                "total_fuel_litres": round2(float(group["fuel"])),
            }
        )
    frame = pd.DataFrame.from_records(records, columns=AGGREGATION_COLUMNS)
    return frame.sort_values(
        "label", key=lambda labels: labels.str.casefold(), kind="stable"
    ).reset_index(drop=True)


def build_time_series(rows: pd.DataFrame, periods: Sequence[Period]) -> pd.DataFrame:
    """Fleet totals per period; periods without activity appear with zeros."""
    if rows.empty:
        totals = pd.DataFrame(columns=["theoretical_kg", "real_kg"])
    else:
        totals = rows.groupby("period_key")[["theoretical_kg", "real_kg"]].sum()

    records = []
    for period in sorted(periods, key=lambda p: p.key):
        if period.key in totals.index:
            theoretical = round2(float(totals.at[period.key, "theoretical_kg"]))
            real = round2(float(totals.at[period.key, "real_kg"]))
        else:
            theoretical = real = 0.0
        records.append(
            {
                "period": period.key,
                "period_label": period.label,
                "theoretical_kg": theoretical,
                "real_kg": real,
                "delta_kg": round2(real - theoretical),
            }
        )
    return pd.DataFrame.from_records(records, columns=TIME_SERIES_COLUMNS)


def build_breakdown(
    rows: pd.DataFrame,
    fuel_type_labels: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """Real emissions per fuel type with their share of the fleet total."""
    if rows.empty:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    labels = fuel_type_labels or {}
    totals = rows.groupby("fuel_type", sort=False)["real_kg"].sum()
    values = totals.to_numpy(dtype=float)
    grand_total = float(values.sum())
    shares = np.zeros_like(values) if grand_total == 0 else values / grand_total * 100
    records = [
        {
            "category_id": fuel_type,
            "category": labels.get(fuel_type, fuel_type),
            "real_kg": round2(value),
            "share_pct": round2(share),
        }
        for fuel_type, value, share in zip(totals.index, values, shares)
    ]
    frame = pd.DataFrame.from_records(records, columns=BREAKDOWN_COLUMNS)
    return frame.sort_values("real_kg", ascending=False, kind="stable").reset_index(drop=True)


def compute_metadata(
    aggregations: pd.DataFrame,
    vehicle_count: int,
    start: pd.Timestamp,
    end: pd.Timestamp,
) -> FleetMetadata:
    """Report-wide totals, summed over the aggregation groups."""
    total_theoretical = round2(float(aggregations["theoretical_kg"].sum()))
    total_real = round2(float(aggregations["real_kg"].sum()))
    delta = calculate_delta(total_theoretical, total_real)
    return FleetMetadata(
        total_theoretical=total_theoretical,
        total_real=total_real,
        delta_absolute=delta.absolute,
        delta_percentage=delta.percentage,
        total_km=round2(float(aggregations["total_km"].sum())),
        total_fuel_litres=round2(float(aggregations["total_fuel_litres"].sum())),
        vehicle_count=vehicle_count,
        start=start,
        end=end,
    )


def build_fleet_report(
    vehicles: pd.DataFrame,
    events: pd.DataFrame,
    sources_by_fuel_type: Mapping[str, Sequence[EnergySource]],
    start: date | datetime | str | pd.Timestamp,
    end: date | datetime | str | pd.Timestamp,
    *,
    granularity: str = "MONTHLY",
    level: str = "VEHICLE",
    fuel_type_labels: Mapping[str, str] | None = None,
) -> FleetReport:
    """Build aggregations, time series, fuel breakdown and totals for one range."""
    periods = generate_periods(start, end, granularity)
    rows = build_period_rows(vehicles, events, periods, sources_by_fuel_type)
    LOGGER.info(
        "Built %d vehicle-period rows over %d periods (%s)", len(rows), len(periods), granularity
    )
    aggregations = aggregate_emissions(rows, level, fuel_type_labels)
    return FleetReport(
        aggregations=aggregations,
        time_series=build_time_series(rows, periods),
        breakdown=build_breakdown(rows, fuel_type_labels),
        metadata=compute_metadata(
            aggregations, len(vehicles), pd.Timestamp(start), pd.Timestamp(end)
        ),
    )

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping

import pandas as pd

from .constants import EMISSION_SCOPES, KYOTO_GASES
from .rounding import round2

if TYPE_CHECKING:  # pragma: no cover
    from .runner import VehicleRun

UNIT = "kgCO2e"


def _scope_totals(run: VehicleRun) -> dict[int, float]:
    totals = {scope: 0.0 for scope in EMISSION_SCOPES}
    for source, value in zip(run.sources, run.result.real_by_scope):
        totals[source.scope] = round2(totals[source.scope] + value)
    return totals


def results_to_frame(runs: Mapping[str, VehicleRun]) -> pd.DataFrame:
    """Flatten vehicle runs into one row per vehicle."""
    records = []
    for vehicle_id, run in runs.items():
        result = run.result
        record: dict[str, object] = {
            "vehicle_id": vehicle_id,
            "label": run.spec.label,
            "fuel_type": run.spec.fuel_type,
            "energy_sources": "+".join(run.source_names),
            "co2_g_km": run.spec.co2.co2_g_km,
            "km_travelled": run.spec.km_travelled,
            "fuel_litres": run.spec.fuel_litres,
            "fuel_kwh": run.spec.fuel_kwh,
            "theoretical_kg": result.theoretical,
            "real_kg": result.real,
            "delta_kg": result.delta.absolute,
            "delta_pct": result.delta.percentage,
        }
        for scope, value in _scope_totals(run).items():
            record[f"real_scope_{scope}_kg"] = value
        for gas in KYOTO_GASES:
            record[f"real_{gas}_kg"] = result.real_per_gas[gas]
        records.append(record)

    columns = [
        "vehicle_id",
        "label",
        "fuel_type",
        "energy_sources",
        "co2_g_km",
        "km_travelled",
        "fuel_litres",
        "fuel_kwh",
        "theoretical_kg",
        "real_kg",
        "delta_kg",
        "delta_pct",
        *[f"real_scope_{scope}_kg" for scope in EMISSION_SCOPES],
        *[f"real_{gas}_kg" for gas in KYOTO_GASES],
    ]
    return pd.DataFrame.from_records(records, columns=columns)


def write_vehicle_results(runs: Mapping[str, VehicleRun], destination: Path) -> Path:
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    df = results_to_frame(runs)
    with destination.open("w", encoding="utf-8", newline="") as fh:
        fh.write(f"# unit: {UNIT}\n")
        df.to_csv(fh, index=False)
    return destination

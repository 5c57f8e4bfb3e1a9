"""Run per-vehicle emission calculations described in ``config.yaml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from config_paths import load_config

from .calculator import VehicleEmissionResult, calculate_vehicle_emissions_v2
from .conversion import ConversionConfig
from .gases import GwpValues
from .inputs import (
    EnergySource,
    VehicleSpec,
    build_vehicle_input,
    load_energy_sources,
    load_fuel_types,
    load_gwp_values,
    parse_vehicle_spec,
    resolve_fuel_type,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "results/emissions/vehicle_emissions.csv"


@dataclass
class EmissionSettings:
    """Resolved factor configuration shared by every vehicle of a run."""

    gwp_values: GwpValues
    sources: dict[str, EnergySource]
    fuel_types: dict[str, list[str]]
    conversion: ConversionConfig

    @classmethod
    def from_config(cls, module_cfg: Mapping[str, object]) -> "EmissionSettings":
        gwp_values = load_gwp_values(module_cfg.get("gwp_values"))  # type: ignore[arg-type]
        sources = load_energy_sources(module_cfg.get("energy_sources"), gwp_values)  # type: ignore[arg-type]
        return cls(
            gwp_values=gwp_values,
            sources=sources,
            fuel_types=load_fuel_types(module_cfg.get("fuel_types"), sources),  # type: ignore[arg-type]
            conversion=ConversionConfig.from_config(module_cfg.get("conversion")),  # type: ignore[arg-type]
        )

    def sources_for(self, fuel_type: str) -> list[EnergySource]:
        return resolve_fuel_type(fuel_type, self.fuel_types, self.sources)


@dataclass
class VehicleRun:
    """A vehicle's configured activity together with its calculated emissions."""

    spec: VehicleSpec
    sources: list[EnergySource]
    result: VehicleEmissionResult

    @property
    def source_names(self) -> list[str]:
        return [source.name for source in self.sources]


def run_vehicle(spec: VehicleSpec, settings: EmissionSettings) -> VehicleRun:
    sources = settings.sources_for(spec.fuel_type)
    vehicle_input = build_vehicle_input(
        spec.co2.co2_g_km,
        spec.km_travelled,
        sources,
        fuel_litres=spec.fuel_litres,
        fuel_kwh=spec.fuel_kwh,
    )
    return VehicleRun(
        spec=spec,
        sources=sources,
        result=calculate_vehicle_emissions_v2(vehicle_input),
    )


def load_module_config(config: Mapping[str, object]) -> Mapping[str, object]:
    module_cfg = config.get("vehicle_emissions", {})
    if not isinstance(module_cfg, Mapping) or not module_cfg:
        raise ValueError("'vehicle_emissions' section missing from config.yaml")
    return module_cfg


def run_from_config(config_path: Path | str | None = None) -> dict[str, VehicleRun]:
    """Calculate emissions for every vehicle listed under ``vehicle_emissions.vehicles``."""
    config_path, config = load_config(config_path)
    module_cfg = load_module_config(config)
    settings = EmissionSettings.from_config(module_cfg)

    vehicles_cfg = module_cfg.get("vehicles") or []
    if not isinstance(vehicles_cfg, list) or not vehicles_cfg:
        raise ValueError("'vehicle_emissions.vehicles' must list at least one vehicle.")

    LOGGER.info("Calculating emissions for %d vehicles from %s", len(vehicles_cfg), config_path)
    results: dict[str, VehicleRun] = {}
    for entry in vehicles_cfg:
        if not isinstance(entry, Mapping):
            raise ValueError("Each entry under 'vehicle_emissions.vehicles' must be a mapping.")
        spec = parse_vehicle_spec(entry, settings.conversion)
        if spec.vehicle_id in results:
            raise ValueError(f"Vehicle '{spec.vehicle_id}' is listed more than once.")
        run = run_vehicle(spec, settings)
        results[spec.vehicle_id] = run
        LOGGER.info(
            "  • %s (%s): theoretical %.2f kg, real %.2f kg, delta %+.2f%%",
            spec.vehicle_id,
            "+".join(run.source_names),
            run.result.theoretical,
            run.result.real,
            run.result.delta.percentage,
        )
    return results

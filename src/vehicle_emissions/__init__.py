"""Vehicle CO₂e emission engine: theoretical vs. real, per gas and per scope."""

from .calculator import (
    Delta,
    FuelConsumptionInput,
    FuelConsumptionResult,
    ScopedEmissionInput,
    ScopedEmissionResult,
    VehicleEmissionInput,
    VehicleEmissionResult,
    calculate_delta,
    calculate_gas_co2e,
    calculate_real_emissions,
    calculate_scoped_emissions,
    calculate_theoretical_emissions,
    calculate_vehicle_emissions,
    calculate_vehicle_emissions_v2,
)
from .constants import DEFAULT_GWP_AR5, KYOTO_GAS_LABELS, KYOTO_GASES, SCOPE_LABELS, KyotoGas
from .conversion import (
    DEFAULT_CONVERSION,
    Co2Intensity,
    ConversionConfig,
    convert_nedc_to_wltp,
    convert_wltp_to_nedc,
    resolve_co2_intensity,
)
from .gases import merge_per_gas, per_gas_from_mapping, zero_per_gas
from .inputs import EnergySource, build_scoped_inputs, build_vehicle_input, parse_vehicle_spec
from .rounding import round2, round_to
from .runner import EmissionSettings, VehicleRun, run_from_config, run_vehicle
from .writers import results_to_frame, write_vehicle_results

__all__ = [
    "DEFAULT_CONVERSION",
    "DEFAULT_GWP_AR5",
    "KYOTO_GASES",
    "KYOTO_GAS_LABELS",
    "SCOPE_LABELS",
    "Co2Intensity",
    "ConversionConfig",
    "Delta",
    "EmissionSettings",
    "EnergySource",
    "FuelConsumptionInput",
    "FuelConsumptionResult",
    "KyotoGas",
    "ScopedEmissionInput",
    "ScopedEmissionResult",
    "VehicleEmissionInput",
    "VehicleEmissionResult",
    "VehicleRun",
    "build_scoped_inputs",
    "build_vehicle_input",
    "calculate_delta",
    "calculate_gas_co2e",
    "calculate_real_emissions",
    "calculate_scoped_emissions",
    "calculate_theoretical_emissions",
    "calculate_vehicle_emissions",
    "calculate_vehicle_emissions_v2",
    "convert_nedc_to_wltp",
    "convert_wltp_to_nedc",
    "merge_per_gas",
    "parse_vehicle_spec",
    "per_gas_from_mapping",
    "resolve_co2_intensity",
    "results_to_frame",
    "round2",
    "round_to",
    "run_from_config",
    "run_vehicle",
    "write_vehicle_results",
    "zero_per_gas",
]

"""Convert vehicle activity data into CO₂-equivalent emissions.

Two estimates are produced for each vehicle and period:

* theoretical emissions from the catalogue CO₂ intensity (g/km, WLTP) and the
  distance driven;
* real emissions from metered consumption, summed over every energy scope the
  vehicle draws on (fuel litres for scope 1, grid kWh for scope 2) and weighted
  across the seven Kyoto gases with their GWP multipliers.

Every reportable quantity passes through :func:`round2`. Per-gas values are
rounded before they are summed and the sum is rounded again, so a displayed
breakdown always adds up to the displayed total.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .constants import GRAMS_PER_KILOGRAM, KYOTO_GASES
from .gases import GasEmissionFactors, GwpValues, PerGasResult, merge_per_gas, zero_per_gas
from .rounding import round2


@dataclass
class Delta:
    """Deviation of real emissions from the theoretical estimate."""

    absolute: float  # kg CO₂e, real - theoretical
    percentage: float  # % of theoretical; 0 when theoretical is 0


@dataclass
class ScopedEmissionInput:
    """Activity of one energy scope: a quantity plus the factor set that applies to it."""

    quantity: float  # litres (scope 1) or kWh (scope 2)
    gas_factors: GasEmissionFactors  # kg gas per unit
    gwp_values: GwpValues


@dataclass
class ScopedEmissionResult:
    total_co2e: float
    per_gas: PerGasResult


@dataclass
class VehicleEmissionInput:
    """Multi-scope input: one scope for pure fuels, two for plug-in hybrids."""

    co2_g_km: float
    km_travelled: float
    scopes: Sequence[ScopedEmissionInput] = field(default_factory=list)


@dataclass
class VehicleEmissionResult:
    theoretical: float
    real: float
    real_per_gas: PerGasResult
    real_by_scope: list[float]
    delta: Delta


@dataclass
class FuelConsumptionInput:
    """Single-factor input: litres refuelled and one aggregate kg CO₂e/L factor."""

    co2_g_km: float
    km_travelled: float
    fuel_litres: float
    emission_factor_kg_co2e_per_l: float


@dataclass
class FuelConsumptionResult:
    theoretical: float
    real: float
    delta: Delta


def calculate_theoretical_emissions(co2_g_km: float, km_travelled: float) -> float:
    """Return catalogue-based emissions in kg: ``(g/km × km) / 1000``."""
    return round2((co2_g_km * km_travelled) / GRAMS_PER_KILOGRAM)


def calculate_real_emissions(fuel_litres: float, emission_factor_kg_co2e_per_l: float) -> float:
    """Return consumption-based emissions in kg CO₂e from a single aggregate factor."""
    return round2(fuel_litres * emission_factor_kg_co2e_per_l)


def calculate_delta(theoretical: float, real: float) -> Delta:
    """Compare two emission totals.

    A positive delta means real emissions exceed the theoretical estimate. The
    percentage is defined as 0 when the theoretical value is exactly 0.
    """
    absolute = round2(real - theoretical)
    if theoretical == 0:
        percentage = 0.0
    else:
        percentage = round2(((real - theoretical) / theoretical) * 100)
    return Delta(absolute=absolute, percentage=percentage)


def calculate_gas_co2e(quantity: float, factor_kg_per_unit: float, gwp: float) -> float:
    """CO₂e of one gas: ``quantity × factor × GWP``."""
    return round2(quantity * factor_kg_per_unit * gwp)


def calculate_scoped_emissions(scope_input: ScopedEmissionInput) -> ScopedEmissionResult:
    """Sum the CO₂e contribution of every Kyoto gas for one energy scope."""
    per_gas = zero_per_gas()
    total = 0.0
    for gas in KYOTO_GASES:
        co2e = calculate_gas_co2e(
            scope_input.quantity,
            scope_input.gas_factors[gas],
            scope_input.gwp_values[gas],
        )
        per_gas[gas] = co2e
        total += co2e
    return ScopedEmissionResult(total_co2e=round2(total), per_gas=per_gas)


def calculate_vehicle_emissions(vehicle_input: FuelConsumptionInput) -> FuelConsumptionResult:
    """Theoretical, real and delta for a vehicle described by a single fuel factor."""
    theoretical = calculate_theoretical_emissions(
        vehicle_input.co2_g_km, vehicle_input.km_travelled
    )
    real = calculate_real_emissions(
        vehicle_input.fuel_litres, vehicle_input.emission_factor_kg_co2e_per_l
    )
    return FuelConsumptionResult(
        theoretical=theoretical,
        real=real,
        delta=calculate_delta(theoretical, real),
    )


def calculate_vehicle_emissions_v2(vehicle_input: VehicleEmissionInput) -> VehicleEmissionResult:
    """Theoretical and per-gas real emissions for a vehicle with any number of scopes.

    The scope list is taken as given: whether a vehicle is a hybrid is decided
    by whoever builds the input.
    """
    theoretical = calculate_theoretical_emissions(
        vehicle_input.co2_g_km, vehicle_input.km_travelled
    )

    merged_per_gas = zero_per_gas()
    real_by_scope: list[float] = []
    total_real = 0.0

    for scope_input in vehicle_input.scopes:
        scoped = calculate_scoped_emissions(scope_input)
        real_by_scope.append(scoped.total_co2e)
        total_real += scoped.total_co2e
        merged_per_gas = merge_per_gas(merged_per_gas, scoped.per_gas)

    total_real = round2(total_real)

    return VehicleEmissionResult(
        theoretical=theoretical,
        real=total_real,
        real_per_gas=merged_per_gas,
        real_by_scope=real_by_scope,
        delta=calculate_delta(theoretical, total_real),
    )

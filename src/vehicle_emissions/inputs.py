"""Build engine inputs from configuration mappings.

Energy sources describe what a vehicle consumes (diesel, petrol, grid
electricity...): their scope, unit and per-gas emission factors. Fuel types map
a vehicle's declared fuel onto one or more energy sources, which is where a
plug-in hybrid becomes a two-scope input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .calculator import ScopedEmissionInput, VehicleEmissionInput
from .constants import DEFAULT_GWP_AR5, EMISSION_SCOPES, SCOPE_QUANTITY_UNITS, EmissionScope
from .conversion import DEFAULT_CONVERSION, Co2Intensity, ConversionConfig, resolve_co2_intensity
from .gases import GasEmissionFactors, GwpValues, per_gas_from_mapping


@dataclass(slots=True)
class EnergySource:
    """An energy carrier with the factor set that applies to it for the period."""

    name: str
    scope: EmissionScope
    unit: str
    gas_factors: GasEmissionFactors
    gwp_values: GwpValues


@dataclass(slots=True)
class VehicleSpec:
    """Per-vehicle activity for one period, as read from configuration."""

    vehicle_id: str
    label: str
    fuel_type: str
    co2: Co2Intensity
    km_travelled: float
    fuel_litres: float
    fuel_kwh: float


def _normalize_name(value: object) -> str:
    return str(value).strip().lower()


def load_gwp_values(cfg: Mapping[str, float] | None) -> GwpValues:
    """Return GWP multipliers, falling back to IPCC AR5 for gases not listed."""
    return per_gas_from_mapping(cfg, label="gwp_values", defaults=DEFAULT_GWP_AR5)


def load_energy_sources(
    cfg: Mapping[str, Mapping[str, object]] | None,
    gwp_values: GwpValues,
) -> dict[str, EnergySource]:
    if not isinstance(cfg, Mapping) or not cfg:
        raise ValueError("'energy_sources' must define at least one energy source.")

    sources: dict[str, EnergySource] = {}
    for raw_name, entry in cfg.items():
        name = _normalize_name(raw_name)
        if not isinstance(entry, Mapping):
            raise ValueError(f"Energy source '{name}' must be a mapping.")
        raw_scope = entry.get("scope", 1)
        try:
            scope_value = float(raw_scope)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Energy source '{name}' has a non-numeric scope.") from exc
        if not scope_value.is_integer():
            raise ValueError(
                f"Energy source '{name}' has scope {raw_scope!r}; scopes are whole numbers."
            )
        scope = int(scope_value)
        if scope not in EMISSION_SCOPES:
            raise ValueError(
                f"Energy source '{name}' has scope {scope}; expected one of {EMISSION_SCOPES}."
            )
        overrides = entry.get("gwp_values")
        source_gwp = (
            per_gas_from_mapping(overrides, label=f"gwp_values of '{name}'", defaults=gwp_values)
            if overrides
            else dict(gwp_values)
        )
        sources[name] = EnergySource(
            name=name,
            scope=scope,  # type: ignore[arg-type]
            unit=str(entry.get("unit", SCOPE_QUANTITY_UNITS[scope])),  # type: ignore[index]
            gas_factors=per_gas_from_mapping(
                entry.get("gas_factors"), label=f"gas_factors of '{name}'"
            ),
            gwp_values=source_gwp,
        )
    return sources


def load_fuel_types(
    cfg: Mapping[str, Sequence[str] | str] | None,
    sources: Mapping[str, EnergySource],
) -> dict[str, list[str]]:
    """Map fuel types to ordered energy source names, checking every name exists."""
    fuel_types: dict[str, list[str]] = {}
    for raw_fuel, raw_sources in (cfg or {}).items():
        fuel = _normalize_name(raw_fuel)
        names = [raw_sources] if isinstance(raw_sources, str) else list(raw_sources or [])
        names = [_normalize_name(name) for name in names]
        if not names:
            raise ValueError(f"Fuel type '{fuel}' must list at least one energy source.")
        missing = [name for name in names if name not in sources]
        if missing:
            raise KeyError(
                f"Fuel type '{fuel}' references unknown energy sources: {missing}. "
                f"Available: {', '.join(sorted(sources))}."
            )
        fuel_types[fuel] = names
    return fuel_types


def resolve_fuel_type(
    fuel_type: str,
    fuel_types: Mapping[str, Sequence[str]],
    sources: Mapping[str, EnergySource],
) -> list[EnergySource]:
    """Return the energy sources a fuel type draws on, in scope order of declaration."""
    key = _normalize_name(fuel_type)
    names = fuel_types.get(key)
    if names is None:
        if key not in sources:
            raise KeyError(f"No energy source configured for fuel type '{fuel_type}'.")
        names = [key]
    return [sources[name] for name in names]


def build_scoped_inputs(
    sources: Sequence[EnergySource],
    fuel_litres: float,
    fuel_kwh: float,
) -> list[ScopedEmissionInput]:
    """One scoped input per source: scope 1 consumes litres, scope 2 consumes kWh."""
    return [
        ScopedEmissionInput(
            quantity=fuel_litres if source.scope == 1 else fuel_kwh,
            gas_factors=source.gas_factors,
            gwp_values=source.gwp_values,
        )
        for source in sources
    ]


def build_vehicle_input(
    co2_g_km: float,
    km_travelled: float,
    sources: Sequence[EnergySource],
    fuel_litres: float = 0.0,
    fuel_kwh: float = 0.0,
) -> VehicleEmissionInput:
    return VehicleEmissionInput(
        co2_g_km=co2_g_km,
        km_travelled=km_travelled,
        scopes=build_scoped_inputs(sources, fuel_litres, fuel_kwh),
    )


def parse_vehicle_spec(
    entry: Mapping[str, object],
    conversion: ConversionConfig = DEFAULT_CONVERSION,
) -> VehicleSpec:
    """Read one ``vehicles`` entry.

    The CO₂ intensity is either a plain ``co2_g_km`` (taken as WLTP) or a pair
    of ``co2_g_km_wltp``/``co2_g_km_nedc`` values with a ``co2_standard``.
    """
    vehicle_id = entry.get("id")
    if vehicle_id is None or not str(vehicle_id).strip():
        raise ValueError("Every vehicle entry must define an 'id'.")
    vehicle_id = str(vehicle_id).strip()
    fuel_type = entry.get("fuel_type")
    if not fuel_type:
        raise ValueError(f"Vehicle '{vehicle_id}' must define a 'fuel_type'.")

    if "co2_g_km" in entry:
        plain = float(entry["co2_g_km"])  # type: ignore[arg-type]
        if plain > 0:
            co2 = resolve_co2_intensity(plain, None, "WLTP", conversion)
        else:
            # zero-emission catalogue entry, nothing to convert
            co2 = Co2Intensity(plain, plain, False, False, plain, None)
    else:
        wltp = entry.get("co2_g_km_wltp")
        nedc = entry.get("co2_g_km_nedc")
        co2 = resolve_co2_intensity(
            None if wltp is None else float(wltp),  # type: ignore[arg-type]
            None if nedc is None else float(nedc),  # type: ignore[arg-type]
            str(entry.get("co2_standard", "WLTP")).strip().upper(),  # type: ignore[arg-type]
            conversion,
        )

    return VehicleSpec(
        vehicle_id=vehicle_id,
        label=str(entry.get("label", vehicle_id)),
        fuel_type=_normalize_name(fuel_type),
        co2=co2,
        km_travelled=float(entry.get("km_travelled", 0.0)),  # type: ignore[arg-type]
        fuel_litres=float(entry.get("fuel_litres", 0.0)),  # type: ignore[arg-type]
        fuel_kwh=float(entry.get("fuel_kwh", 0.0)),  # type: ignore[arg-type]
    )

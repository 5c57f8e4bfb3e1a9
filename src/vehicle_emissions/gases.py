"""Helpers for mappings keyed by the seven Kyoto gases."""

from __future__ import annotations

from typing import Mapping

from .constants import KYOTO_GAS_DB_NAMES, KYOTO_GASES, KyotoGas
from .rounding import round2

GasEmissionFactors = dict[KyotoGas, float]
GwpValues = dict[KyotoGas, float]
PerGasResult = dict[KyotoGas, float]

_GAS_ALIASES: dict[str, KyotoGas] = {
    **{gas: gas for gas in KYOTO_GASES},
    **{name.lower(): gas for gas, name in KYOTO_GAS_DB_NAMES.items()},
}


def zero_per_gas() -> PerGasResult:
    """Return a fresh mapping with every Kyoto gas at zero."""
    return {gas: 0.0 for gas in KYOTO_GASES}


def per_gas_from_mapping(
    values: Mapping[str, float | int] | None,
    *,
    label: str = "gas mapping",
    defaults: Mapping[KyotoGas, float] | None = None,
) -> dict[KyotoGas, float]:
    """Normalise a user-supplied mapping into a complete seven-gas dictionary.

    Keys are matched case-insensitively against the gas symbols (``co2``,
    ``CH4``...). Gases left out take the value from ``defaults`` or 0.0.
    """
    normalized: dict[KyotoGas, float] = dict(defaults) if defaults else zero_per_gas()
    for gas in KYOTO_GASES:
        normalized.setdefault(gas, 0.0)
    if not values:
        return normalized
    for key, raw in values.items():
        gas = _GAS_ALIASES.get(str(key).strip().lower())
        if gas is None:
            raise KeyError(
                f"Unknown gas '{key}' in {label}. Expected one of: {', '.join(KYOTO_GASES)}."
            )
        try:
            normalized[gas] = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Value for '{key}' in {label} must be numeric, got {raw!r}.") from exc
    return normalized


def merge_per_gas(left: Mapping[KyotoGas, float], right: Mapping[KyotoGas, float]) -> PerGasResult:
    """Sum two per-gas results gas by gas, rounding each accumulated value."""
    return {gas: round2(left[gas] + right[gas]) for gas in KYOTO_GASES}

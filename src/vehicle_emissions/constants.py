from __future__ import annotations

from typing import Literal

KyotoGas = Literal["co2", "ch4", "n2o", "hfc", "pfc", "sf6", "nf3"]

KYOTO_GASES: tuple[KyotoGas, ...] = ("co2", "ch4", "n2o", "hfc", "pfc", "sf6", "nf3")

KYOTO_GAS_LABELS: dict[KyotoGas, str] = {
    "co2": "CO₂",
    "ch4": "CH₄",
    "n2o": "N₂O",
    "hfc": "HFC",
    "pfc": "PFC",
    "sf6": "SF₆",
    "nf3": "NF₃",
}

KYOTO_GAS_DB_NAMES: dict[KyotoGas, str] = {
    "co2": "CO2",
    "ch4": "CH4",
    "n2o": "N2O",
    "hfc": "HFC",
    "pfc": "PFC",
    "sf6": "SF6",
    "nf3": "NF3",
}

EmissionScope = Literal[1, 2]

EMISSION_SCOPES: tuple[EmissionScope, ...] = (1, 2)

SCOPE_LABELS: dict[EmissionScope, str] = {
    1: "Scope 1 (thermal)",
    2: "Scope 2 (electric)",
}

# Activity unit consumed by each scope: fuel litres for combustion, grid kWh for charging.
SCOPE_QUANTITY_UNITS: dict[EmissionScope, str] = {
    1: "L",
    2: "kWh",
}

# IPCC AR5, 100-year horizon.
DEFAULT_GWP_AR5: dict[KyotoGas, float] = {
    "co2": 1.0,
    "ch4": 28.0,
    "n2o": 265.0,
    "hfc": 1300.0,
    "pfc": 6630.0,
    "sf6": 23500.0,
    "nf3": 16100.0,
}

GRAMS_PER_KILOGRAM = 1000.0

from pathlib import Path

import pandas as pd
import pytest

from config_paths import CONFIG_ENV_VAR
from vehicle_emissions.inputs import load_energy_sources, load_gwp_values, parse_vehicle_spec
from vehicle_emissions.runner import run_from_config
from vehicle_emissions.writers import results_to_frame, write_vehicle_results


def _vehicle_config(vehicles: list[dict] | None = None) -> dict:
    return {
        "vehicle_emissions": {
            "gwp_values": {"ch4": 28},
            "energy_sources": {
                "diesel": {"scope": 1, "gas_factors": {"co2": 2.64}},
                "electricity": {"scope": 2, "gas_factors": {"CO2": 0.25}},
            },
            "fuel_types": {
                "diesel": "diesel",
                "hybrid_diesel": ["diesel", "electricity"],
            },
            "vehicles": vehicles
            if vehicles is not None
            else [
                {
                    "id": "V1",
                    "label": "Van",
                    "fuel_type": "diesel",
                    "co2_g_km": 150,
                    "km_travelled": 10000,
                    "fuel_litres": 500,
                },
                {
                    "id": "V2",
                    "fuel_type": "Hybrid_Diesel",
                    "co2_g_km": 50,
                    "km_travelled": 10000,
                    "fuel_litres": 100,
                    "fuel_kwh": 400,
                },
                {
                    "id": "V3",
                    "fuel_type": "electricity",
                    "co2_g_km": 0,
                    "km_travelled": 8000,
                    "fuel_kwh": 1000,
                },
            ],
        }
    }


def test_run_from_config_calculates_each_vehicle(write_config):
    runs = run_from_config(write_config(_vehicle_config()))

    assert list(runs) == ["V1", "V2", "V3"]

    diesel = runs["V1"].result
    assert diesel.theoretical == 1500.0
    assert diesel.real == 1320.0
    assert diesel.delta.absolute == -180.0
    assert diesel.delta.percentage == -12.0

    hybrid = runs["V2"]
    assert hybrid.source_names == ["diesel", "electricity"]
    assert hybrid.result.real_by_scope == [264.0, 100.0]
    assert hybrid.result.real == 364.0
    assert hybrid.result.delta.percentage == -27.2

    electric = runs["V3"]
    assert electric.source_names == ["electricity"]
    assert electric.result.real == 250.0
    assert electric.result.delta.percentage == 0.0


def test_results_frame_splits_scopes_and_gases(write_config):
    frame = results_to_frame(run_from_config(write_config(_vehicle_config()))).set_index(
        "vehicle_id"
    )

    assert frame.loc["V2", "energy_sources"] == "diesel+electricity"
    assert frame.loc["V2", "real_scope_1_kg"] == 264.0
    assert frame.loc["V2", "real_scope_2_kg"] == 100.0
    assert frame.loc["V2", "real_co2_kg"] == 364.0
    assert frame.loc["V1", "real_scope_2_kg"] == 0.0
    assert frame.loc["V1", "label"] == "Van"
    assert frame.loc["V3", "label"] == "V3"


def test_write_vehicle_results_adds_unit_header(write_config, tmp_path: Path):
    runs = run_from_config(write_config(_vehicle_config()))
    destination = write_vehicle_results(runs, tmp_path / "results" / "vehicles.csv")

    lines = destination.read_text().splitlines()
    assert lines[0] == "# unit: kgCO2e"
    df = pd.read_csv(destination, comment="#")
    assert df["real_kg"].sum() == pytest.approx(1934.0)


def test_nedc_only_vehicle_is_converted(write_config):
    vehicles = [
        {
            "id": "N1",
            "fuel_type": "diesel",
            "co2_g_km_nedc": 100,
            "co2_standard": "wltp",
            "km_travelled": 1000,
        }
    ]
    runs = run_from_config(write_config(_vehicle_config(vehicles)))
    spec = runs["N1"].spec

    assert spec.co2.co2_g_km_wltp == 121.0
    assert spec.co2.wltp_is_calculated
    assert runs["N1"].result.theoretical == 121.0


def test_config_path_taken_from_environment(write_config, monkeypatch: pytest.MonkeyPatch):
    path = write_config(_vehicle_config())
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert list(run_from_config()) == ["V1", "V2", "V3"]


def test_unknown_fuel_type_raises(write_config):
    vehicles = [{"id": "H1", "fuel_type": "hydrogen", "co2_g_km": 0}]
    with pytest.raises(KeyError, match="hydrogen"):
        run_from_config(write_config(_vehicle_config(vehicles)))


@pytest.mark.parametrize(
    "vehicles, message",
    [
        ([], "at least one vehicle"),
        ([{"id": "A", "fuel_type": "diesel", "co2_g_km": 100}] * 2, "more than once"),
        ([{"fuel_type": "diesel", "co2_g_km": 100}], "must define an 'id'"),
        ([{"id": "A", "co2_g_km": 100}], "must define a 'fuel_type'"),
    ],
)
def test_invalid_vehicle_lists(write_config, vehicles, message):
    with pytest.raises(ValueError, match=message):
        run_from_config(write_config(_vehicle_config(vehicles)))


def test_fuel_type_must_reference_known_sources(write_config):
    config = _vehicle_config()
    config["vehicle_emissions"]["fuel_types"]["lpg"] = ["lpg"]
    with pytest.raises(KeyError, match="unknown energy sources"):
        run_from_config(write_config(config))


def test_energy_source_validation():
    gwp = load_gwp_values(None)
    with pytest.raises(ValueError, match="at least one energy source"):
        load_energy_sources({}, gwp)
    with pytest.raises(ValueError, match="expected one of"):
        load_energy_sources({"biogas": {"scope": 3}}, gwp)

    sources = load_energy_sources(
        {"grid": {"scope": 2, "gas_factors": {"co2": 0.3}, "gwp_values": {"sf6": 22800}}}, gwp
    )
    assert sources["grid"].unit == "kWh"
    assert sources["grid"].gwp_values["sf6"] == 22800.0
    assert sources["grid"].gwp_values["ch4"] == 28.0


def test_zero_co2_vehicle_skips_conversion():
    spec = parse_vehicle_spec({"id": "EV", "fuel_type": "electricity", "co2_g_km": 0})
    assert spec.co2.co2_g_km == 0.0
    assert spec.co2.conversion_factor_used is None
    assert spec.km_travelled == 0.0


def test_fractional_scope_is_rejected():
    gwp = load_gwp_values(None)
    with pytest.raises(ValueError, match="whole numbers"):
        load_energy_sources({"diesel": {"scope": 1.9, "gas_factors": {"co2": 2.64}}}, gwp)

    sources = load_energy_sources({"grid": {"scope": 2.0, "gas_factors": {"co2": 0.3}}}, gwp)
    assert sources["grid"].scope == 2

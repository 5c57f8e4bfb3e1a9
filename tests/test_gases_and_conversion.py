import pytest

from vehicle_emissions.constants import DEFAULT_GWP_AR5, KYOTO_GASES
from vehicle_emissions.conversion import (
    DEFAULT_CONVERSION,
    ConversionConfig,
    convert_nedc_to_wltp,
    convert_wltp_to_nedc,
    resolve_co2_intensity,
)
from vehicle_emissions.gases import merge_per_gas, per_gas_from_mapping, zero_per_gas


def test_per_gas_mapping_is_complete_and_case_insensitive():
    factors = per_gas_from_mapping({"CO2": 2.64, "Ch4": "0.001"})

    assert list(factors) == list(KYOTO_GASES)
    assert factors["co2"] == pytest.approx(2.64)
    assert factors["ch4"] == pytest.approx(0.001)
    assert factors["sf6"] == 0.0


def test_per_gas_mapping_fills_from_defaults():
    gwp = per_gas_from_mapping({"ch4": 25}, defaults=DEFAULT_GWP_AR5)

    assert gwp["ch4"] == 25.0
    assert gwp["n2o"] == 265.0
    assert gwp["nf3"] == 16100.0


def test_per_gas_mapping_rejects_unknown_gas():
    with pytest.raises(KeyError, match="Unknown gas 'co'"):
        per_gas_from_mapping({"co": 1.0}, label="gas_factors of 'diesel'")


def test_per_gas_mapping_rejects_non_numeric_values():
    with pytest.raises(ValueError, match="must be numeric"):
        per_gas_from_mapping({"co2": "lots"})


def test_merge_per_gas_rounds_each_sum():
    left = zero_per_gas()
    right = zero_per_gas()
    left["co2"] = 0.1
    right["co2"] = 0.2
    right["n2o"] = 1.234

    merged = merge_per_gas(left, right)

    assert merged["co2"] == 0.3
    assert merged["n2o"] == 1.23
    assert merged["hfc"] == 0.0


def test_conversion_helpers_round_to_one_decimal():
    assert convert_nedc_to_wltp(100, 1.21) == 121.0
    assert convert_wltp_to_nedc(120, 0.83) == 99.6


def test_resolve_uses_both_values_without_conversion():
    intensity = resolve_co2_intensity(130, 105, "WLTP")

    assert intensity.co2_g_km_wltp == 130.0
    assert intensity.co2_g_km_nedc == 105.0
    assert not intensity.wltp_is_calculated
    assert not intensity.nedc_is_calculated
    assert intensity.conversion_factor_used is None
    assert intensity.co2_g_km == 130.0


def test_resolve_derives_nedc_from_wltp():
    intensity = resolve_co2_intensity(120, None, "WLTP")

    assert intensity.co2_g_km_nedc == 99.6
    assert intensity.nedc_is_calculated
    assert intensity.conversion_factor_used == DEFAULT_CONVERSION.wltp_to_nedc_factor
    assert intensity.co2_g_km == 120.0


def test_resolve_derives_wltp_from_nedc_and_reports_declared_standard():
    intensity = resolve_co2_intensity(None, 100, "NEDC")

    assert intensity.co2_g_km_wltp == 121.0
    assert intensity.wltp_is_calculated
    assert intensity.conversion_factor_used == 1.21
    assert intensity.co2_g_km == 100.0


def test_resolve_treats_zero_as_missing():
    intensity = resolve_co2_intensity(0, 100, "WLTP")

    assert intensity.wltp_is_calculated
    assert intensity.co2_g_km == 121.0


def test_resolve_requires_one_value():
    with pytest.raises(ValueError, match="At least one"):
        resolve_co2_intensity(None, 0, "WLTP")


def test_resolve_rejects_unknown_standard():
    with pytest.raises(ValueError, match="CO₂ standard"):
        resolve_co2_intensity(120, None, "EPA")  # type: ignore[arg-type]


def test_conversion_config_from_partial_mapping():
    conservative = ConversionConfig.from_config({"name": "conservative", "nedc_to_wltp": 1.25})

    assert conservative.name == "conservative"
    assert conservative.nedc_to_wltp_factor == 1.25
    assert conservative.wltp_to_nedc_factor == 0.83
    assert resolve_co2_intensity(None, 100, "WLTP", conservative).co2_g_km == 125.0

    assert ConversionConfig.from_config(None).name == "configured"

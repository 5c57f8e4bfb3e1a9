"""Convert catalogue CO₂ intensities between the NEDC and WLTP test cycles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

from .rounding import round_to

Co2Standard = Literal["WLTP", "NEDC"]

CO2_STANDARDS: tuple[Co2Standard, ...] = ("WLTP", "NEDC")


@dataclass(slots=True)
class ConversionConfig:
    """Multiplicative factors between the two homologation cycles."""

    name: str
    nedc_to_wltp_factor: float
    wltp_to_nedc_factor: float

    @classmethod
    def from_config(
        cls, cfg: Mapping[str, object] | None, *, name: str = "configured"
    ) -> "ConversionConfig":
        cfg = cfg or {}
        return cls(
            name=str(cfg.get("name", name)),
            nedc_to_wltp_factor=float(
                cfg.get("nedc_to_wltp", DEFAULT_CONVERSION.nedc_to_wltp_factor)
            ),
            wltp_to_nedc_factor=float(
                cfg.get("wltp_to_nedc", DEFAULT_CONVERSION.wltp_to_nedc_factor)
            ),
        )


DEFAULT_CONVERSION = ConversionConfig("standard_eu", 1.21, 0.83)


@dataclass(slots=True)
class Co2Intensity:
    """Catalogue CO₂ intensity in both cycles, flagging which one was derived."""

    co2_g_km_wltp: float
    co2_g_km_nedc: float
    wltp_is_calculated: bool
    nedc_is_calculated: bool
    co2_g_km: float  # value in the vehicle's declared standard
    conversion_factor_used: float | None


def convert_nedc_to_wltp(nedc_value: float, factor: float) -> float:
    return round_to(nedc_value * factor, 1)


def convert_wltp_to_nedc(wltp_value: float, factor: float) -> float:
    return round_to(wltp_value * factor, 1)


def resolve_co2_intensity(
    co2_g_km_wltp: float | None,
    co2_g_km_nedc: float | None,
    standard: Co2Standard = "WLTP",
    conversion: ConversionConfig = DEFAULT_CONVERSION,
) -> Co2Intensity:
    """Fill in whichever cycle value is missing.

    A value counts as present only when it is strictly positive. When both are
    present they are used as-is and no factor is applied.
    """
    if standard not in CO2_STANDARDS:
        raise ValueError(f"CO₂ standard must be one of {CO2_STANDARDS}, got {standard!r}.")

    has_wltp = co2_g_km_wltp is not None and co2_g_km_wltp > 0
    has_nedc = co2_g_km_nedc is not None and co2_g_km_nedc > 0

    if has_wltp and has_nedc:
        wltp, nedc = float(co2_g_km_wltp), float(co2_g_km_nedc)
        factor = None
        wltp_calculated = nedc_calculated = False
    elif has_wltp:
        wltp = float(co2_g_km_wltp)
        factor = conversion.wltp_to_nedc_factor
        nedc = convert_wltp_to_nedc(wltp, factor)
        wltp_calculated, nedc_calculated = False, True
    elif has_nedc:
        nedc = float(co2_g_km_nedc)
        factor = conversion.nedc_to_wltp_factor
        wltp = convert_nedc_to_wltp(nedc, factor)
        wltp_calculated, nedc_calculated = True, False
    else:
        raise ValueError("At least one CO₂ value (WLTP or NEDC) must be provided.")

    return Co2Intensity(
        co2_g_km_wltp=wltp,
        co2_g_km_nedc=nedc,
        wltp_is_calculated=wltp_calculated,
        nedc_is_calculated=nedc_calculated,
        co2_g_km=wltp if standard == "WLTP" else nedc,
        conversion_factor_used=factor,
    )

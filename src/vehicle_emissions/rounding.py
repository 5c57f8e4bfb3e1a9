"""Deterministic decimal rounding shared by every reportable quantity.

Values are scaled, rounded half away from zero and scaled back. No string
formatting is involved, so regenerating a report always reproduces the same
floats regardless of locale or platform.
"""

from __future__ import annotations

import math


def round_to(value: float, decimals: int) -> float:
    """Round ``value`` to ``decimals`` places, half away from zero."""
    value = float(value)
    if not math.isfinite(value):
        return value
    scale = 10.0**decimals
    rounded = math.floor(abs(value) * scale + 0.5) / scale
    if value < 0 and rounded:
        return -rounded
    return rounded


def round2(value: float) -> float:
    """Round to two decimal places (kg CO₂e, percentages)."""
    return round_to(value, 2)

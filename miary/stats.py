"""
Numeric primitives shared by every analysis stage.

All reported decimals go through round_half_away so that identical inputs
render identical outputs regardless of float representation quirks.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import numpy as np
import pandas as pd


def round_half_away(value: float, digits: int) -> float:
    """
    Round to `digits` decimals, halves away from zero (2.25 → 2.3, -2.25 → -2.3).

    Works on the shortest decimal repr of the float, so 0.15 rounds to 0.2
    even though its binary value is slightly below 0.15.
    """
    quantum = Decimal(1).scaleb(-digits)
    # ROUND_HALF_UP in decimal rounds halves away from zero
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def ratio(numerator: float, denominator: float, digits: int) -> float:
    """numerator / denominator clamped to [0, 1]; 0 when the denominator is 0."""
    if denominator <= 0:
        return 0.0
    return round_half_away(float(np.clip(numerator / denominator, 0.0, 1.0)), digits)


def rate(flags: pd.Series, digits: int) -> float:
    """Share of True values in a boolean series; 0 for an empty series."""
    return ratio(int(flags.sum()), len(flags), digits)


def rounded_mean(values: pd.Series, digits: int) -> Optional[float]:
    """Mean of the non-null values, or None if there are none."""
    values = values.dropna()
    if values.empty:
        return None
    return round_half_away(float(values.mean()), digits)


def rounded_median(values: pd.Series, digits: int) -> Optional[float]:
    """Median of the non-null values, or None if there are none."""
    values = values.dropna()
    if values.empty:
        return None
    return round_half_away(float(values.median()), digits)


def format_number(value: float) -> str:
    """Render 7.0 as "7" and 6.5 as "6.5" for statements."""
    return f"{value:g}"


def to_percent(value: float) -> int:
    """0.667 → 67."""
    return int(round_half_away(value * 100, 0))

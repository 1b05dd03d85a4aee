"""
Decimal Utilities
ablls_platform/scoring/utils.py

Precision-safe rounding and clamping for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number, places: int = 4) -> Decimal:
    """Convert a number to Decimal with explicit precision."""
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places, rounding=ROUND_HALF_UP
    )


def ratio_percentage(numerator: Number, denominator: Number) -> float:
    """
    Unrounded percentage numerator / denominator × 100.

    Returns 0.0 when denominator is zero or negative.
    """
    if denominator <= 0:
        return 0.0
    return float(numerator) / float(denominator) * 100


def round_percentage(value: Number, places: int = 2) -> float:
    """Round half-up to a fixed number of decimal places (62.505 -> 62.51)."""
    return float(to_decimal(value, places))

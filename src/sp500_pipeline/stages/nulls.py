"""Null-aware arithmetic.

pandas propagates NaN on its own, but a zero denominator yields ``inf`` rather
than a missing value, and plain Python floats have no null at all. These
helpers make the null rules explicit:

- any null operand gives a null result
- a zero denominator gives a null result
- rounding is half-away-from-zero on the decimal representation
"""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

import pandas as pd


def is_null(value: Any) -> bool:
    """Return True for ``None``, NaN and ``pd.NA``/``pd.NaT``."""
    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def safe_divide(numerator: Any, denominator: Any) -> Optional[float]:
    """Return ``numerator / denominator`` or ``None`` if undefined."""
    if is_null(numerator) or is_null(denominator) or denominator == 0:
        return None
    return float(numerator) / float(denominator)


def safe_subtract(left: Any, right: Any) -> Optional[float]:
    if is_null(left) or is_null(right):
        return None
    return float(left) - float(right)


def safe_add(left: Any, right: Any) -> Optional[float]:
    if is_null(left) or is_null(right):
        return None
    return float(left) + float(right)


def round_half_up(value: Any, places: int = 2) -> Optional[float]:
    """Round to `places` decimals, halves away from zero; nulls stay null."""
    if is_null(value):
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_series(series: pd.Series, places: int = 2) -> pd.Series:
    """Apply `round_half_up` element-wise, returning a float64 series."""
    return pd.Series(
        [round_half_up(v, places) for v in series],
        index=series.index,
        dtype="float64",
        name=series.name,
    )


def divide_series(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise division with zero denominators masked to NaN."""
    masked = denominator.astype("float64").where(denominator != 0)
    return numerator.astype("float64") / masked

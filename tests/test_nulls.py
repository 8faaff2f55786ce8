from __future__ import annotations

import numpy as np
import pandas as pd

from sp500_pipeline.stages.nulls import (
    divide_series,
    is_null,
    round_half_up,
    round_series,
    safe_divide,
    safe_subtract,
)


def test_is_null() -> None:
    assert is_null(None)
    assert is_null(float("nan"))
    assert is_null(pd.NA)
    assert not is_null(0.0)
    assert not is_null("x")


def test_safe_divide_never_divides_by_zero() -> None:
    assert safe_divide(1.0, 0) is None
    assert safe_divide(None, 2.0) is None
    assert safe_divide(1.0, 4.0) == 0.25


def test_safe_subtract() -> None:
    assert safe_subtract(np.nan, 1.0) is None
    assert safe_subtract(3.0, 1.0) == 2.0


def test_round_half_up_rounds_halves_away_from_zero() -> None:
    assert round_half_up(2.675) == 2.68
    assert round_half_up(0.125) == 0.13
    assert round_half_up(-1.005) == -1.01
    assert round_half_up(1.23456, 4) == 1.2346
    assert round_half_up(None) is None


def test_round_series_keeps_nan() -> None:
    out = round_series(pd.Series([1.005, np.nan]))
    assert out.iloc[0] == 1.01
    assert np.isnan(out.iloc[1])
    assert out.dtype == np.float64


def test_divide_series_masks_zero() -> None:
    out = divide_series(pd.Series([1.0, 2.0, 3.0]), pd.Series([0.0, 4.0, np.nan]))
    assert np.isnan(out.iloc[0])
    assert out.iloc[1] == 0.5
    assert np.isnan(out.iloc[2])

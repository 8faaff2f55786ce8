from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from sp500_pipeline.stages.modeling import (
    REGRESSION_COLUMNS,
    correlation,
    correlations_table,
    fit_models,
    linear_regression,
    regressions_table,
)


def test_regression_recovers_exact_line() -> None:
    x = [1.0, 2.0, 3.0, 4.0, 5.0]
    y = [2 * v + 3 for v in x]
    model = linear_regression(x, y)
    assert model is not None
    assert model.slope == pytest.approx(2.0, abs=1e-6)
    assert model.intercept == pytest.approx(3.0, abs=1e-6)
    assert model.r_squared == pytest.approx(1.0, abs=1e-6)
    assert model.n_points == 5


def test_regression_two_points() -> None:
    model = linear_regression([0.0, 2.0], [1.0, 5.0])
    assert model is not None
    assert model.slope == pytest.approx(2.0)
    assert model.intercept == pytest.approx(1.0)


def test_regression_noisy_r_squared_below_one() -> None:
    model = linear_regression([1, 2, 3, 4], [1.0, 3.0, 2.0, 4.0])
    assert model is not None
    assert model.slope == pytest.approx(0.8)
    assert model.intercept == pytest.approx(0.5)
    assert model.r_squared == pytest.approx(0.64)


def test_regression_undefined_cases() -> None:
    assert linear_regression([1.0], [2.0]) is None
    assert linear_regression([3.0, 3.0, 3.0], [1.0, 2.0, 3.0]) is None
    assert linear_regression([], []) is None


def test_regression_flat_y_fits_exactly() -> None:
    model = linear_regression([1.0, 2.0, 3.0], [4.0, 4.0, 4.0])
    assert model is not None
    assert model.slope == 0.0
    assert model.r_squared == 1.0


def test_correlation_with_itself_is_one() -> None:
    x = [0.1, 0.7, 0.3, 2.5, 1.9]
    assert correlation(x, x) == pytest.approx(1.0)
    assert correlation(x, [-v for v in x]) == pytest.approx(-1.0)


def test_correlation_constant_sequence_is_undefined() -> None:
    assert correlation([0.1, 0.1, 0.1], [1.0, 2.0, 3.0]) is None
    assert correlation([1.0, 2.0, 3.0], [5.0, 5.0, 5.0]) is None
    assert correlation([1.0], [2.0]) is None


def test_pairs_with_missing_values_are_dropped() -> None:
    assert correlation([1.0, 2.0, None, 4.0], [2.0, 4.0, 100.0, 8.0]) == pytest.approx(1.0)
    model = linear_regression(pd.Series([1.0, np.nan, 3.0]), pd.Series([5.0, 6.0, 9.0]))
    assert model is not None
    assert model.n_points == 2
    assert model.slope == pytest.approx(2.0)


def test_unequal_lengths_raise() -> None:
    with pytest.raises(ValueError):
        correlation([1.0, 2.0], [1.0])


def _yearly() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": [2000, 2001, 2002, 2003],
            "avg_real_price": [100.0, 120.0, 140.0, 160.0],
            "avg_real_earnings": [5.0, 6.0, 7.0, 8.0],
            "avg_cpi": [170.0, 170.0, 170.0, 170.0],
        }
    )


def test_correlations_table_rounds_to_three_places() -> None:
    out = correlations_table(_yearly())
    assert out.shape == (1, 3)
    assert out.loc[0, "corr_price_earnings"] == 1.0
    assert np.isnan(out.loc[0, "corr_price_cpi"])
    assert np.isnan(out.loc[0, "corr_earnings_cpi"])


def test_fit_models_and_table() -> None:
    models = fit_models(_yearly())
    assert models["price_vs_cpi"] is None
    assert models["price_vs_year"] is not None
    out = regressions_table(models)
    assert list(out.columns) == REGRESSION_COLUMNS
    by_model = out.set_index("model")
    assert by_model.loc["price_vs_year", "slope"] == 20.0
    assert by_model.loc["price_vs_earnings", "slope"] == 20.0
    assert by_model.loc["price_vs_earnings", "intercept"] == 0.0
    assert np.isnan(by_model.loc["price_vs_cpi", "slope"])
    assert by_model.loc["price_vs_cpi", "n_points"] == 0


def test_empty_yearly_table_gives_null_statistics() -> None:
    empty = _yearly().iloc[0:0]
    assert correlations_table(empty).isna().all(axis=None)
    assert all(m is None for m in fit_models(empty).values())

from __future__ import annotations

import pytest

from sp500_pipeline.models import RegressionModel
from sp500_pipeline.stages.forecast import (
    FORECAST_COLUMNS,
    forecast,
    forecast_table,
    forecast_years,
)

MODEL = RegressionModel(slope=41.62, intercept=2832.18, r_squared=0.8123456, n_points=74)


def test_forecast_years_follow_last_observed_year() -> None:
    assert forecast_years(2023, 7) == [2024, 2025, 2026, 2027, 2028, 2029, 2030]
    assert forecast_years(2023, 0) == []
    with pytest.raises(ValueError):
        forecast_years(2023, -1)


def test_forecast_is_linear_and_rounded() -> None:
    (point,) = forecast(MODEL, [2024])
    assert point.period == 2024
    assert point.predicted_value == pytest.approx(round(2832.18 + 41.62 * 2024, 2), abs=0.01)
    assert point.predicted_value == pytest.approx(87071.06, abs=0.01)


def test_forecast_table_columns_and_rows() -> None:
    out = forecast_table(MODEL, 2023, 7)
    assert list(out.columns) == FORECAST_COLUMNS
    assert out["year"].tolist() == list(range(2024, 2031))
    steps = out["forecast_real_price"].diff().dropna()
    assert steps.tolist() == pytest.approx([41.62] * 6, abs=0.011)
    assert (out["r_squared"] == 0.8123).all()
    assert (out["intercept"] == 2832.18).all()


def test_forecast_table_without_model_is_empty() -> None:
    out = forecast_table(None, 2023, 7)
    assert out.empty
    assert list(out.columns) == FORECAST_COLUMNS
    assert forecast_table(MODEL, None, 7).empty

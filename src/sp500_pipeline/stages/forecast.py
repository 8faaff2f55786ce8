"""Linear trend forecast.

The trend is the OLS fit of the yearly average real price against the year.
Future values are read straight off that line: no confidence band, no
mean reversion and no damping, so the forecast grows without bound as the
horizon lengthens. Treat it as a naive trend line, not a price target.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, cast

import pandas as pd

from sp500_pipeline.models import ForecastPoint, RegressionModel
from sp500_pipeline.stages.nulls import round_half_up

log = logging.getLogger(__name__)

FORECAST_COLUMNS = ["year", "forecast_real_price", "slope", "intercept", "r_squared"]


def forecast_years(last_year: int, horizon: int) -> list[int]:
    """The `horizon` consecutive years after `last_year`."""
    if horizon < 0:
        raise ValueError(f"forecast horizon must not be negative, got {horizon}")
    return list(range(last_year + 1, last_year + 1 + horizon))


def forecast(model: RegressionModel, years: Iterable[int]) -> list[ForecastPoint]:
    """Evaluate ``intercept + slope * year`` for each year, rounded to 2 dp."""
    points = []
    for year in years:
        value = cast(float, round_half_up(model.predict(year), 2))
        points.append(ForecastPoint(period=year, predicted_value=value))
    return points


def forecast_table(
    model: Optional[RegressionModel], last_year: Optional[int], horizon: int
) -> pd.DataFrame:
    """Tabulate the forecast together with the trend parameters.

    Returns an empty table when there is no fitted trend or no observed year.
    """
    if model is None or last_year is None:
        log.warning("No price trend available; forecast table is empty")
        return pd.DataFrame(columns=FORECAST_COLUMNS)

    points = forecast(model, forecast_years(last_year, horizon))
    out = pd.DataFrame(
        {
            "year": [p.period for p in points],
            "forecast_real_price": [p.predicted_value for p in points],
            "slope": round_half_up(model.slope, 4),
            "intercept": round_half_up(model.intercept, 2),
            "r_squared": round_half_up(model.r_squared, 4),
        },
        columns=FORECAST_COLUMNS,
    )
    log.info("Forecast %d years after %d (slope=%.4f)", len(out), last_year, model.slope)
    return out

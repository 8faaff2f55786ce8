"""Analysis pipeline: observations in, named result tables out.

Stage order:

    validated observations
      -> year-range filter
      -> per-observation tables (base metrics, derived metrics, rolling stats,
         period returns)
      -> yearly averages -> yearly growth -> decade summary, inflation cycles
      -> correlations, regressions -> price forecast

Every stage returns a new frame; nothing is mutated in place. The dataset is
passed explicitly from stage to stage.
"""
from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from sp500_pipeline.clean.transform import filter_year_range
from sp500_pipeline.clean.validate import validate_observations
from sp500_pipeline.config import Settings
from sp500_pipeline.stages import derived, forecast, growth, modeling, rolling, temporal

log = logging.getLogger(__name__)

TABLE_NAMES = (
    "base_metrics",
    "derived_metrics",
    "yearly_averages",
    "yearly_growth",
    "decade_summary",
    "inflation_cycles",
    "rolling_stats",
    "period_returns",
    "correlations",
    "regressions",
    "price_forecast",
)


def _last_year(yearly: pd.DataFrame) -> Optional[int]:
    if yearly.empty:
        return None
    return int(yearly["year"].max())


def run_analysis(
    observations: pd.DataFrame, settings: Settings | None = None
) -> dict[str, pd.DataFrame]:
    """Validate `observations` and compute every result table.

    Args:
        observations: Raw observation frame (schema columns, ordered by date).
        settings: Analysis configuration; defaults to `Settings()`.

    Returns:
        Mapping of table name (see `TABLE_NAMES`) to DataFrame.

    Raises:
        SchemaViolation: if the input does not match the observation schema.
        ValueError: if the rolling window width is smaller than one or the
            forecast horizon is negative.
    """
    settings = settings or Settings()
    if settings.rolling_window_width < 1:
        raise ValueError(
            f"rolling_window_width must be at least 1, got {settings.rolling_window_width}"
        )
    if settings.forecast_horizon_years < 0:
        raise ValueError(
            f"forecast_horizon_years must not be negative, got {settings.forecast_horizon_years}"
        )

    pdf = validate_observations(observations)
    pdf = filter_year_range(pdf, settings.analysis_start_year, settings.analysis_end_year)

    yearly = temporal.yearly_averages(pdf)
    yearly_growth = growth.yearly_growth(yearly)
    models = modeling.fit_models(yearly)

    tables = {
        "base_metrics": derived.base_metrics_table(pdf),
        "derived_metrics": derived.derived_metrics_table(pdf, settings.thresholds),
        "yearly_averages": yearly,
        "yearly_growth": yearly_growth,
        "decade_summary": temporal.decade_summary(yearly_growth),
        "inflation_cycles": growth.inflation_cycles(yearly_growth),
        "rolling_stats": rolling.rolling_stats(pdf, settings.rolling_window_width),
        "period_returns": growth.period_returns(pdf),
        "correlations": modeling.correlations_table(yearly),
        "regressions": modeling.regressions_table(models),
        "price_forecast": forecast.forecast_table(
            models["price_vs_year"], _last_year(yearly), settings.forecast_horizon_years
        ),
    }

    log.info(
        "Analysis complete for %d-%d: %s",
        settings.analysis_start_year,
        settings.analysis_end_year,
        ", ".join(f"{name}={len(df)}" for name, df in tables.items()),
    )
    return tables

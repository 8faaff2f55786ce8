"""Correlation and simple linear regression over yearly aggregates.

Both statistics work on aligned (x, y) pairs after dropping every pair with a
missing side. They are undefined (None) with fewer than two pairs or when a
sequence has zero variance; undefined results are logged, never raised.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import numpy as np
import pandas as pd

from sp500_pipeline.models import RegressionModel
from sp500_pipeline.stages.nulls import is_null, round_half_up

log = logging.getLogger(__name__)

# name -> (x column, y column) in yearly_averages; year is the row key
REGRESSIONS: dict[str, tuple[str, str]] = {
    "price_vs_earnings": ("avg_real_earnings", "avg_real_price"),
    "price_vs_cpi": ("avg_cpi", "avg_real_price"),
    "price_vs_year": ("year", "avg_real_price"),
}

# name -> (x column, y column)
CORRELATIONS: dict[str, tuple[str, str]] = {
    "corr_price_earnings": ("avg_real_price", "avg_real_earnings"),
    "corr_price_cpi": ("avg_real_price", "avg_cpi"),
    "corr_earnings_cpi": ("avg_real_earnings", "avg_cpi"),
}

REGRESSION_COLUMNS = ["model", "slope", "intercept", "r_squared", "n_points"]


def _as_array(values: Sequence[Any] | pd.Series) -> np.ndarray:
    return np.asarray([np.nan if is_null(v) else float(v) for v in values], dtype="float64")


def paired(
    x: Sequence[Any] | pd.Series, y: Sequence[Any] | pd.Series
) -> tuple[np.ndarray, np.ndarray]:
    """Align two sequences and drop pairs where either value is missing.

    Raises:
        ValueError: if the sequences differ in length.
    """
    xa = _as_array(x)
    ya = _as_array(y)
    if len(xa) != len(ya):
        raise ValueError(f"sequences must have equal length ({len(xa)} != {len(ya)})")
    keep = ~(np.isnan(xa) | np.isnan(ya))
    return xa[keep], ya[keep]


def _constant(values: np.ndarray) -> bool:
    return bool(values.max() == values.min())


def correlation(x: Sequence[Any] | pd.Series, y: Sequence[Any] | pd.Series) -> Optional[float]:
    """Pearson product-moment correlation, or None when undefined."""
    xa, ya = paired(x, y)
    if len(xa) < 2 or _constant(xa) or _constant(ya):
        return None
    dx = xa - xa.mean()
    dy = ya - ya.mean()
    r = float(np.sum(dx * dy) / np.sqrt(np.sum(dx * dx) * np.sum(dy * dy)))
    return max(-1.0, min(1.0, r))


def linear_regression(
    x: Sequence[Any] | pd.Series, y: Sequence[Any] | pd.Series
) -> Optional[RegressionModel]:
    """Closed-form OLS fit of ``y = slope * x + intercept``.

    ``slope = cov(x, y) / var(x)``, ``intercept = mean(y) - slope * mean(x)``
    and ``r_squared = 1 - SS_res / SS_tot``. A perfectly flat `y` is fitted
    exactly, so its r_squared is 1.

    Returns:
        The fitted model, or None with fewer than two pairs or constant `x`.
    """
    xa, ya = paired(x, y)
    if len(xa) < 2 or _constant(xa):
        return None

    x_mean = xa.mean()
    y_mean = ya.mean()
    dx = xa - x_mean
    slope = float(np.sum(dx * (ya - y_mean)) / np.sum(dx * dx))
    intercept = float(y_mean - slope * x_mean)

    residuals = ya - (intercept + slope * xa)
    ss_res = float(np.sum(residuals * residuals))
    if _constant(ya):
        r_squared = 1.0
    else:
        ss_tot = float(np.sum((ya - y_mean) ** 2))
        r_squared = 1.0 - ss_res / ss_tot

    return RegressionModel(
        slope=slope, intercept=intercept, r_squared=r_squared, n_points=len(xa)
    )


def correlations_table(yearly: pd.DataFrame, places: int = 3) -> pd.DataFrame:
    """One-row table of pairwise correlations between yearly averages."""
    row: dict[str, Optional[float]] = {}
    for name, (x_col, y_col) in CORRELATIONS.items():
        r = correlation(yearly[x_col], yearly[y_col]) if not yearly.empty else None
        if r is None:
            log.warning("Correlation %s is undefined for %d years", name, len(yearly))
        row[name] = round_half_up(r, places)
    return pd.DataFrame([row], columns=list(CORRELATIONS.keys()), dtype="float64")


def fit_models(yearly: pd.DataFrame) -> dict[str, Optional[RegressionModel]]:
    """Fit every configured regression over the yearly averages."""
    models: dict[str, Optional[RegressionModel]] = {}
    for name, (x_col, y_col) in REGRESSIONS.items():
        model = linear_regression(yearly[x_col], yearly[y_col]) if not yearly.empty else None
        if model is None:
            log.warning("Regression %s is undefined for %d years", name, len(yearly))
        models[name] = model
    return models


def regressions_table(
    models: dict[str, Optional[RegressionModel]], places: int = 4
) -> pd.DataFrame:
    """Tabulate fitted models; undefined fits keep their row with null values."""
    rows = []
    for name, model in models.items():
        rows.append(
            {
                "model": name,
                "slope": round_half_up(model.slope, places) if model else None,
                "intercept": round_half_up(model.intercept, places) if model else None,
                "r_squared": round_half_up(model.r_squared, places) if model else None,
                "n_points": model.n_points if model else 0,
            }
        )
    out = pd.DataFrame(rows, columns=REGRESSION_COLUMNS)
    for col in ("slope", "intercept", "r_squared"):
        out[col] = out[col].astype("float64")
    return out

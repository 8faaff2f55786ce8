"""Sequential (period-over-period) growth.

For an ordered series ``v``, ``growth[i] = (v[i] - v[i-1]) / v[i-1] * 100``.
The first element has no predecessor and gets no growth; a zero or missing
predecessor also gives no growth. Each metric column is processed on its own.
"""
from __future__ import annotations

import logging
from typing import Mapping

import pandas as pd

from sp500_pipeline.stages import classify
from sp500_pipeline.stages.nulls import divide_series, round_series
from sp500_pipeline.stages.parallel import compute_columns, merge_on

log = logging.getLogger(__name__)

# yearly_averages column -> growth column
GROWTH_COLUMNS: dict[str, str] = {
    "avg_real_price": "price_growth_percent",
    "avg_real_earnings": "earnings_growth_percent",
    "avg_real_dividend": "dividend_growth_percent",
    "avg_cpi": "cpi_growth_percent",
}

YEARLY_GROWTH_COLUMNS = ["year", *GROWTH_COLUMNS.keys(), *GROWTH_COLUMNS.values()]

INFLATION_CYCLE_COLUMNS = [
    "year",
    "avg_real_price",
    "avg_cpi",
    "real_price_growth",
    "inflation_rate",
    "market_cycle_status",
]

PERIOD_RETURN_COLUMNS = ["date", "nominal_return", "real_return", "inflation_impact"]


def percent_change(values: pd.Series) -> pd.Series:
    """Unrounded growth of each element over the previous one, in percent."""
    values = values.astype("float64")
    previous = values.shift(1)
    return divide_series(values - previous, previous) * 100


def growth_rates(values: pd.Series, places: int = 2) -> pd.Series:
    """Rounded growth of an ordered series (first element missing)."""
    return round_series(percent_change(values), places)


def growth_column(frame: pd.DataFrame, key: str, source: str, target: str) -> pd.DataFrame:
    """Return ``[key, target]`` with the growth of `frame[source]`."""
    ordered = frame.sort_values(key, kind="stable")
    return pd.DataFrame(
        {key: ordered[key].values, target: growth_rates(ordered[source]).values}
    )


def yearly_growth(
    yearly: pd.DataFrame, columns: Mapping[str, str] | None = None
) -> pd.DataFrame:
    """Attach a YoY growth column for each yearly average.

    Args:
        yearly: Output of `temporal.yearly_averages`.
        columns: Mapping of average column to growth column
            (defaults to `GROWTH_COLUMNS`).

    Returns:
        DataFrame ordered by `year` with the averages followed by the growth
        columns.
    """
    columns = dict(columns or GROWTH_COLUMNS)
    out_cols = ["year", *columns.keys(), *columns.values()]
    if yearly.empty:
        return pd.DataFrame(columns=out_cols)

    base = yearly.sort_values("year", kind="stable")[["year", *columns.keys()]]
    base = base.reset_index(drop=True)
    parts = compute_columns(
        growth_column, [(base, "year", src, dst) for src, dst in columns.items()]
    )
    out = merge_on("year", base, parts)
    log.info("Yearly growth computed for %d years x %d metrics", len(out), len(columns))
    return out[out_cols]


def inflation_cycles(growth: pd.DataFrame) -> pd.DataFrame:
    """Compare yearly real price growth against CPI growth (inflation rate).

    The first year has no prior year, so both growth values and its
    `market_cycle_status` are null rather than "Stable phase".
    """
    if growth.empty:
        return pd.DataFrame(columns=INFLATION_CYCLE_COLUMNS)

    out = pd.DataFrame(
        {
            "year": growth["year"],
            "avg_real_price": growth["avg_real_price"],
            "avg_cpi": growth["avg_cpi"],
            "real_price_growth": growth["price_growth_percent"],
            "inflation_rate": growth["cpi_growth_percent"],
        }
    )
    out["market_cycle_status"] = classify.label_series(
        classify.inflation_cycle, out["real_price_growth"], out["inflation_rate"]
    )
    return out[INFLATION_CYCLE_COLUMNS].reset_index(drop=True)


def period_returns(pdf: pd.DataFrame) -> pd.DataFrame:
    """Observation-to-observation nominal and real returns.

    `inflation_impact` is the nominal return minus the real return, computed
    before rounding.
    """
    if pdf.empty:
        return pd.DataFrame(columns=PERIOD_RETURN_COLUMNS)

    ordered = pdf.sort_values("date", kind="stable").reset_index(drop=True)
    nominal = percent_change(ordered["nominal_price"])
    real = percent_change(ordered["real_price"])
    return pd.DataFrame(
        {
            "date": ordered["date"],
            "nominal_return": round_series(nominal),
            "real_return": round_series(real),
            "inflation_impact": round_series(nominal - real),
        }
    )[PERIOD_RETURN_COLUMNS]

"""Temporal aggregation: calendar-year and decade averages.

Groups are formed only from keys present in the data, so a year or decade
with no observations never appears. Means skip missing values; a group whose
values are all missing yields a missing mean. Year-range filtering happens
before this stage (see `clean.transform.filter_year_range`).
"""
from __future__ import annotations

import logging
from typing import Mapping

import pandas as pd

from sp500_pipeline.stages.nulls import round_series

log = logging.getLogger(__name__)

# observation column -> yearly_averages column
YEARLY_COLUMNS: dict[str, str] = {
    "real_price": "avg_real_price",
    "real_earnings": "avg_real_earnings",
    "real_dividend": "avg_real_dividend",
    "pe10": "avg_pe10",
    "consumer_price_index": "avg_cpi",
    "long_interest_rate": "avg_long_interest_rate",
    "nominal_price": "avg_nominal_price",
}

# yearly_growth column -> decade_summary column
DECADE_COLUMNS: dict[str, str] = {
    "avg_real_price": "decade_avg_price",
    "avg_real_earnings": "decade_avg_earnings",
    "avg_real_dividend": "decade_avg_dividend",
    "price_growth_percent": "avg_price_growth_percent",
    "earnings_growth_percent": "avg_earnings_growth_percent",
    "dividend_growth_percent": "avg_dividend_growth_percent",
}


def year_of(dates: pd.Series) -> pd.Series:
    """Calendar year of each date."""
    return pd.to_datetime(dates).dt.year.astype("int64")


def decade_of(years: pd.Series) -> pd.Series:
    """Decade key, ``floor(year / 10) * 10``."""
    return (years.astype("int64") // 10) * 10


def group_means(
    frame: pd.DataFrame,
    keys: pd.Series,
    columns: Mapping[str, str],
    key_name: str,
    places: int = 2,
) -> pd.DataFrame:
    """Average `columns` of `frame` per distinct key, ascending by key.

    Args:
        frame: Input rows.
        keys: Grouping key aligned with `frame`'s index.
        columns: Mapping of source column to output column name.
        key_name: Name of the key column in the output.
        places: Decimal places of the rounded means.

    Returns:
        DataFrame with `key_name` followed by the renamed mean columns.
    """
    out_cols = [key_name, *columns.values()]
    if frame.empty:
        return pd.DataFrame(columns=out_cols)

    src = list(columns.keys())
    data = frame[src].astype("float64").assign(**{key_name: keys.values})
    means = data.groupby(key_name, sort=True)[src].mean()

    out = means.rename(columns=dict(columns)).reset_index()
    for col in columns.values():
        out[col] = round_series(out[col], places)
    out[key_name] = out[key_name].astype("int64")
    return out[out_cols]


def yearly_averages(pdf: pd.DataFrame) -> pd.DataFrame:
    """Return one row per calendar year with the mean of each base metric.

    Args:
        pdf: Ordered, range-filtered observation frame.

    Returns:
        DataFrame with `year` and the `avg_*` columns of `YEARLY_COLUMNS`,
        rounded to two decimals.
    """
    if pdf.empty:
        return group_means(pdf, pd.Series(dtype="int64"), YEARLY_COLUMNS, "year")
    out = group_means(pdf, year_of(pdf["date"]), YEARLY_COLUMNS, "year")
    log.info("Yearly averages: %d years from %d observations", len(out), len(pdf))
    return out


def decade_summary(yearly_growth: pd.DataFrame) -> pd.DataFrame:
    """Roll the yearly growth table up into decades.

    Each decade value is the unweighted mean of the (already rounded) yearly
    averages and yearly growth rates of the years present in that decade.
    """
    if yearly_growth.empty:
        return group_means(yearly_growth, pd.Series(dtype="int64"), DECADE_COLUMNS, "decade")
    out = group_means(
        yearly_growth, decade_of(yearly_growth["year"]), DECADE_COLUMNS, "decade"
    )
    log.info("Decade summary: %d decades", len(out))
    return out

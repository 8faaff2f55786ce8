"""Fixed-width trailing window statistics over the raw observation series.

The frame for position ``i`` is ``[i - width + 1, i]``: right-aligned, never
centered and never wider than `width`. Positions with fewer than `width`
observations of history produce no value, and so does a window holding a
missing observation.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional

import numpy as np
import pandas as pd

from sp500_pipeline.stages import classify
from sp500_pipeline.stages.nulls import round_series
from sp500_pipeline.stages.parallel import compute_columns, merge_on

log = logging.getLogger(__name__)

ROLLING_COLUMNS = ["date", "real_price", "moving_average", "rolling_volatility", "market_cycle"]


def trailing_windows(values: pd.Series, width: int) -> Iterator[Optional[np.ndarray]]:
    """Yield the trailing window ending at each position, or None.

    None is yielded while fewer than `width` values are available and for
    windows that contain a missing value.
    """
    if width < 1:
        raise ValueError(f"window width must be at least 1, got {width}")
    arr = values.to_numpy(dtype="float64")
    for end in range(len(arr)):
        start = end - width + 1
        if start < 0:
            yield None
            continue
        window = arr[start : end + 1]
        yield None if np.isnan(window).any() else window


def trailing_mean(values: pd.Series, width: int) -> pd.Series:
    """Moving average over the trailing `width` observations (unrounded)."""
    return pd.Series(
        [np.nan if w is None else float(np.mean(w)) for w in trailing_windows(values, width)],
        index=values.index,
        dtype="float64",
    )


def trailing_std(values: pd.Series, width: int) -> pd.Series:
    """Sample standard deviation (n-1) over the trailing window.

    A one-wide window has no spread, so its deviation is 0.
    """
    ddof = 1 if width > 1 else 0
    return pd.Series(
        [
            np.nan if w is None else float(np.std(w, ddof=ddof))
            for w in trailing_windows(values, width)
        ],
        index=values.index,
        dtype="float64",
    )


def _rolling_column(
    ordered: pd.DataFrame, source: str, target: str, width: int, stat: str
) -> pd.DataFrame:
    fn = trailing_mean if stat == "mean" else trailing_std
    return pd.DataFrame({"date": ordered["date"].values, target: fn(ordered[source], width).values})


def rolling_stats(pdf: pd.DataFrame, width: int = 12) -> pd.DataFrame:
    """Return the moving average, rolling volatility and market cycle of real price.

    Args:
        pdf: Ordered, range-filtered observation frame.
        width: Trailing window size.

    Returns:
        DataFrame with `date`, `real_price`, `moving_average`,
        `rolling_volatility` (both rounded to two decimals) and the
        bull/bear `market_cycle` label decided on the unrounded average.
    """
    if width < 1:
        raise ValueError(f"window width must be at least 1, got {width}")
    if pdf.empty:
        return pd.DataFrame(columns=ROLLING_COLUMNS)

    ordered = pdf.sort_values("date", kind="stable").reset_index(drop=True)
    base = ordered[["date", "real_price"]]
    ma, vol = compute_columns(
        _rolling_column,
        [
            (base, "real_price", "moving_average", width, "mean"),
            (base, "real_price", "rolling_volatility", width, "std"),
        ],
    )
    out = merge_on("date", base, [ma, vol])
    out["market_cycle"] = classify.label_series(
        classify.market_cycle, out["real_price"], out["moving_average"]
    )
    out["moving_average"] = round_series(out["moving_average"])
    out["rolling_volatility"] = round_series(out["rolling_volatility"])
    out["real_price"] = round_series(out["real_price"])
    log.info("Rolling stats (width=%d) computed for %d observations", width, len(out))
    return out[ROLLING_COLUMNS]

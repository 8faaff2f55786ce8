"""Threshold classifiers over already-computed metrics.

Every classifier is a pure function of its inputs. A null input produces a
null label instead of falling through to a default bucket. Boundary values
go where the comparison operators below put them: PE10 of exactly 10 or 25
is fairly valued, a zero equity premium gap favours bonds, a price equal to
its moving average is a bear market.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

import pandas as pd

from sp500_pipeline.config import Thresholds
from sp500_pipeline.stages.nulls import is_null

UNDERVALUED = "Undervalued"
FAIRLY_VALUED = "Fairly Valued"
OVERVALUED = "Overvalued"

EQUITY_OUTPERFORMING = "Equity outperforming Bonds"
BONDS_OUTPERFORMING = "Bonds outperforming Equities (Risk Zone)"

BULL_MARKET = "Bull Market"
BEAR_MARKET = "Bear Market"

RECESSION_RISK = "Potential Recession"
STABLE = "Stable"

POSITIVE_CYCLE = "Market outperforming inflation (Positive Cycle)"
NEGATIVE_CYCLE = "Market lagging inflation (Negative Cycle)"
STABLE_PHASE = "Stable phase"

DEFAULT_THRESHOLDS = Thresholds()


def valuation_status(pe10: Any, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> Optional[str]:
    """Classify a PE10 (CAPE) value into a valuation band."""
    if is_null(pe10):
        return None
    if pe10 < thresholds.pe10_undervalued:
        return UNDERVALUED
    if pe10 <= thresholds.pe10_overvalued:
        return FAIRLY_VALUED
    return OVERVALUED


def market_condition(
    equity_premium_gap: Any, thresholds: Thresholds = DEFAULT_THRESHOLDS
) -> Optional[str]:
    """Equities vs bonds, from dividend yield minus the long-term rate."""
    if is_null(equity_premium_gap):
        return None
    if equity_premium_gap > thresholds.equity_premium_neutral:
        return EQUITY_OUTPERFORMING
    return BONDS_OUTPERFORMING


def market_cycle(real_price: Any, moving_average: Any) -> Optional[str]:
    """Bull when the price sits above its trailing moving average."""
    if is_null(real_price) or is_null(moving_average):
        return None
    return BULL_MARKET if real_price > moving_average else BEAR_MARKET


def economic_signal(long_interest_rate: Any, earnings_yield: Any) -> Optional[str]:
    """Flag recession risk when bonds yield more than equities earn."""
    if is_null(long_interest_rate) or is_null(earnings_yield):
        return None
    return RECESSION_RISK if long_interest_rate > earnings_yield else STABLE


def inflation_cycle(price_growth: Any, cpi_growth: Any) -> Optional[str]:
    """Compare a period's real price growth to its inflation rate."""
    if is_null(price_growth) or is_null(cpi_growth):
        return None
    if price_growth > cpi_growth:
        return POSITIVE_CYCLE
    if price_growth < cpi_growth:
        return NEGATIVE_CYCLE
    return STABLE_PHASE


def label_series(fn: Callable[..., Optional[str]], *columns: pd.Series) -> pd.Series:
    """Apply a classifier row-wise over aligned columns."""
    index = columns[0].index if columns else None
    return pd.Series(
        [fn(*values) for values in zip(*columns)],
        index=index,
        dtype="object",
    )

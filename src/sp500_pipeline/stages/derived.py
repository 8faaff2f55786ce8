"""Per-observation ratio metrics.

Each ratio is a pure function of one observation. Values are carried
unrounded between chained computations (e.g. the equity premium gap is built
from the unrounded dividend yield) and rounded to two decimals only when a
result table is produced.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd

from sp500_pipeline.config import Thresholds
from sp500_pipeline.models import DerivedMetrics, Observation
from sp500_pipeline.stages import classify
from sp500_pipeline.stages.nulls import (
    round_half_up,
    safe_add,
    safe_divide,
    safe_subtract,
)

log = logging.getLogger(__name__)

BASE_METRICS_COLUMNS = [
    "date",
    "real_price",
    "real_earnings",
    "real_dividend",
    "pe_ratio",
    "dividend_yield",
]

DERIVED_METRICS_COLUMNS = [
    "date",
    "pe_ratio",
    "dividend_yield",
    "earnings_yield",
    "total_fundamental_yield",
    "long_interest_rate",
    "equity_premium_gap",
    "pe10",
    "valuation_status",
    "market_condition",
    "economic_signal",
]


def _percent(value: Optional[float]) -> Optional[float]:
    return None if value is None else value * 100


def pe_ratio(real_price: Any, real_earnings: Any) -> Optional[float]:
    """Price / earnings; null for zero or missing earnings."""
    return safe_divide(real_price, real_earnings)


def dividend_yield(real_dividend: Any, real_price: Any) -> Optional[float]:
    """Dividend / price * 100; null for zero or missing price."""
    return _percent(safe_divide(real_dividend, real_price))


def earnings_yield(real_earnings: Any, real_price: Any) -> Optional[float]:
    return _percent(safe_divide(real_earnings, real_price))


def total_fundamental_yield(
    real_dividend: Any, real_earnings: Any, real_price: Any
) -> Optional[float]:
    """(Dividend + earnings) / price * 100."""
    return _percent(safe_divide(safe_add(real_dividend, real_earnings), real_price))


def equity_premium_gap(div_yield: Any, long_interest_rate: Any) -> Optional[float]:
    """Dividend yield minus the long-term bond rate, in percentage points."""
    return safe_subtract(div_yield, long_interest_rate)


def compute_metrics(
    real_price: Any,
    real_earnings: Any,
    real_dividend: Any,
    long_interest_rate: Any,
) -> DerivedMetrics:
    """Compute every derived ratio from raw field values."""
    div_yield = dividend_yield(real_dividend, real_price)
    return DerivedMetrics(
        pe_ratio=pe_ratio(real_price, real_earnings),
        dividend_yield=div_yield,
        earnings_yield=earnings_yield(real_earnings, real_price),
        total_fundamental_yield=total_fundamental_yield(real_dividend, real_earnings, real_price),
        equity_premium_gap=equity_premium_gap(div_yield, long_interest_rate),
    )


def derive_metrics(observation: Observation) -> DerivedMetrics:
    """Compute the derived ratios of a validated `Observation`."""
    return compute_metrics(
        observation.real_price,
        observation.real_earnings,
        observation.real_dividend,
        observation.long_interest_rate,
    )


def base_metrics_table(pdf: pd.DataFrame) -> pd.DataFrame:
    """Return rounded base fields with P/E and dividend yield per observation.

    Args:
        pdf: Ordered observation frame.

    Returns:
        DataFrame with columns `date`, `real_price`, `real_earnings`,
        `real_dividend`, `pe_ratio`, `dividend_yield`.
    """
    rows: list[dict[str, Any]] = []
    for rec in pdf.to_dict(orient="records"):
        rows.append(
            {
                "date": rec["date"],
                "real_price": round_half_up(rec["real_price"]),
                "real_earnings": round_half_up(rec["real_earnings"]),
                "real_dividend": round_half_up(rec["real_dividend"]),
                "pe_ratio": round_half_up(pe_ratio(rec["real_price"], rec["real_earnings"])),
                "dividend_yield": round_half_up(
                    dividend_yield(rec["real_dividend"], rec["real_price"])
                ),
            }
        )
    return _frame(rows, BASE_METRICS_COLUMNS)


def derived_metrics_table(
    pdf: pd.DataFrame, thresholds: Thresholds | None = None
) -> pd.DataFrame:
    """Return every derived ratio and its classification labels per observation.

    Labels are decided on unrounded values; only the emitted numbers are
    rounded to two decimals.
    """
    thresholds = thresholds or Thresholds()
    rows: list[dict[str, Any]] = []
    for rec in pdf.to_dict(orient="records"):
        m = compute_metrics(
            rec["real_price"],
            rec["real_earnings"],
            rec["real_dividend"],
            rec["long_interest_rate"],
        )
        rows.append(
            {
                "date": rec["date"],
                "pe_ratio": round_half_up(m.pe_ratio),
                "dividend_yield": round_half_up(m.dividend_yield),
                "earnings_yield": round_half_up(m.earnings_yield),
                "total_fundamental_yield": round_half_up(m.total_fundamental_yield),
                "long_interest_rate": round_half_up(rec["long_interest_rate"]),
                "equity_premium_gap": round_half_up(m.equity_premium_gap),
                "pe10": round_half_up(rec["pe10"]),
                "valuation_status": classify.valuation_status(rec["pe10"], thresholds),
                "market_condition": classify.market_condition(m.equity_premium_gap, thresholds),
                "economic_signal": classify.economic_signal(
                    rec["long_interest_rate"], m.earnings_yield
                ),
            }
        )
    log.info("Derived metrics computed for %d observations", len(rows))
    return _frame(rows, DERIVED_METRICS_COLUMNS)


def _frame(rows: list[dict[str, Any]], columns: list[str]) -> pd.DataFrame:
    """Build a table with a stable column order, also when there are no rows."""
    return pd.DataFrame(rows, columns=columns)

from __future__ import annotations

from typing import Any, Sequence

import pandas as pd
import pytest


def monthly_observations(
    yearly_prices: Sequence[float], start_year: int = 1950, **overrides: Any
) -> pd.DataFrame:
    """Twelve monthly rows per year; each year's real price is constant.

    Any schema column can be overridden with a scalar or a full-length list.
    """
    dates = pd.date_range(f"{start_year}-01-01", periods=12 * len(yearly_prices), freq="MS")
    prices = [p for p in yearly_prices for _ in range(12)]
    pdf = pd.DataFrame(
        {
            "date": dates,
            "real_price": prices,
            "real_earnings": 10.0,
            "real_dividend": 4.0,
            "long_interest_rate": 3.0,
            "consumer_price_index": 20.0,
            "pe10": 15.0,
            "nominal_price": [p / 2 for p in prices],
        }
    )
    for col, value in overrides.items():
        pdf[col] = value
    return pdf


@pytest.fixture
def observations() -> pd.DataFrame:
    cpi = [c for c in (20.0, 21.0, 22.05) for _ in range(12)]
    return monthly_observations([100.0, 110.0, 121.0], consumer_price_index=cpi)

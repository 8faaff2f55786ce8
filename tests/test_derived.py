from __future__ import annotations

from datetime import date

import numpy as np
import pytest

from conftest import monthly_observations
from sp500_pipeline.clean.validate import validate_observations
from sp500_pipeline.models import Observation
from sp500_pipeline.stages import classify
from sp500_pipeline.stages.derived import (
    BASE_METRICS_COLUMNS,
    DERIVED_METRICS_COLUMNS,
    base_metrics_table,
    derive_metrics,
    derived_metrics_table,
    dividend_yield,
    equity_premium_gap,
    pe_ratio,
    total_fundamental_yield,
)


def test_pe_ratio_is_null_for_zero_or_missing_earnings() -> None:
    assert pe_ratio(100.0, 0.0) is None
    assert pe_ratio(100.0, None) is None
    assert pe_ratio(100.0, float("nan")) is None
    assert pe_ratio(100.0, 8.0) == 12.5


def test_yields_are_null_for_zero_price() -> None:
    assert dividend_yield(4.0, 0.0) is None
    assert total_fundamental_yield(4.0, 10.0, 0.0) is None
    assert dividend_yield(4.0, 100.0) == pytest.approx(4.0)
    assert total_fundamental_yield(4.0, 10.0, 100.0) == pytest.approx(14.0)


def test_equity_premium_gap_propagates_null() -> None:
    assert equity_premium_gap(None, 3.0) is None
    assert equity_premium_gap(4.0, 3.5) == pytest.approx(0.5)


def test_derive_metrics_from_observation() -> None:
    obs = Observation(
        date=date(1950, 1, 1),
        real_price=200.0,
        real_earnings=0.0,
        real_dividend=8.0,
        long_interest_rate=2.5,
        consumer_price_index=23.5,
        pe10=None,
        nominal_price=17.0,
    )
    m = derive_metrics(obs)
    assert m.pe_ratio is None
    assert m.dividend_yield == pytest.approx(4.0)
    assert m.earnings_yield == pytest.approx(0.0)
    assert m.total_fundamental_yield == pytest.approx(4.0)
    assert m.equity_premium_gap == pytest.approx(1.5)


def test_base_metrics_table_rounds_outputs() -> None:
    pdf = validate_observations(
        monthly_observations([123.456], real_earnings=[0.0] + [7.0] * 11)
    )
    out = base_metrics_table(pdf)
    assert list(out.columns) == BASE_METRICS_COLUMNS
    assert out.loc[1, "real_price"] == 123.46
    assert np.isnan(out.loc[0, "pe_ratio"])
    assert out.loc[1, "pe_ratio"] == 17.64  # 123.456 / 7 = 17.6365...
    assert out.loc[1, "dividend_yield"] == 3.24  # 4 / 123.456 * 100 = 3.2400...


def test_derived_metrics_table_labels_use_unrounded_values() -> None:
    # dividend yield 3.004 -> gap 0.004 rounds to 0.00 but is still positive
    pdf = validate_observations(
        monthly_observations([100.0], real_dividend=3.004, long_interest_rate=3.0)
    )
    out = derived_metrics_table(pdf)
    assert list(out.columns) == DERIVED_METRICS_COLUMNS
    assert out.loc[0, "equity_premium_gap"] == 0.0
    assert out.loc[0, "market_condition"] == classify.EQUITY_OUTPERFORMING
    assert out.loc[0, "valuation_status"] == classify.FAIRLY_VALUED
    assert out.loc[0, "economic_signal"] == classify.STABLE  # 3.0 < 10.0


def test_derived_metrics_table_empty_input() -> None:
    pdf = validate_observations(monthly_observations([100.0]).iloc[0:0])
    out = derived_metrics_table(pdf)
    assert out.empty
    assert list(out.columns) == DERIVED_METRICS_COLUMNS

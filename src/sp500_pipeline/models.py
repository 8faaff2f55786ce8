"""Pydantic models used for input validation and result tables.

`Observation` defines the expected schema of one row of the monthly S&P 500
series. The remaining models describe rows of the derived result tables and
the fitted regression/forecast values passed between stages.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

OBSERVATION_FIELDS = (
    "date",
    "real_price",
    "real_earnings",
    "real_dividend",
    "long_interest_rate",
    "consumer_price_index",
    "pe10",
    "nominal_price",
)


class Observation(BaseModel):
    """Schema for one time-series observation.

    Attributes:
        date: Observation date; unique and strictly increasing in a series.
        real_price: Inflation-adjusted index price.
        real_earnings: Inflation-adjusted earnings.
        real_dividend: Inflation-adjusted dividend.
        long_interest_rate: Long-term bond yield in percentage points.
        consumer_price_index: CPI level.
        pe10: Cyclically adjusted P/E supplied by the source.
        nominal_price: Raw (nominal) index level.
    """
    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)
    date: datetime.date
    real_price: Optional[float] = Field(..., ge=0)
    real_earnings: Optional[float] = Field(..., ge=0)
    real_dividend: Optional[float] = Field(..., ge=0)
    long_interest_rate: Optional[float]
    consumer_price_index: Optional[float] = Field(..., gt=0)
    pe10: Optional[float]
    nominal_price: Optional[float] = Field(..., ge=0)


class DerivedMetrics(BaseModel):
    """Per-observation ratios (unrounded)."""
    model_config = ConfigDict(frozen=True)
    pe_ratio: Optional[float] = None
    dividend_yield: Optional[float] = None
    earnings_yield: Optional[float] = None
    total_fundamental_yield: Optional[float] = None
    equity_premium_gap: Optional[float] = None


class YearlyAggregate(BaseModel):
    """Row of the `yearly_averages` table."""
    model_config = ConfigDict(extra="forbid")
    year: int
    avg_real_price: Optional[float]
    avg_real_earnings: Optional[float]
    avg_real_dividend: Optional[float]
    avg_pe10: Optional[float]
    avg_cpi: Optional[float]
    avg_long_interest_rate: Optional[float]
    avg_nominal_price: Optional[float]


class GrowthRecord(BaseModel):
    """Row of the `yearly_growth` table."""
    model_config = ConfigDict(extra="forbid")
    year: int
    avg_real_price: Optional[float]
    avg_real_earnings: Optional[float]
    avg_real_dividend: Optional[float]
    avg_cpi: Optional[float]
    price_growth_percent: Optional[float]
    earnings_growth_percent: Optional[float]
    dividend_growth_percent: Optional[float]
    cpi_growth_percent: Optional[float]


class DecadeAggregate(BaseModel):
    """Row of the `decade_summary` table."""
    model_config = ConfigDict(extra="forbid")
    decade: int
    decade_avg_price: Optional[float]
    decade_avg_earnings: Optional[float]
    decade_avg_dividend: Optional[float]
    avg_price_growth_percent: Optional[float]
    avg_earnings_growth_percent: Optional[float]
    avg_dividend_growth_percent: Optional[float]


class RegressionModel(BaseModel):
    """Ordinary least squares fit of ``y = slope * x + intercept``.

    Values are kept at full precision; rounding happens when the model is
    written to a result table.
    """
    model_config = ConfigDict(frozen=True)
    slope: float
    intercept: float
    r_squared: float
    n_points: int = Field(..., ge=2)

    def predict(self, x: float) -> float:
        """Evaluate the fitted line at `x`."""
        return self.intercept + self.slope * x


class ForecastPoint(BaseModel):
    """One extrapolated value of a linear trend."""
    model_config = ConfigDict(frozen=True)
    period: int
    predicted_value: float

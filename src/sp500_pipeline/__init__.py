"""sp500_pipeline package.

Computes historical statistics and a linear trend forecast over the monthly
S&P 500 series (real price, earnings, dividends, long-term rates, CPI, PE10).

Architecture:
- ingest: read the flat-file source
- clean: Pydantic schema validation and year-range filtering
- stages: pure analytical transformations (derived ratios, yearly/decade
  averages, growth, rolling windows, correlation/regression, forecast,
  classification)
- pipeline: wires the stages into named result tables
- load: MongoDB / CSV sinks for the result tables
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

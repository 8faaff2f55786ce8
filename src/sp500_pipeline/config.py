"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the analysis window, rolling/forecast sizes, classification thresholds
and the optional MongoDB sink location from environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_START_YEAR = 1950
DEFAULT_END_YEAR = 2023
DEFAULT_WINDOW_WIDTH = 12
DEFAULT_FORECAST_HORIZON = 7


@dataclass(frozen=True)
class Thresholds:
    """Cut-offs used by the classification stage.

    Attributes:
        pe10_undervalued: PE10 strictly below this is "Undervalued".
        pe10_overvalued: PE10 strictly above this is "Overvalued"; the closed
            band between the two cut-offs is "Fairly Valued".
        equity_premium_neutral: Equity premium gaps at or below this favour bonds.
    """
    pe10_undervalued: float = 10.0
    pe10_overvalued: float = 25.0
    equity_premium_neutral: float = 0.0


@dataclass(frozen=True)
class Settings:
    """Container for analysis configuration read from the environment.

    Attributes:
        analysis_start_year: Lower inclusive bound on included years.
        analysis_end_year: Upper inclusive bound on included years.
        rolling_window_width: Trailing window size for rolling statistics.
        forecast_horizon_years: Number of future years to forecast.
        mongo_uri: MongoDB connection URI for the result sink.
        mongo_db: Target MongoDB database name.
        data_path: Default CSV source for the CLI.
        thresholds: Classification cut-offs.
    """
    analysis_start_year: int = DEFAULT_START_YEAR
    analysis_end_year: int = DEFAULT_END_YEAR
    rolling_window_width: int = DEFAULT_WINDOW_WIDTH
    forecast_horizon_years: int = DEFAULT_FORECAST_HORIZON
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "sp500"
    data_path: Path = Path("data/sp500.csv")
    thresholds: Thresholds = field(default_factory=Thresholds)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def validate_settings(s: Settings) -> Settings:
    """Check the numeric options of `s` and return it unchanged.

    Raises:
        RuntimeError: if the year range is inverted, the rolling window is
            smaller than one or the forecast horizon is negative.
    """
    if s.analysis_start_year > s.analysis_end_year:
        raise RuntimeError(
            f"Analysis start year ({s.analysis_start_year}) must not be after "
            f"end year ({s.analysis_end_year})."
        )
    if s.rolling_window_width < 1:
        raise RuntimeError(
            f"Rolling window width must be at least 1, got {s.rolling_window_width}."
        )
    if s.forecast_horizon_years < 0:
        raise RuntimeError(
            f"Forecast horizon must not be negative, got {s.forecast_horizon_years}."
        )
    return s


def get_settings() -> Settings:
    """Read environment variables and return a validated, frozen `Settings`.

    Raises:
        RuntimeError: if a numeric option is malformed or fails
            `validate_settings`.
    """
    return validate_settings(
        Settings(
            analysis_start_year=_int_env("ANALYSIS_START_YEAR", DEFAULT_START_YEAR),
            analysis_end_year=_int_env("ANALYSIS_END_YEAR", DEFAULT_END_YEAR),
            rolling_window_width=_int_env("ROLLING_WINDOW_WIDTH", DEFAULT_WINDOW_WIDTH),
            forecast_horizon_years=_int_env("FORECAST_HORIZON_YEARS", DEFAULT_FORECAST_HORIZON),
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db=os.getenv("MONGO_DB", "sp500"),
            data_path=Path(os.getenv("SP500_DATA_PATH", "data/sp500.csv")),
        )
    )

from __future__ import annotations

from dataclasses import replace

import pytest

from sp500_pipeline.config import Settings, get_settings, validate_settings

ENV_VARS = (
    "ANALYSIS_START_YEAR",
    "ANALYSIS_END_YEAR",
    "ROLLING_WINDOW_WIDTH",
    "FORECAST_HORIZON_YEARS",
    "MONGO_URI",
    "MONGO_DB",
    "SP500_DATA_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = get_settings()
    assert (s.analysis_start_year, s.analysis_end_year) == (1950, 2023)
    assert s.rolling_window_width == 12
    assert s.forecast_horizon_years == 7
    assert s.thresholds.pe10_undervalued == 10
    assert s.thresholds.pe10_overvalued == 25
    assert s == Settings()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANALYSIS_START_YEAR", "1980")
    monkeypatch.setenv("ANALYSIS_END_YEAR", "1999")
    monkeypatch.setenv("ROLLING_WINDOW_WIDTH", "6")
    monkeypatch.setenv("MONGO_DB", "research")
    s = get_settings()
    assert (s.analysis_start_year, s.analysis_end_year) == (1980, 1999)
    assert s.rolling_window_width == 6
    assert s.mongo_db == "research"


def test_rejects_non_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROLLING_WINDOW_WIDTH", "twelve")
    with pytest.raises(RuntimeError, match="ROLLING_WINDOW_WIDTH"):
        get_settings()


def test_rejects_inverted_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANALYSIS_START_YEAR", "2000")
    monkeypatch.setenv("ANALYSIS_END_YEAR", "1990")
    with pytest.raises(RuntimeError):
        get_settings()


def test_rejects_zero_window(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROLLING_WINDOW_WIDTH", "0")
    with pytest.raises(RuntimeError):
        get_settings()


def test_rejects_negative_horizon(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORECAST_HORIZON_YEARS", "-1")
    with pytest.raises(RuntimeError, match="horizon"):
        get_settings()


def test_validate_settings_checks_replaced_values() -> None:
    assert validate_settings(Settings(forecast_horizon_years=0)).forecast_horizon_years == 0
    with pytest.raises(RuntimeError, match="window"):
        validate_settings(replace(Settings(), rolling_window_width=0))
    with pytest.raises(RuntimeError, match="horizon"):
        validate_settings(replace(Settings(), forecast_horizon_years=-1))

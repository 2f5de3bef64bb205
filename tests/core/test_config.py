"""Tests for configuration management."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stockwise.core.config import DEFAULT_SEASONAL_FACTORS, Settings, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults():
    s = Settings(_env_file=None)

    assert s.stock_safety_days == 14
    assert s.margin_low_pct == 15.0
    assert s.client_vip_amount == 500000.0
    assert s.forecast_seasonal_factors == DEFAULT_SEASONAL_FACTORS
    assert s.persisted_notification_types == {"critical", "warning"}


def test_settings_load_from_env(monkeypatch):
    monkeypatch.setenv("STOCK_SAFETY_DAYS", "21")
    monkeypatch.setenv("NOTIFICATION_TYPES", "critical, warning ,opportunity")
    monkeypatch.setenv("FORECAST_SEASONAL_FACTORS", "[1,1,1,1,1,1,1,1,1,1,1,1.5]")

    s = get_settings()

    assert s.stock_safety_days == 21
    assert s.persisted_notification_types == {"critical", "warning", "opportunity"}
    assert s.forecast_seasonal_factors[-1] == 1.5


def test_seasonal_factors_need_twelve_months():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, forecast_seasonal_factors=[1.0] * 11)


def test_invalid_env_raises_runtime_error(monkeypatch):
    monkeypatch.setenv("STOCK_WINDOW_DAYS", "a month")

    with pytest.raises(RuntimeError, match="STOCK_WINDOW_DAYS"):
        get_settings()

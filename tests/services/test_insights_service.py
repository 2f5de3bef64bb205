"""Tests for the analytics service facade."""

from __future__ import annotations

import random

import pytest

from stockwise.core.config import Settings
from stockwise.domain.records import Insight
from stockwise.services.data_provider import StaticDataProvider
from stockwise.services.insights import (
    COMPONENTS,
    Snapshot,
    client_segments,
    dashboard,
    demand_forecast,
    rank_insights,
    revenue_forecast,
    run_analysis,
    run_component,
)
from tests.builders import make_client, make_product, make_sale


def _insight(insight_id: str, impact: str, confidence: float) -> Insight:
    return Insight(
        id=insight_id,
        type="recommendation",
        title=insight_id,
        description="",
        confidence=confidence,
        impact=impact,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


def test_rank_insights_orders_by_weighted_confidence():
    ranked = rank_insights(
        [
            _insight("low", "low", 0.99),
            _insight("medium", "medium", 0.9),
            _insight("high-weak", "high", 0.5),
            _insight("high", "high", 0.9),
        ]
    )
    assert [i.id for i in ranked] == ["high", "medium", "high-weak", "low"]


def test_rank_insights_keeps_first_duplicate():
    first = _insight("same", "low", 0.5)
    second = _insight("same", "high", 0.9)
    assert rank_insights([first, second]) == [first]


def test_empty_snapshot_yields_no_insights(now, settings):
    provider = StaticDataProvider()
    assert run_analysis(provider, now, settings) == []
    for name in COMPONENTS:
        assert run_component(name, Snapshot.load(provider), now, settings) == []


def test_run_analysis_merges_components(now, settings):
    provider = StaticDataProvider(
        products=[make_product("A", stock=0, buy_price=95, sell_price=100)],
        clients=[make_client("Big", last_order_days=None, total_amount=600000, total_orders=5)],
    )
    ids = [i.id for i in run_analysis(provider, now, settings)]

    assert set(ids) == {
        "stock-A",
        "margin-optimization",
        "clients-vip",
        "optimization-report",
        "client-reactivation",
    }
    # Smart alerts stay out of the assistant feed
    assert not any(i.startswith("stock-critical") for i in ids)


def test_run_component_unknown_name(now, settings):
    with pytest.raises(KeyError):
        run_component("weather", Snapshot.load(StaticDataProvider()), now, settings)


def test_settings_thresholds_are_applied(now):
    provider = StaticDataProvider(products=[make_product("A", buy_price=75, sell_price=100)])
    strict = Settings(_env_file=None, margin_low_pct=30)

    insights = run_component("profitability", Snapshot.load(provider), now, strict)
    assert [i.id for i in insights] == ["margin-optimization"]


def test_client_segments(now, settings):
    provider = StaticDataProvider(clients=[make_client("A", last_order_days=5)])
    assert client_segments(provider, now, settings).counts()["active"] == 1


def test_forecasts(now, settings):
    provider = StaticDataProvider(sales=[make_sale(2, total=1000, items=(("A", 5),))])

    demand = demand_forecast(provider, now, random.Random(5), settings)
    revenue = revenue_forecast(provider, now, settings)

    assert len(demand) == settings.forecast_demand_days
    assert len(revenue) == settings.forecast_revenue_months


def test_dashboard(settings):
    provider = StaticDataProvider(products=[make_product("A", stock=0)])
    assert dashboard(provider).stock_breakdown["outOfStock"] == 1

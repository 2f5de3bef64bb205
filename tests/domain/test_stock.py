"""Tests for stock velocity and stockout prediction."""

from __future__ import annotations

import pytest

from stockwise.domain.stock import (
    days_until_stockout,
    forecast_stock,
    recommended_order,
    sales_velocity,
)
from tests.builders import make_product, make_sale


def test_sales_velocity_divides_by_window():
    sales = [make_sale(1, items=(("A", 30),)), make_sale(2, items=(("A", 30), ("B", 5)))]
    velocity, matched = sales_velocity(sales, "A", 30)
    assert velocity == pytest.approx(2.0)
    assert matched == 2


def test_sales_velocity_zero_window():
    assert sales_velocity([make_sale(1, items=(("A", 3),))], "A", 0) == (0.0, 0)


def test_days_until_stockout():
    assert days_until_stockout(30, 2.0) == 15
    assert days_until_stockout(5, 2.0) == 2
    assert days_until_stockout(30, 0.0) is None


def test_recommended_order_covers_safety_horizon():
    # safety stock = ceil(2.0 * 14) = 28
    assert recommended_order(10, 2.0, 14, 10) == 18
    assert recommended_order(40, 2.0, 14, 10) == 0


def test_recommended_order_minimum_when_out_of_stock():
    assert recommended_order(0, 0.0, 14, 10) == 10
    assert recommended_order(0, 2.0, 14, 10) == 28


def test_out_of_stock_without_sales(now):
    """Out-of-stock product yields one high-impact prediction."""
    insights = forecast_stock([make_product("A", stock=0, alert_threshold=5)], [], now)

    assert len(insights) == 1
    insight = insights[0]
    assert insight.id == "stock-A"
    assert insight.type == "prediction"
    assert insight.impact == "high"
    assert insight.data["recommendedOrder"] >= 10
    assert insight.data["severity"] == "critical"
    assert insight.confidence == pytest.approx(0.6)


def test_every_out_of_stock_product_gets_exactly_one_insight(now):
    products = [make_product(n, stock=0) for n in ("A", "B", "C")]
    sales = [make_sale(3, items=(("A", 4),))]
    insights = forecast_stock(products, sales, now)

    assert sorted(i.id for i in insights) == ["stock-A", "stock-B", "stock-C"]
    assert all(i.impact == "high" for i in insights)


def test_no_insight_for_idle_well_stocked_product(now):
    assert forecast_stock([make_product("A", stock=50, alert_threshold=5)], [], now) == []


def test_projected_stockout_inside_safety_horizon(now):
    # 60 units over 30 days -> 2/day; 20 in stock -> 10 days left
    sales = [make_sale(d, items=(("A", 6),)) for d in range(1, 11)]
    insights = forecast_stock([make_product("A", stock=20, alert_threshold=5)], sales, now)

    assert len(insights) == 1
    data = insights[0].data
    assert insights[0].impact == "medium"
    assert data["daysUntilStockout"] == 10
    assert data["safetyStock"] == 28
    assert data["recommendedOrder"] == 8
    assert data["matchedSales"] == 10
    assert insights[0].confidence == pytest.approx(0.95)


def test_old_sales_are_outside_window(now):
    sales = [make_sale(45, items=(("A", 100),))]
    assert forecast_stock([make_product("A", stock=20, alert_threshold=5)], sales, now) == []


def test_threshold_reached_without_velocity(now):
    insights = forecast_stock([make_product("A", stock=3, alert_threshold=5)], [], now)

    assert len(insights) == 1
    assert insights[0].data["daysUntilStockout"] is None
    assert insights[0].data["recommendedOrder"] == 0
    assert "Seuil d'alerte" in insights[0].description


def test_id_falls_back_to_name(now):
    insights = forecast_stock([make_product("Savon", id="", stock=0)], [], now)
    assert insights[0].id == "stock-Savon"

"""Tests for demand and revenue forecasting."""

from __future__ import annotations

import random
from datetime import date, datetime

import pytest

from stockwise.domain.forecast import (
    average_daily_demand,
    demand_confidence,
    forecast_demand,
    forecast_revenue,
    growth_rate,
    monthly_revenue,
)
from tests.builders import make_sale


def test_average_daily_demand_defaults_without_sales(now):
    assert average_daily_demand([], now) == 10.0


def test_average_daily_demand_groups_by_calendar_day(now):
    sales = [
        make_sale(1, items=(("A", 4),)),
        make_sale(1.1, items=(("B", 6),)),  # same calendar day
        make_sale(3, items=(("A", 20),)),
        make_sale(40, items=(("A", 1000),)),  # outside window
    ]
    assert average_daily_demand(sales, now) == pytest.approx(15.0)


def test_demand_forecast_shape(now):
    points = forecast_demand([], now, rng=random.Random(1))

    assert len(points) == 30
    assert points[0].date == date(2024, 6, 16)
    assert points[0].label == "16/06"
    assert all(p.value >= 1 for p in points)


def test_demand_confidence_non_increasing_and_bounded(now):
    points = forecast_demand([], now, rng=random.Random(7))
    confidences = [p.confidence for p in points]

    assert confidences[0] == pytest.approx(0.95)
    assert all(0.6 <= c <= 0.95 for c in confidences)
    assert all(a >= b for a, b in zip(confidences, confidences[1:]))


def test_demand_confidence_floor():
    assert demand_confidence(100) == 0.6


def test_demand_forecast_reproducible_with_seed(now):
    first = forecast_demand([], now, rng=random.Random(42))
    second = forecast_demand([], now, rng=random.Random(42))
    assert [p.value for p in first] == [p.value for p in second]


def test_demand_without_noise_follows_calendar(now):
    points = forecast_demand([], now, rng=random.Random(0), noise=0.0)

    # 2024-06-16 is a Sunday, 2024-06-17 a Monday
    assert points[0].value == round(10 * 0.7)
    assert points[1].value == round(10 * 1.1 * 1.005)


def test_demand_noise_is_bounded(now):
    for point in forecast_demand([], now, rng=random.Random(3)):
        i = (point.date - now.date()).days - 1
        factor = 0.7 if point.date.weekday() >= 5 else 1.1
        base = 10 * factor * (1 + i * 0.005)
        assert base * 0.925 - 0.5 <= point.value <= base * 1.075 + 0.5


def test_demand_floor_at_one(now):
    points = forecast_demand([], now, rng=random.Random(0), default_daily=0.01)
    assert all(p.value == 1 for p in points)


def test_monthly_revenue_sorted():
    sales = [
        make_sale(0, total=10, now=datetime(2024, 5, 3)),
        make_sale(0, total=5, now=datetime(2024, 4, 1)),
        make_sale(0, total=15, now=datetime(2024, 5, 20)),
    ]
    assert monthly_revenue(sales) == [((2024, 4), 5), ((2024, 5), 25)]


def test_growth_rate_default_and_clamp():
    assert growth_rate([]) == 0.05
    assert growth_rate([((2024, 5), 100.0)]) == 0.05
    assert growth_rate([((2024, 4), 0.0), ((2024, 5), 100.0)]) == 0.05
    assert growth_rate([((2024, 4), 100.0), ((2024, 5), 200.0)]) == 0.20
    assert growth_rate([((2024, 4), 100.0), ((2024, 5), 10.0)]) == -0.10
    assert growth_rate([((2024, 4), 100.0), ((2024, 5), 110.0)]) == pytest.approx(0.10)


def test_revenue_forecast_defaults(now):
    points = forecast_revenue([], now)

    assert len(points) == 12
    assert points[0].label == "2024-07"
    assert points[-1].label == "2025-06"
    # July factor 0.90, default growth 5% compounded over a third of a year
    assert points[0].value == round(500000 * 0.90 * 1.05 ** (1 / 3))
    assert all(p.growth == 5.0 for p in points)
    assert all(p.confidence is None for p in points)


def test_revenue_forecast_is_deterministic(now):
    sales = [make_sale(d, total=1000) for d in range(0, 60, 3)]
    assert forecast_revenue(sales, now) == forecast_revenue(sales, now)


def test_revenue_forecast_custom_seasonality(now):
    points = forecast_revenue([], now, seasonal_factors=[1.0] * 12, default_growth=0.0)
    assert {p.value for p in points} == {500000}


def test_monthly_revenue_skips_current_and_future_months(now):
    sales = [
        make_sale(0, total=40, now=datetime(2024, 4, 10)),
        make_sale(0, total=50, now=datetime(2024, 5, 10)),
        make_sale(0, total=5, now=datetime(2024, 6, 2)),  # partial current month
        make_sale(0, total=999, now=datetime(2024, 7, 1)),
    ]
    assert monthly_revenue(sales, before=now) == [((2024, 4), 40), ((2024, 5), 50)]


def test_partial_month_does_not_drag_growth_down(now):
    sales = [
        make_sale(0, total=1000, now=datetime(2024, 4, 10)),
        make_sale(0, total=1100, now=datetime(2024, 5, 10)),
        make_sale(0, total=100, now=datetime(2024, 6, 2)),
    ]
    points = forecast_revenue(sales, now)

    assert all(p.growth == 10.0 for p in points)
    # July factor 0.90 on the April/May average
    assert points[0].value == round(1050 * 0.90 * 1.1 ** (1 / 3))

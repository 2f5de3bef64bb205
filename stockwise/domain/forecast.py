"""Demand and revenue forecasting.

Illustrative projections, not a statistical fit: the historical average is
scaled by calendar factors and a mild trend. Demand also gets bounded
multiplicative noise from an injected random generator, so tests can seed it.

NO DATA ACCESS - pure functions only.
"""

from __future__ import annotations

import random
from collections import defaultdict
from datetime import date, datetime, timedelta

from stockwise.core.config import DEFAULT_SEASONAL_FACTORS
from stockwise.domain.records import ForecastPoint, Sale

DEMAND_DAYS = 30
DEFAULT_DAILY_DEMAND = 10.0
WEEKEND_FACTOR = 0.7
WEEKDAY_FACTOR = 1.1
DAILY_TREND = 0.005
NOISE = 0.075
CONFIDENCE_START = 0.95
CONFIDENCE_DECAY = 0.01
CONFIDENCE_FLOOR = 0.6

REVENUE_MONTHS = 12
DEFAULT_MONTHLY_REVENUE = 500000.0
DEFAULT_GROWTH = 0.05
GROWTH_MIN = -0.10
GROWTH_MAX = 0.20


def average_daily_demand(
    sales: list[Sale], now: datetime, window: int = DEMAND_DAYS, default: float = DEFAULT_DAILY_DEMAND
) -> float:
    """Mean units sold per calendar day that had sales in the trailing window."""
    start = now - timedelta(days=window)
    per_day: dict[date, int] = defaultdict(int)
    for sale in sales:
        if start <= sale.date <= now:
            per_day[sale.date.date()] += sum(item.quantity for item in sale.items)

    if not per_day:
        return default
    return sum(per_day.values()) / len(per_day)


def demand_confidence(i: int) -> float:
    """Confidence of the i-th daily point, decaying linearly to a floor."""
    return max(CONFIDENCE_FLOOR, CONFIDENCE_START - i * CONFIDENCE_DECAY)


def forecast_demand(
    sales: list[Sale],
    now: datetime,
    *,
    rng: random.Random | None = None,
    days: int = DEMAND_DAYS,
    default_daily: float = DEFAULT_DAILY_DEMAND,
    noise: float = NOISE,
) -> list[ForecastPoint]:
    """Project daily unit demand for the days following ``now``.

    value_i = max(1, avg * weekend_factor * (1 + i*0.005) * (1 + U(-noise, noise)))
    """
    rng = rng or random.Random()
    avg = average_daily_demand(sales, now, DEMAND_DAYS, default_daily)
    today = now.date()
    points: list[ForecastPoint] = []

    for i in range(days):
        day = today + timedelta(days=i + 1)
        weekend_factor = WEEKEND_FACTOR if day.weekday() >= 5 else WEEKDAY_FACTOR
        trend_factor = 1 + i * DAILY_TREND
        noise_factor = 1 + rng.uniform(-noise, noise)
        value = max(1, round(avg * weekend_factor * trend_factor * noise_factor))
        points.append(
            ForecastPoint(
                label=day.strftime("%d/%m"),
                date=day,
                value=value,
                confidence=demand_confidence(i),
            )
        )

    return points


def monthly_revenue(
    sales: list[Sale], before: datetime | None = None
) -> list[tuple[tuple[int, int], float]]:
    """Historical revenue per (year, month), chronological.

    With ``before``, only months earlier than its calendar month are kept, so
    a partial current month does not read as a drop.
    """
    cutoff = (before.year, before.month) if before is not None else None
    totals: dict[tuple[int, int], float] = defaultdict(float)
    for sale in sales:
        if cutoff is not None and (sale.date.year, sale.date.month) >= cutoff:
            continue
        totals[(sale.date.year, sale.date.month)] += sale.total
    return sorted(totals.items())


def growth_rate(
    months: list[tuple[tuple[int, int], float]],
    *,
    default: float = DEFAULT_GROWTH,
    low: float = GROWTH_MIN,
    high: float = GROWTH_MAX,
) -> float:
    """Month-over-month growth of the last two historical months, clamped."""
    if len(months) < 2:
        return default
    previous, last = months[-2][1], months[-1][1]
    if previous <= 0:
        return default
    return min(max((last - previous) / previous, low), high)


def _add_months(day: date, n: int) -> date:
    index = day.month - 1 + n
    return date(day.year + index // 12, index % 12 + 1, 1)


def forecast_revenue(
    sales: list[Sale],
    now: datetime,
    *,
    months: int = REVENUE_MONTHS,
    default_monthly: float = DEFAULT_MONTHLY_REVENUE,
    default_growth: float = DEFAULT_GROWTH,
    growth_min: float = GROWTH_MIN,
    growth_max: float = GROWTH_MAX,
    seasonal_factors: list[float] | None = None,
) -> list[ForecastPoint]:
    """Project monthly revenue for the months following ``now``.

    value_i = avg * seasonal[month_i] * (1 + growth) ** (i / 3)
    """
    factors = seasonal_factors or DEFAULT_SEASONAL_FACTORS
    history = monthly_revenue(sales, before=now)
    avg = sum(v for _, v in history) / len(history) if history else default_monthly
    growth = growth_rate(history, default=default_growth, low=growth_min, high=growth_max)

    points: list[ForecastPoint] = []
    for i in range(1, months + 1):
        month = _add_months(now.date(), i)
        value = avg * factors[month.month - 1] * (1 + growth) ** (i / 3)
        points.append(
            ForecastPoint(
                label=month.strftime("%Y-%m"),
                date=month,
                value=round(value),
                growth=round(growth * 100, 1),
            )
        )

    return points

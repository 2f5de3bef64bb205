"""Analytics service facade.

Loads a snapshot from a data provider, runs the analytics components with
thresholds from settings, records metrics and ranks the merged output.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from stockwise.core.config import Settings, get_settings
from stockwise.core.metrics import (
    analysis_duration_seconds,
    forecast_points_total,
    insights_generated_total,
)
from stockwise.domain.alerts import generate_alerts
from stockwise.domain.catalog import analyze_catalog
from stockwise.domain.clients import ClientSegments, analyze_clients, segment_clients
from stockwise.domain.dashboard import DashboardSnapshot, compute_dashboard
from stockwise.domain.forecast import forecast_demand, forecast_revenue
from stockwise.domain.profitability import analyze_profitability
from stockwise.domain.records import Client, ForecastPoint, Insight, Product, Sale, utcnow
from stockwise.domain.reports import analyze_reports
from stockwise.domain.sales_trend import analyze_sales_trend
from stockwise.domain.stock import forecast_stock
from stockwise.services.data_provider import DataProvider

logger = logging.getLogger(__name__)

IMPACT_WEIGHT = {"high": 3, "medium": 2, "low": 1}


@dataclass(frozen=True)
class Snapshot:
    """Collections read once from a provider for one analysis run."""

    products: list[Product]
    sales: list[Sale]
    clients: list[Client]

    @classmethod
    def load(cls, provider: DataProvider) -> Snapshot:
        return cls(
            products=provider.get_products(),
            sales=provider.get_sales(),
            clients=provider.get_clients(),
        )


Component = Callable[[Snapshot, datetime, Settings], list[Insight]]


def _stock(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return forecast_stock(
        snap.products,
        snap.sales,
        now,
        window_days=s.stock_window_days,
        safety_days=s.stock_safety_days,
        min_order_qty=s.stock_min_order_qty,
    )


def _profitability(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return analyze_profitability(
        snap.products,
        low_margin_pct=s.margin_low_pct,
        high_margin_pct=s.margin_high_pct,
        uplift_per_product=s.margin_uplift_per_product,
    )


def _clients(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return analyze_clients(
        snap.clients,
        now,
        vip_amount=s.client_vip_amount,
        active_days=s.client_active_days,
        dormant_days=s.client_dormant_days,
        at_risk_min_orders=s.client_at_risk_min_orders,
        dormant_min_count=s.client_dormant_min_count,
        reactivation_value=s.client_reactivation_value,
    )


def _sales_trend(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return analyze_sales_trend(
        snap.sales,
        min_sales=s.trend_min_sales,
        window=s.trend_window,
        alert_pct=s.trend_alert_pct,
        high_pct=s.trend_high_pct,
    )


def _catalog(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return analyze_catalog(
        snap.products,
        snap.sales,
        min_order_value=s.catalog_min_order_value,
        products_per_category=s.catalog_products_per_category,
    )


def _reports(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return analyze_reports(
        snap.products,
        snap.clients,
        now,
        markup=s.report_expected_markup,
        max_deviation=s.report_price_deviation,
        stock_multiplier=s.report_stock_multiplier,
        low_margin_pct=s.report_low_margin_pct,
        overstock_multiplier=s.alert_overstock_multiplier,
        inactive_days=s.report_reactivation_days,
    )


def _alerts(snap: Snapshot, now: datetime, s: Settings) -> list[Insight]:
    return generate_alerts(
        snap.products,
        snap.sales,
        snap.clients,
        now,
        overstock_multiplier=s.alert_overstock_multiplier,
        week_change_pct=s.alert_week_change_pct,
        vip_share_pct=s.alert_vip_share_pct,
        vip_top_fraction=s.alert_vip_top_fraction,
        low_margin_pct=s.margin_low_pct,
    )


COMPONENTS: dict[str, Component] = {
    "stock": _stock,
    "profitability": _profitability,
    "clients": _clients,
    "sales_trend": _sales_trend,
    "catalog": _catalog,
    "reports": _reports,
    "alerts": _alerts,
}

# Components merged into the assistant feed; alerts have their own panel
ASSISTANT_COMPONENTS = (
    "stock",
    "profitability",
    "clients",
    "sales_trend",
    "catalog",
    "reports",
)


def run_component(
    name: str,
    snapshot: Snapshot,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> list[Insight]:
    """Run a single component and record its metrics.

    Raises:
        KeyError: If the component name is unknown.

    """
    component = COMPONENTS[name]
    settings = settings or get_settings()
    now = now or utcnow()

    with analysis_duration_seconds.labels(component=name).time():
        insights = component(snapshot, now, settings)

    for insight in insights:
        insights_generated_total.labels(component=name, type=insight.type).inc()

    logger.info(
        "component analyzed",
        extra={"component": name, "insights": len(insights)},
    )
    return insights


def rank_insights(insights: Iterable[Insight]) -> list[Insight]:
    """De-duplicate by id (first wins) and sort by impact weight x confidence."""
    seen: set[str] = set()
    unique: list[Insight] = []
    for insight in insights:
        if insight.id in seen:
            continue
        seen.add(insight.id)
        unique.append(insight)

    return sorted(
        unique,
        key=lambda i: IMPACT_WEIGHT.get(i.impact, 0) * i.confidence,
        reverse=True,
    )


def run_analysis(
    provider: DataProvider,
    now: datetime | None = None,
    settings: Settings | None = None,
    components: Iterable[str] = ASSISTANT_COMPONENTS,
) -> list[Insight]:
    """Run the assistant components over one snapshot and rank the result."""
    snapshot = Snapshot.load(provider)
    now = now or utcnow()

    merged: list[Insight] = []
    for name in components:
        merged.extend(run_component(name, snapshot, now, settings))

    ranked = rank_insights(merged)
    logger.info(
        "analysis completed",
        extra={
            "products": len(snapshot.products),
            "sales": len(snapshot.sales),
            "clients": len(snapshot.clients),
            "insights": len(ranked),
        },
    )
    return ranked


def client_segments(
    provider: DataProvider, now: datetime | None = None, settings: Settings | None = None
) -> ClientSegments:
    settings = settings or get_settings()
    return segment_clients(
        provider.get_clients(),
        now or utcnow(),
        vip_amount=settings.client_vip_amount,
        active_days=settings.client_active_days,
        dormant_days=settings.client_dormant_days,
        at_risk_min_orders=settings.client_at_risk_min_orders,
    )


def demand_forecast(
    provider: DataProvider,
    now: datetime | None = None,
    rng: random.Random | None = None,
    settings: Settings | None = None,
) -> list[ForecastPoint]:
    settings = settings or get_settings()
    points = forecast_demand(
        provider.get_sales(),
        now or utcnow(),
        rng=rng,
        days=settings.forecast_demand_days,
        default_daily=settings.forecast_default_daily_demand,
        noise=settings.forecast_noise,
    )
    forecast_points_total.labels(series="demand").inc(len(points))
    return points


def revenue_forecast(
    provider: DataProvider, now: datetime | None = None, settings: Settings | None = None
) -> list[ForecastPoint]:
    settings = settings or get_settings()
    points = forecast_revenue(
        provider.get_sales(),
        now or utcnow(),
        months=settings.forecast_revenue_months,
        default_monthly=settings.forecast_default_monthly_revenue,
        default_growth=settings.forecast_default_growth,
        growth_min=settings.forecast_growth_min,
        growth_max=settings.forecast_growth_max,
        seasonal_factors=settings.forecast_seasonal_factors,
    )
    forecast_points_total.labels(series="revenue").inc(len(points))
    return points


def dashboard(provider: DataProvider) -> DashboardSnapshot:
    snapshot = Snapshot.load(provider)
    return compute_dashboard(snapshot.products, snapshot.sales, snapshot.clients)

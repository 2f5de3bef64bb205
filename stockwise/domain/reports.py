"""Periodic report checks: pricing and stock anomalies, optimization backlog,
and lapsed clients to win back.

Each check returns at most one insight and nothing when it finds nothing.

NO DATA ACCESS - pure functions only.
"""

from __future__ import annotations

from datetime import datetime

from stockwise.domain.records import Client, Insight, Product

EXPECTED_MARKUP = 1.4
PRICE_DEVIATION = 0.3
STOCK_ANOMALY_MULTIPLIER = 5.0
LOW_MARGIN_PCT = 20.0
OVERSTOCK_MULTIPLIER = 3.0
REACTIVATION_DAYS = 60


def price_anomalies(
    products: list[Product],
    *,
    markup: float = EXPECTED_MARKUP,
    max_deviation: float = PRICE_DEVIATION,
) -> list[Product]:
    """Products priced more than ``max_deviation`` away from ``buy_price * markup``.

    Examples:
        Bought at 10 the expected price is 14; 20 deviates by 43% and is flagged.
    """
    flagged = []
    for p in products:
        if p.buy_price <= 0:
            continue
        expected = p.buy_price * markup
        if abs(p.sell_price - expected) / expected > max_deviation:
            flagged.append(p)
    return flagged


def anomaly_report(
    products: list[Product],
    *,
    markup: float = EXPECTED_MARKUP,
    max_deviation: float = PRICE_DEVIATION,
    stock_multiplier: float = STOCK_ANOMALY_MULTIPLIER,
) -> list[Insight]:
    prices = price_anomalies(products, markup=markup, max_deviation=max_deviation)
    stocks = [p for p in products if p.stock > p.alert_threshold * stock_multiplier]
    if not prices and not stocks:
        return []

    findings = []
    if prices:
        findings.append(f"{len(prices)} produit(s) avec des prix anormaux")
    if stocks:
        findings.append(f"{len(stocks)} produit(s) avec un stock anormalement élevé")

    return [
        Insight(
            id="anomaly-report",
            type="alert",
            title="Anomalies détectées",
            description=" ; ".join(findings) + ". Vérifiez les produits signalés.",
            confidence=0.89,
            impact="medium",
            actionable=True,
            data={
                "priceAnomalies": [p.name for p in prices],
                "stockAnomalies": [p.name for p in stocks],
            },
        )
    ]


def optimization_report(
    products: list[Product],
    *,
    low_margin_pct: float = LOW_MARGIN_PCT,
    overstock_multiplier: float = OVERSTOCK_MULTIPLIER,
) -> list[Insight]:
    low_margin = [
        p
        for p in products
        if p.sell_price > 0 and (p.sell_price - p.buy_price) / p.sell_price * 100 < low_margin_pct
    ]
    overstocked = [p for p in products if p.stock > p.alert_threshold * overstock_multiplier]
    if not low_margin and not overstocked:
        return []

    return [
        Insight(
            id="optimization-report",
            type="optimization",
            title="Rapport d'optimisation",
            description=(
                f"{len(low_margin)} produit(s) avec une marge < {low_margin_pct:g}% et "
                f"{len(overstocked)} produit(s) en surstock. Revoyez les prix et "
                "lancez des promotions sur le surstock."
            ),
            confidence=0.91,
            impact="medium",
            actionable=True,
            data={"lowMarginProducts": len(low_margin), "overStockedProducts": len(overstocked)},
        )
    ]


def reactivation_insight(
    clients: list[Client], now: datetime, *, inactive_days: int = REACTIVATION_DAYS
) -> list[Insight]:
    """Recommend a win-back campaign for clients silent for ``inactive_days``.

    Clients that never ordered count as inactive.
    """
    inactive = []
    for c in clients:
        days = c.days_since_last_order(now)
        if days is None or days > inactive_days:
            inactive.append(c)

    if not inactive:
        return []

    return [
        Insight(
            id="client-reactivation",
            type="recommendation",
            title="Clients à réactiver",
            description=(
                f"{len(inactive)} clients inactifs depuis plus de {inactive_days} jours. "
                "Campagne de relance recommandée."
            ),
            confidence=0.88,
            impact="high",
            actionable=True,
            data={"inactiveCount": len(inactive), "totalClients": len(clients)},
        )
    ]


def analyze_reports(
    products: list[Product],
    clients: list[Client],
    now: datetime,
    *,
    markup: float = EXPECTED_MARKUP,
    max_deviation: float = PRICE_DEVIATION,
    stock_multiplier: float = STOCK_ANOMALY_MULTIPLIER,
    low_margin_pct: float = LOW_MARGIN_PCT,
    overstock_multiplier: float = OVERSTOCK_MULTIPLIER,
    inactive_days: int = REACTIVATION_DAYS,
) -> list[Insight]:
    """Run the anomaly, optimization and reactivation checks."""
    return [
        *anomaly_report(
            products, markup=markup, max_deviation=max_deviation, stock_multiplier=stock_multiplier
        ),
        *optimization_report(
            products, low_margin_pct=low_margin_pct, overstock_multiplier=overstock_multiplier
        ),
        *reactivation_insight(clients, now, inactive_days=inactive_days),
    ]

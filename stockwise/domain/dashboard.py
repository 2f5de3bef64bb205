"""Smart dashboard: headline metrics and an overall performance score.

Score = 30% stock health + 40% client activity + 30% mean margin.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stockwise.domain.records import Client, Product, Sale


@dataclass(frozen=True)
class SmartMetric:
    """Headline dashboard card."""

    id: str
    title: str
    value: float
    trend: float
    prediction: str
    confidence: float
    insight: str


@dataclass
class DashboardSnapshot:
    """Performance score, metric cards and stock breakdown for one snapshot."""

    performance_score: int
    rating: str
    metrics: list[SmartMetric] = field(default_factory=list)
    stock_breakdown: dict[str, int] = field(default_factory=dict)


def _rating(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Bon"
    return "À améliorer"


def compute_dashboard(
    products: list[Product], sales: list[Sale], clients: list[Client]
) -> DashboardSnapshot:
    """Compute dashboard metrics from the current snapshot."""
    total_revenue = sum(s.total for s in sales)
    total_products = len(products)
    active_clients = sum(1 for c in clients if c.is_active)

    sales_growth = min(max(len(sales) * 0.05, 0.05), 0.20) if sales else 0.10
    predicted_revenue = total_revenue * (1 + sales_growth)

    healthy = sum(1 for p in products if p.stock > p.alert_threshold)
    stock_health = healthy / total_products if total_products else 0.0

    client_activity = active_clients / max(len(clients), 1)

    priced = [p for p in products if p.sell_price > 0 and p.buy_price > 0]
    # Unpriced products count as zero margin
    margin_health = (
        sum((p.sell_price - p.buy_price) / p.sell_price for p in priced) / total_products
        if total_products
        else 0.0
    )

    score = round((stock_health * 0.3 + client_activity * 0.4 + margin_health * 0.3) * 100)
    alerting = total_products - healthy

    metrics = [
        SmartMetric(
            id="revenue-prediction",
            title="CA prévu (30j)",
            value=predicted_revenue,
            trend=sales_growth * 100,
            prediction=f"+{round(sales_growth * 100)}% basé sur vos données",
            confidence=0.89 if len(sales) > 5 else 0.65,
            insight=(
                f"Basé sur {len(sales)} ventes enregistrées"
                if sales
                else "Ajoutez plus de ventes pour des prédictions précises"
            ),
        ),
        SmartMetric(
            id="stock-optimization",
            title="Santé stock",
            value=round(stock_health * 100),
            trend=5.0 if stock_health > 0.8 else -3.0,
            prediction="Stock bien géré" if stock_health > 0.8 else "Attention aux ruptures",
            confidence=0.94,
            insight=(
                f"{alerting} produits en alerte"
                if total_products
                else "Ajoutez des produits pour analyser le stock"
            ),
        ),
        SmartMetric(
            id="client-retention",
            title="Clients actifs",
            value=round(client_activity * 100),
            trend=8.5 if client_activity > 0.7 else -2.1,
            prediction=(
                "Excellent taux d'activité" if client_activity > 0.7 else "Besoin de réactivation"
            ),
            confidence=0.82,
            insight=f"{active_clients} clients actifs sur {len(clients)} total",
        ),
        SmartMetric(
            id="margin-analysis",
            title="Marge moyenne",
            value=round(margin_health * 100),
            trend=4.0 if margin_health > 0.25 else -2.0,
            prediction="Marges saines" if margin_health > 0.25 else "Optimisation possible",
            confidence=0.91,
            insight=(
                f"Calculé sur {len(priced)} produits"
                if margin_health > 0
                else "Ajoutez les prix d'achat et de vente"
            ),
        ),
    ]

    return DashboardSnapshot(
        performance_score=score,
        rating=_rating(score),
        metrics=metrics,
        stock_breakdown={
            "healthy": healthy,
            "low": sum(1 for p in products if 0 < p.stock <= p.alert_threshold),
            "outOfStock": sum(1 for p in products if p.stock == 0),
        },
    )

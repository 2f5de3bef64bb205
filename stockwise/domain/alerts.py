"""Smart alert rules over the current snapshot.

Each rule is an independent filter-and-label pass producing at most one
alert with a fixed id, so the notification center can de-duplicate by it.
No state is kept between runs.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from stockwise.domain.records import Client, Insight, Product, Sale

OVERSTOCK_MULTIPLIER = 3.0
WEEK_CHANGE_PCT = 20.0
VIP_SHARE_PCT = 50.0
VIP_TOP_FRACTION = 0.1
LOW_MARGIN_PCT = 15.0

_IMPACT_BY_TYPE = {
    "critical": "high",
    "warning": "medium",
    "opportunity": "medium",
    "info": "low",
}


def _alert(
    alert_id: str,
    alert_type: str,
    category: str,
    title: str,
    description: str,
    action: str,
    data: dict,
) -> Insight:
    return Insight(
        id=alert_id,
        type=alert_type,
        title=title,
        description=description,
        confidence=1.0,
        impact=_IMPACT_BY_TYPE[alert_type],
        actionable=True,
        data=data,
        category=category,
        action=action,
    )


def _names(products: list[Product], limit: int = 3) -> str:
    names = ", ".join(p.name for p in products[:limit])
    return names + ("..." if len(products) > limit else "")


def stock_alerts(
    products: list[Product], *, overstock_multiplier: float = OVERSTOCK_MULTIPLIER
) -> list[Insight]:
    alerts: list[Insight] = []

    out_of_stock = [p for p in products if p.stock == 0]
    if out_of_stock:
        alerts.append(
            _alert(
                "stock-critical-out",
                "critical",
                "stock",
                f"{len(out_of_stock)} produit(s) en rupture",
                f"Les produits suivants sont en rupture : {_names(out_of_stock)}",
                "Commander immédiatement",
                {
                    "products": [p.name for p in out_of_stock],
                    "count": len(out_of_stock),
                    "note": "Perte de ventes potentielle",
                },
            )
        )

    low_stock = [p for p in products if 0 < p.stock <= p.alert_threshold]
    if low_stock:
        alerts.append(
            _alert(
                "stock-warning-low",
                "warning",
                "stock",
                f"{len(low_stock)} produit(s) à réapprovisionner",
                "Stock faible détecté pour : "
                + ", ".join(f"{p.name} ({p.stock})" for p in low_stock[:3]),
                "Planifier une commande",
                {
                    "products": [{"name": p.name, "stock": p.stock} for p in low_stock],
                    "count": len(low_stock),
                },
            )
        )

    overstock = [p for p in products if p.stock > p.alert_threshold * overstock_multiplier]
    if overstock:
        tied_up = sum(p.buy_price * p.stock for p in overstock)
        alerts.append(
            _alert(
                "stock-opportunity-over",
                "opportunity",
                "stock",
                "Stock excédentaire détecté",
                f"{len(overstock)} produits en surstock représentant {tied_up:,.0f}",
                "Envisager une promotion",
                {
                    "products": [p.name for p in overstock],
                    "count": len(overstock),
                    "totalValue": tied_up,
                    "note": "Capital immobilisé",
                },
            )
        )

    return alerts


def sales_alerts(
    sales: list[Sale], now: datetime, *, week_change_pct: float = WEEK_CHANGE_PCT
) -> list[Insight]:
    """Compare the last 7 days with the 7 days before."""
    last_week = now - timedelta(days=7)
    two_weeks = now - timedelta(days=14)

    recent_total = sum(s.total for s in sales if last_week <= s.date <= now)
    previous_total = sum(s.total for s in sales if two_weeks <= s.date < last_week)

    if previous_total <= 0:
        return []

    change = (recent_total - previous_total) / previous_total * 100
    data = {"change": round(change, 2), "recentTotal": recent_total, "previousTotal": previous_total}
    description = (
        f"Cette semaine : {recent_total:,.0f} vs {previous_total:,.0f} la semaine dernière"
    )

    if change > week_change_pct:
        return [
            _alert(
                "sales-opportunity-growth",
                "opportunity",
                "sales",
                f"Ventes en hausse de {change:.0f}%",
                description,
                "Maintenir le momentum",
                {**data, "note": "Tendance positive"},
            )
        ]
    if change < -week_change_pct:
        return [
            _alert(
                "sales-warning-decline",
                "warning",
                "sales",
                f"Baisse des ventes de {abs(change):.0f}%",
                description,
                "Analyser les causes",
                {**data, "note": "Tendance négative"},
            )
        ]
    return []


def client_alerts(
    clients: list[Client],
    *,
    vip_share_pct: float = VIP_SHARE_PCT,
    vip_top_fraction: float = VIP_TOP_FRACTION,
) -> list[Insight]:
    alerts: list[Insight] = []

    inactive = [c for c in clients if not c.is_active]
    if inactive:
        potential = sum(c.total_amount / max(c.total_orders, 1) for c in inactive)
        alerts.append(
            _alert(
                "clients-opportunity-reactivate",
                "opportunity",
                "clients",
                f"{len(inactive)} client(s) inactif(s)",
                f"Potentiel de réactivation estimé à {potential:,.0f}",
                "Lancer une campagne de réactivation",
                {
                    "clients": [c.name for c in inactive],
                    "count": len(inactive),
                    "potentialRevenue": potential,
                },
            )
        )

    vip_count = math.ceil(len(clients) * vip_top_fraction)
    vip = sorted(clients, key=lambda c: c.total_amount, reverse=True)[:vip_count]
    if vip:
        vip_revenue = sum(c.total_amount for c in vip)
        total_revenue = sum(c.total_amount for c in clients)
        share = vip_revenue / total_revenue * 100 if total_revenue > 0 else 0.0
        if share > vip_share_pct:
            alerts.append(
                _alert(
                    "clients-info-vip",
                    "info",
                    "clients",
                    f"{len(vip)} client(s) VIP génèrent {share:.0f}% du CA",
                    "Ces clients méritent une attention particulière",
                    "Programme de fidélité",
                    {
                        "clients": [c.name for c in vip],
                        "count": len(vip),
                        "share": round(share, 2),
                    },
                )
            )

    return alerts


def margin_alerts(products: list[Product], *, low_margin_pct: float = LOW_MARGIN_PCT) -> list[Insight]:
    low_margin = []
    for p in products:
        if p.sell_price <= 0:
            continue
        margin = (p.sell_price - p.buy_price) / p.sell_price * 100
        if 0 <= margin < low_margin_pct:
            low_margin.append(p)

    if not low_margin:
        return []

    return [
        _alert(
            "margin-warning-low",
            "warning",
            "margin",
            f"{len(low_margin)} produit(s) à faible marge",
            f"Ces produits ont une marge inférieure à {low_margin_pct:g}%",
            "Revoir la tarification",
            {
                "products": [p.name for p in low_margin],
                "count": len(low_margin),
                "note": "Rentabilité réduite",
            },
        )
    ]


def generate_alerts(
    products: list[Product],
    sales: list[Sale],
    clients: list[Client],
    now: datetime,
    *,
    overstock_multiplier: float = OVERSTOCK_MULTIPLIER,
    week_change_pct: float = WEEK_CHANGE_PCT,
    vip_share_pct: float = VIP_SHARE_PCT,
    vip_top_fraction: float = VIP_TOP_FRACTION,
    low_margin_pct: float = LOW_MARGIN_PCT,
) -> list[Insight]:
    """Run every alert rule: stock, sales, clients, then margin."""
    return [
        *stock_alerts(products, overstock_multiplier=overstock_multiplier),
        *sales_alerts(sales, now, week_change_pct=week_change_pct),
        *client_alerts(clients, vip_share_pct=vip_share_pct, vip_top_fraction=vip_top_fraction),
        *margin_alerts(products, low_margin_pct=low_margin_pct),
    ]

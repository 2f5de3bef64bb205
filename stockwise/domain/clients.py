"""Client segmentation by recency and lifetime value.

Segments are not exclusive: a big spender who never ordered recently is
both VIP and dormant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from stockwise.domain.records import Client, Insight

VIP_AMOUNT = 500000.0
ACTIVE_DAYS = 30
DORMANT_DAYS = 90
AT_RISK_MIN_ORDERS = 2
DORMANT_MIN_COUNT = 5
REACTIVATION_VALUE = 25000.0


@dataclass
class ClientSegments:
    """Client buckets for one snapshot."""

    vip: list[Client] = field(default_factory=list)
    active: list[Client] = field(default_factory=list)
    dormant: list[Client] = field(default_factory=list)
    at_risk: list[Client] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "vip": len(self.vip),
            "active": len(self.active),
            "dormant": len(self.dormant),
            "atRisk": len(self.at_risk),
        }


def segment_clients(
    clients: list[Client],
    now: datetime,
    *,
    vip_amount: float = VIP_AMOUNT,
    active_days: int = ACTIVE_DAYS,
    dormant_days: int = DORMANT_DAYS,
    at_risk_min_orders: int = AT_RISK_MIN_ORDERS,
) -> ClientSegments:
    """Classify clients into VIP, active, dormant and at-risk buckets."""
    segments = ClientSegments()

    for client in clients:
        if client.total_amount > vip_amount:
            segments.vip.append(client)

        days = client.days_since_last_order(now)
        if days is None:
            segments.dormant.append(client)
            continue

        if days <= active_days:
            segments.active.append(client)
        elif days > dormant_days:
            segments.dormant.append(client)

        if active_days < days < dormant_days and client.total_orders > at_risk_min_orders:
            segments.at_risk.append(client)

    return segments


def analyze_clients(
    clients: list[Client],
    now: datetime,
    *,
    vip_amount: float = VIP_AMOUNT,
    active_days: int = ACTIVE_DAYS,
    dormant_days: int = DORMANT_DAYS,
    at_risk_min_orders: int = AT_RISK_MIN_ORDERS,
    dormant_min_count: int = DORMANT_MIN_COUNT,
    reactivation_value: float = REACTIVATION_VALUE,
) -> list[Insight]:
    """Turn client segments into retention and loyalty insights."""
    segments = segment_clients(
        clients,
        now,
        vip_amount=vip_amount,
        active_days=active_days,
        dormant_days=dormant_days,
        at_risk_min_orders=at_risk_min_orders,
    )
    insights: list[Insight] = []

    if segments.at_risk:
        # Average basket of each at-risk client
        potential_loss = sum(c.total_amount / max(c.total_orders, 1) for c in segments.at_risk)
        insights.append(
            Insight(
                id="clients-at-risk",
                type="alert",
                title=f"{len(segments.at_risk)} client(s) à risque",
                description=(
                    f"Clients réguliers sans commande depuis plus de {active_days} jours. "
                    f"Perte potentielle par commande manquée : {potential_loss:,.0f}."
                ),
                confidence=0.85,
                impact="high",
                actionable=True,
                data={
                    "clients": [c.name for c in segments.at_risk],
                    "count": len(segments.at_risk),
                    "potentialLoss": potential_loss,
                },
            )
        )

    if segments.vip:
        top = sorted(segments.vip, key=lambda c: c.total_amount, reverse=True)[:3]
        insights.append(
            Insight(
                id="clients-vip",
                type="recommendation",
                title=f"{len(segments.vip)} client(s) VIP",
                description=(
                    "Proposez un programme de fidélité à vos meilleurs clients : "
                    + ", ".join(c.name for c in top)
                    + "."
                ),
                confidence=0.95,
                impact="high",
                actionable=True,
                data={
                    "topClients": [{"name": c.name, "totalAmount": c.total_amount} for c in top],
                    "count": len(segments.vip),
                },
            )
        )

    if len(segments.dormant) > dormant_min_count:
        potential = len(segments.dormant) * reactivation_value
        insights.append(
            Insight(
                id="clients-dormant",
                type="optimization",
                title=f"{len(segments.dormant)} clients dormants",
                description=(
                    f"Aucune commande depuis plus de {dormant_days} jours. "
                    f"Potentiel de réactivation estimé à {potential:,.0f}."
                ),
                confidence=0.78,
                impact="medium",
                actionable=True,
                data={"count": len(segments.dormant), "reactivationPotential": potential},
            )
        )

    return insights

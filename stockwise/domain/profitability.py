"""Per-product margin analysis."""

from __future__ import annotations

from dataclasses import dataclass

from stockwise.domain.records import Insight, Product

LOW_MARGIN_PCT = 15.0
HIGH_MARGIN_PCT = 40.0
UPLIFT_PER_PRODUCT = 5000.0


@dataclass(frozen=True)
class ProductMargin:
    """Margin figures for one priced product."""

    product: Product
    margin: float  # percent of sell price
    profit: float  # per unit


def product_margins(products: list[Product]) -> list[ProductMargin]:
    """Compute margins for products with both prices set, lowest first."""
    margins = [
        ProductMargin(
            product=p,
            margin=(p.sell_price - p.buy_price) / p.sell_price * 100,
            profit=p.sell_price - p.buy_price,
        )
        for p in products
        if p.sell_price > 0 and p.buy_price > 0
    ]
    return sorted(margins, key=lambda m: m.margin)


def analyze_profitability(
    products: list[Product],
    *,
    low_margin_pct: float = LOW_MARGIN_PCT,
    high_margin_pct: float = HIGH_MARGIN_PCT,
    uplift_per_product: float = UPLIFT_PER_PRODUCT,
) -> list[Insight]:
    """Flag low-margin products and highlight high-margin ones.

    Products between the two thresholds produce nothing.
    """
    margins = product_margins(products)
    insights: list[Insight] = []

    low = [m for m in margins if m.margin < low_margin_pct]
    if low:
        examples = [m.product.name for m in low[:3]]
        potential_gain = len(low) * uplift_per_product
        insights.append(
            Insight(
                id="margin-optimization",
                type="optimization",
                title="Optimisation des marges détectée",
                description=(
                    f"{len(low)} produits ont des marges faibles (<{low_margin_pct:g}%), "
                    f"dont {', '.join(examples)}. Gain mensuel estimé : "
                    f"{potential_gain:,.0f} après révision des prix."
                ),
                confidence=0.92,
                impact="high",
                actionable=True,
                data={
                    "products": [m.product.name for m in low],
                    "examples": examples,
                    "count": len(low),
                    "potentialGain": potential_gain,
                },
            )
        )

    high = sorted(
        (m for m in margins if m.margin > high_margin_pct), key=lambda m: m.margin, reverse=True
    )
    if high:
        top = high[:3]
        insights.append(
            Insight(
                id="margin-champions",
                type="recommendation",
                title="Produits à forte marge",
                description=(
                    "Mettez en avant vos produits les plus rentables : "
                    + ", ".join(f"{m.product.name} ({m.margin:.1f}%)" for m in top)
                    + "."
                ),
                confidence=0.88,
                impact="medium",
                actionable=True,
                data={
                    "products": [
                        {"name": m.product.name, "margin": round(m.margin, 1)} for m in top
                    ],
                    "count": len(high),
                },
            )
        )

    return insights

"""Catalog-level advice: basket size and category spread."""

from __future__ import annotations

from stockwise.domain.records import Insight, Product, Sale

MIN_ORDER_VALUE = 50.0
PRODUCTS_PER_CATEGORY = 10.0


def average_order_value(sales: list[Sale]) -> float:
    if not sales:
        return 0.0
    return sum(s.total for s in sales) / len(sales)


def analyze_catalog(
    products: list[Product],
    sales: list[Sale],
    *,
    min_order_value: float = MIN_ORDER_VALUE,
    products_per_category: float = PRODUCTS_PER_CATEGORY,
) -> list[Insight]:
    """Recommend cross-selling on small baskets and diversifying crowded categories."""
    insights: list[Insight] = []

    if sales:
        aov = average_order_value(sales)
        if aov < min_order_value:
            insights.append(
                Insight(
                    id="order-value",
                    type="recommendation",
                    title="Valeur moyenne des commandes faible",
                    description=(
                        f"Panier moyen de {aov:,.0f}. "
                        "Opportunité d'augmentation par vente croisée."
                    ),
                    confidence=0.78,
                    impact="medium",
                    actionable=True,
                    data={"currentAOV": aov},
                )
            )

    categories = {p.category for p in products if p.category}
    if categories:
        per_category = len(products) / len(categories)
        if per_category > products_per_category:
            insights.append(
                Insight(
                    id="diversification",
                    type="recommendation",
                    title="Diversification du catalogue",
                    description=(
                        f"{per_category:.0f} produits par catégorie en moyenne. "
                        "Envisagez d'ajouter de nouvelles catégories."
                    ),
                    confidence=0.71,
                    impact="medium",
                    actionable=True,
                    data={"currentCategories": len(categories), "totalProducts": len(products)},
                )
            )

    return insights

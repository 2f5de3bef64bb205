"""Stock velocity and stockout prediction.

Business logic for calculating:
- Sales velocity (units/day over a trailing window)
- Days until stockout
- Safety stock and recommended reorder quantity

NO DATA ACCESS - pure functions only. Data access happens in services layer.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from stockwise.domain.records import Insight, Product, Sale

WINDOW_DAYS = 30
SAFETY_DAYS = 14
MIN_ORDER_QTY = 10

CONFIDENCE_BASE = 0.6
CONFIDENCE_STEP = 0.05
CONFIDENCE_CAP = 0.95


def sales_in_window(sales: list[Sale], now: datetime, window: int) -> list[Sale]:
    """Sales dated within [now - window days, now]."""
    start = now - timedelta(days=window)
    return [s for s in sales if start <= s.date <= now]


def sales_velocity(sales: list[Sale], product_name: str, window: int) -> tuple[float, int]:
    """Calculate units sold per day for a product.

    Days without sales count as zero, so the divisor is always the window.

    Args:
        sales: Sales already restricted to the window
        product_name: Product name as it appears on sale items
        window: Window length in days

    Returns:
        Tuple of (velocity, number of sales that contain the product)

    """
    if window <= 0:
        return 0.0, 0

    total_sold = 0
    matched = 0
    for sale in sales:
        qty = sale.quantity_of(product_name)
        if qty > 0:
            total_sold += qty
            matched += 1

    return total_sold / window, matched


def days_until_stockout(stock: int, velocity: float) -> int | None:
    """Whole days of stock left at current velocity.

    Returns:
        Days until stockout, or None when velocity is zero (no stockout projected)

    Examples:
        >>> days_until_stockout(30, 2.0)
        15
        >>> days_until_stockout(30, 0.0) is None
        True
    """
    if velocity <= 0:
        return None
    return math.floor(stock / velocity)


def recommended_order(stock: int, velocity: float, safety_days: int, min_order: int) -> int:
    """Reorder quantity needed to cover the safety horizon.

    Out-of-stock products are always ordered at least ``min_order`` units.
    """
    safety_stock = math.ceil(velocity * safety_days)
    qty = max(safety_stock - stock, 0)
    if stock == 0:
        qty = max(qty, min_order)
    return qty


def forecast_stock(
    products: list[Product],
    sales: list[Sale],
    now: datetime,
    *,
    window_days: int = WINDOW_DAYS,
    safety_days: int = SAFETY_DAYS,
    min_order_qty: int = MIN_ORDER_QTY,
) -> list[Insight]:
    """Predict stockouts and reorder needs per product.

    An insight is emitted when the projected stockout falls inside the
    safety horizon or the stock is already at or below its alert threshold.
    Confidence grows with the number of sales backing the velocity.
    """
    recent = sales_in_window(sales, now, window_days)
    insights: list[Insight] = []

    for product in products:
        velocity, matched = sales_velocity(recent, product.name, window_days)
        days_left = days_until_stockout(product.stock, velocity)
        safety_stock = math.ceil(velocity * safety_days)
        order_qty = recommended_order(product.stock, velocity, safety_days, min_order_qty)

        stockout_soon = days_left is not None and days_left < safety_days
        if not (stockout_soon or product.stock <= product.alert_threshold):
            continue

        out_of_stock = product.stock == 0
        if out_of_stock:
            title = f"Rupture de stock : {product.name}"
            description = f"Rupture de stock détectée. Commandez {order_qty} unités immédiatement."
        else:
            title = f"Stock critique pour {product.name}"
            horizon = (
                f"Rupture prévue dans {days_left} jours."
                if days_left is not None
                else "Seuil d'alerte atteint."
            )
            description = (
                f"Stock faible ({product.stock} restant). {horizon} "
                f"Commandez {order_qty} unités."
            )

        insights.append(
            Insight(
                id=f"stock-{product.id or product.name}",
                type="prediction",
                title=title,
                description=description,
                confidence=min(CONFIDENCE_CAP, CONFIDENCE_BASE + matched * CONFIDENCE_STEP),
                impact="high" if out_of_stock else "medium",
                actionable=True,
                data={
                    "productId": product.id,
                    "productName": product.name,
                    "currentStock": product.stock,
                    "recommendedOrder": order_qty,
                    "velocity": velocity,
                    "daysUntilStockout": days_left,
                    "safetyStock": safety_stock,
                    "matchedSales": matched,
                    "severity": "critical" if out_of_stock else "warning",
                },
            )
        )

    return insights

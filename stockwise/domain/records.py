"""Typed snapshot records consumed and produced by the analytics layer.

Input records (Product, Sale, Client) are built once at the data-provider
boundary. ``from_mapping`` accepts both the camelCase keys used by the web
front end and the snake_case columns of the database, and applies every
default there: missing numerics become 0, negative values are clamped,
timestamps are normalized to naive UTC.

NO DATA ACCESS - plain data only.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any

INSIGHT_TYPES = (
    "prediction",
    "recommendation",
    "alert",
    "optimization",
    "critical",
    "warning",
    "opportunity",
    "info",
)
IMPACT_LEVELS = ("high", "medium", "low")
ALERT_CATEGORIES = ("stock", "sales", "clients", "margin")

ACTIVE_STATUS = "Actif"


def utcnow() -> datetime:
    """Current time as naive UTC, the reference clock of all records."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_datetime(value: Any) -> datetime | None:
    """Normalize a timestamp-like value to naive UTC.

    Examples:
        >>> to_datetime("2024-03-01T10:00:00+02:00")
        datetime.datetime(2024, 3, 1, 8, 0)
        >>> to_datetime(date(2024, 3, 1))
        datetime.datetime(2024, 3, 1, 0, 0)
        >>> to_datetime("") is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among candidate keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(number, 0.0)


def _count(value: Any) -> int:
    return int(_number(value))


@dataclass(frozen=True)
class Product:
    """Catalog product with current stock level and prices."""

    id: str
    name: str
    stock: int = 0
    alert_threshold: int = 5
    buy_price: float = 0.0
    sell_price: float = 0.0
    category: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default_threshold: int = 5) -> Product:
        threshold = _pick(data, "alertThreshold", "alert_threshold")
        return cls(
            id=str(_pick(data, "id") or ""),
            name=str(_pick(data, "name") or ""),
            stock=_count(_pick(data, "stock")),
            alert_threshold=default_threshold if threshold is None else _count(threshold),
            buy_price=_number(_pick(data, "buyPrice", "buy_price")),
            sell_price=_number(_pick(data, "sellPrice", "sell_price")),
            category=_pick(data, "category"),
        )


@dataclass(frozen=True)
class SaleItem:
    """Sold line: product name and quantity."""

    product: str
    quantity: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SaleItem:
        return cls(
            product=str(_pick(data, "product", "product_name", "productName") or ""),
            quantity=_count(_pick(data, "quantity")),
        )


@dataclass(frozen=True)
class Sale:
    """Sale with a sale-level total; items feed per-product velocity."""

    id: str
    date: datetime
    total: float = 0.0
    items: tuple[SaleItem, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Sale | None:
        """Build a sale, or None when it has no usable date."""
        when = to_datetime(_pick(data, "date", "sale_date", "created_at"))
        if when is None:
            return None
        items = tuple(
            item
            for item in (SaleItem.from_mapping(raw) for raw in data.get("items") or ())
            if item.quantity > 0
        )
        return cls(
            id=str(_pick(data, "id") or ""),
            date=when,
            total=_number(_pick(data, "total", "total_amount")),
            items=items,
        )

    def quantity_of(self, product_name: str) -> int:
        """Total quantity of a product in this sale."""
        return sum(item.quantity for item in self.items if item.product == product_name)


@dataclass(frozen=True)
class Client:
    """Client with lifetime totals and last order date."""

    id: str
    name: str
    status: str = ACTIVE_STATUS
    total_orders: int = 0
    total_amount: float = 0.0
    last_order: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Client:
        return cls(
            id=str(_pick(data, "id") or ""),
            name=str(_pick(data, "name") or ""),
            status=str(_pick(data, "status") or ""),
            total_orders=_count(_pick(data, "totalOrders", "total_orders")),
            total_amount=_number(_pick(data, "totalAmount", "total_amount")),
            last_order=to_datetime(_pick(data, "lastOrder", "last_order")),
        )

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def days_since_last_order(self, now: datetime) -> float | None:
        if self.last_order is None:
            return None
        return (now - self.last_order).total_seconds() / 86400


@dataclass
class Insight:
    """Ephemeral advisory record produced by an analytics component.

    ``id`` is stable across recomputations so callers can de-duplicate and
    persist notifications by it.
    """

    id: str
    type: str
    title: str
    description: str
    confidence: float
    impact: str
    actionable: bool = True
    data: dict[str, Any] = field(default_factory=dict)
    category: str | None = None
    action: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "impact": self.impact,
            "actionable": self.actionable,
            "data": self.data,
        }
        if self.category is not None:
            payload["category"] = self.category
        if self.action is not None:
            payload["action"] = self.action
        return payload


@dataclass(frozen=True)
class ForecastPoint:
    """One point of a demand (daily) or revenue (monthly) forecast."""

    label: str
    date: date
    value: float
    confidence: float | None = None
    growth: float | None = None


def records_from_mappings(
    products: list[Mapping[str, Any]] | None = None,
    sales: list[Mapping[str, Any]] | None = None,
    clients: list[Mapping[str, Any]] | None = None,
    *,
    default_threshold: int = 5,
) -> tuple[list[Product], list[Sale], list[Client]]:
    """Convert raw mappings into typed records, dropping undated sales."""
    parsed_sales = [Sale.from_mapping(s) for s in sales or ()]
    return (
        [Product.from_mapping(p, default_threshold) for p in products or ()],
        [s for s in parsed_sales if s is not None],
        [Client.from_mapping(c) for c in clients or ()],
    )

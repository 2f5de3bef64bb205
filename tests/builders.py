"""Record builders shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta

from stockwise.domain.records import Client, Product, Sale, SaleItem

NOW = datetime(2024, 6, 15, 12, 0)


def make_product(name: str = "A", **kwargs) -> Product:
    kwargs.setdefault("id", name)
    return Product(name=name, **kwargs)


def make_sale(
    days_ago: float,
    total: float = 100.0,
    items: tuple[tuple[str, int], ...] = (),
    now: datetime = NOW,
) -> Sale:
    """Sale dated ``days_ago`` before the reference time; items are (name, qty) pairs."""
    return Sale(
        id="",
        date=now - timedelta(days=days_ago),
        total=total,
        items=tuple(SaleItem(product=name, quantity=qty) for name, qty in items),
    )


def make_client(
    name: str = "C", last_order_days: float | None = 10, now: datetime = NOW, **kwargs
) -> Client:
    kwargs.setdefault("id", name)
    last_order = None if last_order_days is None else now - timedelta(days=last_order_days)
    return Client(name=name, last_order=last_order, **kwargs)

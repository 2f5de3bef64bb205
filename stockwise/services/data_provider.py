"""Data providers: read-only snapshots of products, sales and clients.

The analytics layer only sees typed records. Providers convert whatever the
backing source holds into those records, applying defaults once here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockwise.db import models
from stockwise.domain.records import Client, Product, Sale, SaleItem, records_from_mappings

logger = logging.getLogger(__name__)


class DataProvider(Protocol):
    """Source of snapshot collections."""

    def get_products(self) -> list[Product]: ...

    def get_sales(self) -> list[Sale]: ...

    def get_clients(self) -> list[Client]: ...


class StaticDataProvider:
    """Provider over in-memory records, e.g. a payload pushed by the front end."""

    def __init__(
        self,
        products: list[Product] | None = None,
        sales: list[Sale] | None = None,
        clients: list[Client] | None = None,
    ):
        self._products = list(products or ())
        self._sales = list(sales or ())
        self._clients = list(clients or ())

    @classmethod
    def from_mappings(
        cls,
        products: list[Mapping[str, Any]] | None = None,
        sales: list[Mapping[str, Any]] | None = None,
        clients: list[Mapping[str, Any]] | None = None,
        *,
        default_threshold: int = 5,
    ) -> StaticDataProvider:
        return cls(
            *records_from_mappings(products, sales, clients, default_threshold=default_threshold)
        )

    def get_products(self) -> list[Product]:
        return list(self._products)

    def get_sales(self) -> list[Sale]:
        return list(self._sales)

    def get_clients(self) -> list[Client]:
        return list(self._clients)


class SqlDataProvider:
    """Provider reading the relational tables through a SQLAlchemy session."""

    def __init__(self, db: Session, default_threshold: int = 5):
        self.db = db
        self.default_threshold = default_threshold

    def get_products(self) -> list[Product]:
        rows = self.db.execute(select(models.Product).order_by(models.Product.id)).scalars()
        return [
            Product(
                id=str(row.id),
                name=row.name,
                stock=max(row.stock or 0, 0),
                alert_threshold=(
                    self.default_threshold
                    if row.alert_threshold is None
                    else max(row.alert_threshold, 0)
                ),
                buy_price=max(row.buy_price or 0.0, 0.0),
                sell_price=max(row.sell_price or 0.0, 0.0),
                category=row.category,
            )
            for row in rows
        ]

    def get_sales(self) -> list[Sale]:
        rows = self.db.execute(select(models.Sale).order_by(models.Sale.date)).scalars()
        sales = [
            Sale(
                id=str(row.id),
                date=row.date,
                total=max(row.total or 0.0, 0.0),
                items=tuple(
                    SaleItem(product=item.product_name, quantity=item.quantity)
                    for item in row.items
                    if (item.quantity or 0) > 0
                ),
            )
            for row in rows
            if row.date is not None
        ]
        logger.debug("sales snapshot loaded", extra={"sales_count": len(sales)})
        return sales

    def get_clients(self) -> list[Client]:
        rows = self.db.execute(select(models.Client).order_by(models.Client.id)).scalars()
        return [
            Client(
                id=str(row.id),
                name=row.name,
                status=row.status or "",
                total_orders=max(row.total_orders or 0, 0),
                total_amount=max(row.total_amount or 0.0, 0.0),
                last_order=row.last_order,
            )
            for row in rows
        ]

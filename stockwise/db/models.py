"""SQLAlchemy ORM models for Stockwise.

This module defines the database schema for:
- Reference data (Products, Clients)
- Fact tables (Sales, Sale Items)
- Notification center and persisted application state

All timestamps are stored as naive UTC. Display timezone conversion happens
in the presentation layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from stockwise.domain.records import utcnow


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# Reference Tables
# =============================================================================


class Product(Base):
    """Catalog product with current stock and prices."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, default=0)
    alert_threshold: Mapped[int | None] = mapped_column(Integer, nullable=True)  # None = default
    buy_price: Mapped[float] = mapped_column(Float, default=0.0)
    sell_price: Mapped[float] = mapped_column(Float, default=0.0)


class Client(Base):
    """Client with lifetime totals maintained by the sales module."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    status: Mapped[str] = mapped_column(String(20), default="Actif")  # "Actif" | "Inactif"
    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_amount: Mapped[float] = mapped_column(Float, default=0.0)
    last_order: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)


# =============================================================================
# Fact Tables
# =============================================================================


class Sale(Base):
    """Sale header; total is sale-level and may differ from the items sum."""

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)
    total: Mapped[float] = mapped_column(Float, default=0.0)
    client_id: Mapped[int | None] = mapped_column(ForeignKey("clients.id"), nullable=True)

    items: Mapped[list[SaleItem]] = relationship(
        back_populates="sale", cascade="all, delete-orphan", lazy="selectin"
    )


class SaleItem(Base):
    """Sold line, referencing the product by name as on the invoice."""

    __tablename__ = "sale_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), index=True)
    product_name: Mapped[str] = mapped_column(String(200))
    quantity: Mapped[int] = mapped_column(Integer, default=0)

    sale: Mapped[Sale] = relationship(back_populates="items")


# =============================================================================
# Notifications & State
# =============================================================================


class Notification(Base):
    """Persisted smart alert shown in the notification center."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    alert_id: Mapped[str] = mapped_column(String(64), index=True)  # e.g. "stock-critical-out"
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(String(1000), default="")
    type: Mapped[str] = mapped_column(String(20), index=True)  # critical | warning | ...
    category: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    details: Mapped[dict] = mapped_column(JSON, default=dict)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)


class AppState(Base):
    """Key/value application state (e.g. last published alert signature)."""

    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=utcnow, onupdate=utcnow
    )

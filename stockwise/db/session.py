"""Database session management for Stockwise.

This module provides SQLAlchemy engine and session factory configured
from stockwise.core.config settings.
"""

from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from stockwise.core.config import get_settings

# Create engine from settings
_settings = get_settings()
_connect_args = {"check_same_thread": False} if _settings.database_url.startswith("sqlite") else {}
engine = create_engine(
    _settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    connect_args=_connect_args,
    echo=False,  # Set to True for SQL debug logging
)

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Iterator[Session]:
    """Get database session (dependency injection for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables."""
    from stockwise.db.models import Base

    Base.metadata.create_all(bind=engine)

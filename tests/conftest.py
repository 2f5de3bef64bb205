"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os
from datetime import datetime

# Engine is built at import of stockwise.db.session; keep tests off the disk
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from stockwise.db.models import Base
from tests.builders import NOW


@pytest.fixture
def now() -> datetime:
    """Fixed reference time (a Saturday)."""
    return NOW


@pytest.fixture
def db() -> Session:
    """Create in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session = Session(engine)
    try:
        yield session
    finally:
        session.close()

"""FastAPI dependencies for database, data provider and clock."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from stockwise.core.config import Settings, get_settings
from stockwise.db.session import get_db
from stockwise.domain.records import utcnow
from stockwise.services.data_provider import DataProvider, SqlDataProvider
from stockwise.services.state_store import SqlStateStore, StateStore


def get_now() -> datetime:
    """Reference time for an analysis run (overridden in tests)."""
    return utcnow()


def get_app_settings() -> Settings:
    return get_settings()


DBSession = Annotated[Session, Depends(get_db)]
Now = Annotated[datetime, Depends(get_now)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_provider(db: DBSession, settings: AppSettings) -> DataProvider:
    """Snapshot provider over the relational tables."""
    return SqlDataProvider(db, default_threshold=settings.default_alert_threshold)


def get_state_store(db: DBSession) -> StateStore:
    return SqlStateStore(db)


Provider = Annotated[DataProvider, Depends(get_provider)]
State = Annotated[StateStore, Depends(get_state_store)]

"""Explicit key/value state store with load/save lifecycle.

Replaces ambient global state (e.g. the last published alert signature):
callers receive a store instance and read or write it explicitly.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy.orm import Session

from stockwise.db.models import AppState
from stockwise.domain.records import utcnow

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Persistent key/value state."""

    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStateStore:
    """Process-local store, used by tests and one-off runs."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._values: dict[str, Any] = dict(initial or {})

    def load(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def save(self, key: str, value: Any) -> None:
        self._values[key] = value


class SqlStateStore:
    """Store backed by the ``app_state`` table.

    ``save`` flushes but does not commit; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str, default: Any = None) -> Any:
        row = self.db.get(AppState, key)
        if row is None:
            return default
        return row.value

    def save(self, key: str, value: Any) -> None:
        row = self.db.get(AppState, key)
        if row is None:
            self.db.add(AppState(key=key, value=value, updated_at=utcnow()))
        else:
            row.value = value
            row.updated_at = utcnow()
        self.db.flush()
        logger.debug("state saved", extra={"state_key": key})

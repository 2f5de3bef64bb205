"""Notification center: persist smart alerts with signature de-duplication."""

from __future__ import annotations

import hashlib
import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from stockwise.core.config import get_settings
from stockwise.core.metrics import notifications_created_total, notifications_deduplicated_total
from stockwise.db.models import Notification
from stockwise.domain.records import Insight, utcnow
from stockwise.services.state_store import StateStore

logger = logging.getLogger(__name__)

SIGNATURE_KEY = "notifications.alert_signature"


def _subjects(alert: Insight) -> list[str]:
    """Names of the products or clients an alert is about."""
    names = []
    for entry in [*alert.data.get("products", ()), *alert.data.get("clients", ())]:
        names.append(entry["name"] if isinstance(entry, dict) else str(entry))
    return sorted(names)


def alert_signature(alerts: list[Insight]) -> str:
    """Deterministic hash of an alert set, order-independent.

    Covers id, title and affected names: a different product going out of
    stock is a new alert even when the count is unchanged.
    """
    parts = sorted(f"{a.id}|{a.title}|{','.join(_subjects(a))}" for a in alerts)
    return hashlib.sha256("\n".join(parts).encode()).hexdigest()


def publish_alerts(
    db: Session,
    alerts: list[Insight],
    state: StateStore,
    types: set[str] | None = None,
) -> list[Notification]:
    """Persist alerts of the configured types as notifications.

    Nothing is written when the alert set matches the last published
    signature.

    Returns:
        Newly created notifications (empty if deduplicated or nothing to publish).

    """
    types = types or get_settings().persisted_notification_types
    selected = [a for a in alerts if a.type in types]
    if not selected:
        # Conditions cleared: forget the last set so a recurrence is published
        if state.load(SIGNATURE_KEY) is not None:
            state.save(SIGNATURE_KEY, None)
            db.commit()
        return []

    signature = alert_signature(selected)
    if state.load(SIGNATURE_KEY) == signature:
        logger.debug("alerts unchanged since last publish, skipping")
        notifications_deduplicated_total.inc()
        return []

    created: list[Notification] = []
    try:
        for alert in selected:
            notification = Notification(
                alert_id=alert.id,
                title=alert.title,
                description=alert.description,
                type=alert.type,
                category=alert.category,
                details=alert.data,
                is_read=False,
                created_at=utcnow(),
            )
            db.add(notification)
            created.append(notification)

        state.save(SIGNATURE_KEY, signature)
        db.commit()
    except Exception:
        logger.exception("Failed to persist notifications")
        db.rollback()
        raise

    for notification in created:
        db.refresh(notification)
        notifications_created_total.labels(type=notification.type).inc()

    logger.info("notifications published", extra={"count": len(created)})
    return created


def list_notifications(
    db: Session,
    *,
    alert_type: str | None = None,
    category: str | None = None,
    is_read: bool | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Notification]:
    """List notifications, newest first, with optional filters."""
    stmt = select(Notification)
    if alert_type is not None:
        stmt = stmt.where(Notification.type == alert_type)
    if category is not None:
        stmt = stmt.where(Notification.category == category)
    if is_read is not None:
        stmt = stmt.where(Notification.is_read == is_read)

    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    return list(db.execute(stmt.offset(offset).limit(limit)).scalars())


def unread_count(db: Session) -> int:
    stmt = select(func.count()).select_from(Notification).where(Notification.is_read.is_(False))
    return db.execute(stmt).scalar() or 0


def mark_as_read(db: Session, notification_id: int) -> Notification | None:
    """Mark one notification read. Returns None if it does not exist."""
    notification = db.get(Notification, notification_id)
    if notification is None:
        return None
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_as_read(db: Session) -> int:
    """Mark every unread notification read. Returns the number updated."""
    result = db.execute(
        update(Notification)
        .where(Notification.is_read.is_(False))
        .values(is_read=True, read_at=utcnow())
    )
    db.commit()
    return result.rowcount or 0


def delete_notification(db: Session, notification_id: int) -> bool:
    notification = db.get(Notification, notification_id)
    if notification is None:
        return False
    db.delete(notification)
    db.commit()
    return True


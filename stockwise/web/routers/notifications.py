"""Notification center API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from stockwise.services.insights import Snapshot, run_component
from stockwise.services.notifications import (
    delete_notification,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
    publish_alerts,
    unread_count,
)
from stockwise.web.deps import AppSettings, DBSession, Now, Provider, State
from stockwise.web.schemas import NotificationDTO, PublishResult

router = APIRouter()


@router.get("", response_model=list[NotificationDTO])
def get_notifications(
    db: DBSession,
    type: str | None = Query(None, description="Filter by type: critical|warning|..."),
    category: str | None = Query(None, description="Filter by category: stock|sales|clients|margin"),
    is_read: bool | None = Query(None, description="Filter by read status"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[NotificationDTO]:
    """List notifications, newest first."""
    rows = list_notifications(
        db, alert_type=type, category=category, is_read=is_read, limit=limit, offset=offset
    )
    return [NotificationDTO.model_validate(r) for r in rows]


@router.get("/unread-count")
def get_unread_count(db: DBSession) -> dict:
    """Get number of unread notifications."""
    return {"unread": unread_count(db)}


@router.post("/publish", response_model=PublishResult)
def publish_current_alerts(
    db: DBSession, provider: Provider, state: State, now: Now, settings: AppSettings
) -> PublishResult:
    """Generate smart alerts from the current data and persist the important ones."""
    alerts = run_component("alerts", Snapshot.load(provider), now, settings)
    selected = [a for a in alerts if a.type in settings.persisted_notification_types]
    created = publish_alerts(db, alerts, state, settings.persisted_notification_types)
    return PublishResult(
        alerts=len(alerts),
        created=len(created),
        deduplicated=bool(selected) and not created,
    )


@router.post("/read-all")
def read_all_notifications(db: DBSession) -> dict:
    """Mark all notifications as read."""
    return {"updated": mark_all_as_read(db)}


@router.post("/{notification_id}/read", response_model=NotificationDTO)
def read_notification(notification_id: int, db: DBSession) -> NotificationDTO:
    """Mark one notification as read."""
    notification = mark_as_read(db, notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationDTO.model_validate(notification)


@router.delete("/{notification_id}")
def remove_notification(notification_id: int, db: DBSession) -> dict:
    """Delete one notification."""
    if not delete_notification(db, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"status": "deleted", "id": notification_id}

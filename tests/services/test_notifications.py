"""Tests for the notification center."""

from __future__ import annotations

import pytest

from stockwise.db.models import Notification
from stockwise.domain.alerts import generate_alerts
from stockwise.services.notifications import (
    SIGNATURE_KEY,
    alert_signature,
    delete_notification,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
    publish_alerts,
    unread_count,
)
from stockwise.services.state_store import MemoryStateStore, SqlStateStore
from tests.builders import make_client, make_product

TYPES = {"critical", "warning"}


@pytest.fixture
def alerts(now):
    products = [
        make_product("out", stock=0),
        make_product("low", stock=2, alert_threshold=5),
        make_product("over", stock=100, alert_threshold=5),
    ]
    clients = [make_client("A", status="Inactif", total_orders=2, total_amount=100)]
    return generate_alerts(products, [], clients, now)


def test_signature_ignores_order(alerts):
    assert alert_signature(alerts) == alert_signature(list(reversed(alerts)))
    assert alert_signature(alerts) != alert_signature(alerts[:1])


def test_publish_persists_only_configured_types(db, alerts):
    state = MemoryStateStore()
    created = publish_alerts(db, alerts, state, TYPES)

    assert sorted(n.alert_id for n in created) == ["stock-critical-out", "stock-warning-low"]
    assert all(n.id is not None for n in created)
    assert state.load(SIGNATURE_KEY) is not None
    assert unread_count(db) == 2


def test_publish_same_alerts_twice_is_deduplicated(db, alerts):
    state = SqlStateStore(db)
    assert len(publish_alerts(db, alerts, state, TYPES)) == 2
    assert publish_alerts(db, alerts, state, TYPES) == []
    assert db.query(Notification).count() == 2


def test_publish_again_after_change(db, alerts, now):
    state = MemoryStateStore()
    publish_alerts(db, alerts, state, TYPES)

    worse = generate_alerts(
        [make_product("out", stock=0), make_product("out2", stock=0)], [], [], now
    )
    created = publish_alerts(db, worse, state, TYPES)

    assert [n.title for n in created] == ["2 produit(s) en rupture"]


def test_publish_nothing_selected(db, now):
    info_only = generate_alerts([make_product("over", stock=100)], [], [], now)
    state = MemoryStateStore()

    assert publish_alerts(db, info_only, state, TYPES) == []
    assert state.load(SIGNATURE_KEY) is None


def test_publish_stores_payload(db, alerts):
    created = publish_alerts(db, alerts, MemoryStateStore(), {"critical"})

    assert len(created) == 1
    notification = created[0]
    assert notification.type == "critical"
    assert notification.category == "stock"
    assert notification.details["products"] == ["out"]
    assert notification.is_read is False


def test_list_filters_and_mark_read(db, alerts):
    publish_alerts(db, alerts, MemoryStateStore(), TYPES)

    warnings = list_notifications(db, alert_type="warning")
    assert [n.alert_id for n in warnings] == ["stock-warning-low"]

    read = mark_as_read(db, warnings[0].id)
    assert read.is_read
    assert read.read_at is not None
    assert unread_count(db) == 1
    assert len(list_notifications(db, is_read=False)) == 1
    assert len(list_notifications(db, category="stock")) == 2


def test_mark_missing_notification(db):
    assert mark_as_read(db, 999) is None
    assert delete_notification(db, 999) is False


def test_mark_all_and_delete(db, alerts):
    created = publish_alerts(db, alerts, MemoryStateStore(), TYPES)

    assert mark_all_as_read(db) == 2
    assert unread_count(db) == 0
    assert mark_all_as_read(db) == 0

    assert delete_notification(db, created[0].id) is True
    assert len(list_notifications(db)) == 1


def test_list_pagination(db, alerts):
    publish_alerts(db, alerts, MemoryStateStore(), TYPES)

    assert len(list_notifications(db, limit=1)) == 1
    assert len(list_notifications(db, limit=1, offset=1)) == 1
    assert list_notifications(db, offset=2) == []


def test_alert_cleared_then_back_is_published_again(db, now):
    state = MemoryStateStore()
    out = generate_alerts([make_product("A", stock=0)], [], [], now)
    restocked = generate_alerts([make_product("A", stock=10)], [], [], now)

    assert len(publish_alerts(db, out, state, TYPES)) == 1
    assert publish_alerts(db, restocked, state, TYPES) == []
    assert state.load(SIGNATURE_KEY) is None

    again = publish_alerts(db, out, state, TYPES)
    assert [n.alert_id for n in again] == ["stock-critical-out"]


def test_same_count_different_product_is_published(db, now):
    state = MemoryStateStore()
    a_out = generate_alerts([make_product("A", stock=0), make_product("B", stock=10)], [], [], now)
    b_out = generate_alerts([make_product("A", stock=10), make_product("B", stock=0)], [], [], now)
    assert a_out[0].title == b_out[0].title

    publish_alerts(db, a_out, state, TYPES)
    created = publish_alerts(db, b_out, state, TYPES)

    assert len(created) == 1
    assert created[0].details["products"] == ["B"]


def test_signature_ignores_stock_level_changes(now):
    low = generate_alerts([make_product("A", stock=3)], [], [], now)
    lower = generate_alerts([make_product("A", stock=2)], [], [], now)
    assert alert_signature(low) == alert_signature(lower)

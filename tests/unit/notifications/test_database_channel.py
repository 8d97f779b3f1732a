"""Tests for the in-app (database) channel."""

from __future__ import annotations

from adapters.notifications import NOTIFICATION_SENT_EVENT, DatabaseChannel, build_channel_registry
from application.notifications import NotificationOrchestrator

from tests.utils.logging import RecordingBroadcaster
from tests.utils.notifications import make_settings


def test_send_persists_and_reports_id(store, recipient, broadcaster):
    channel = DatabaseChannel(store, broadcaster)

    result = channel.send(recipient, "info", "Hi", "There", {"url": "/x"})

    assert result == {"notification_id": 1, "stored": True}
    stored = store.list_for("7")
    assert len(stored) == 1
    assert stored[0].read_at is None


def test_live_event_goes_to_private_user_channel(store, recipient, broadcaster):
    DatabaseChannel(store, broadcaster).send(recipient, "info", "Hi", "There")

    channel, event, data = broadcaster.published[0]
    assert channel == "user.7"
    assert event == NOTIFICATION_SENT_EVENT
    assert data["title"] == "Hi"
    assert data["id"] == 1


def test_broadcast_failure_does_not_fail_delivery(store, recipient):
    channel = DatabaseChannel(store, RecordingBroadcaster(fail_with=RuntimeError("offline")))

    assert channel.send(recipient, "info", "Hi", "There")["stored"] is True
    assert len(store.list_for("7")) == 1


def test_default_database_dispatch_end_to_end(store, recipient, broadcaster):
    registry = build_channel_registry(
        store, settings_provider=lambda: make_settings(enabled=("database",)), broadcaster=broadcaster
    )
    orchestrator = NotificationOrchestrator(
        registry, store, settings_provider=lambda: make_settings(enabled=("database",))
    )

    results = orchestrator.send(recipient, "welcome", "Welcome", "Glad you're here")

    assert results["database"].as_dict() == {
        "success": True,
        "result": {"notification_id": 1, "stored": True},
    }
    record = store.list_for("7")[0]
    assert (record.type, record.title, record.message, record.read_at) == (
        "welcome",
        "Welcome",
        "Glad you're here",
        None,
    )
    assert broadcaster.events("user.7")


def test_always_available(recipient, store):
    assert DatabaseChannel(store).is_available_for(recipient) is True


def test_live_event_payload_is_redacted_but_stored_record_is_not(store, recipient, broadcaster):
    DatabaseChannel(store, broadcaster).send(
        recipient, "security", "Password reset", "Use the link", {"reset_token": "abc", "password": "pw", "url": "/r"}
    )

    _channel, _event, data = broadcaster.published[0]
    assert data["data"] == {"reset_token": "***", "password": "***", "url": "/r"}
    assert data["title"] == "Password reset"

    stored = store.list_for("7")[0]
    assert stored.data == {"reset_token": "abc", "password": "pw", "url": "/r"}

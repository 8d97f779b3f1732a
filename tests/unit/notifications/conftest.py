"""Fixtures for notification unit tests."""

from __future__ import annotations

from typing import Dict

import pytest

import logging_lib
from adapters.db.sqlite.notifications import NotificationsTable
from application.notifications import ChannelRegistry, NotificationOrchestrator
from domains.notifications import Recipient
from logging_lib.config import load_settings
from logging_lib.logger import get_manager, reset_loggers
from logging_lib.sinks.memory import InMemorySink

from tests.utils.logging import RecordingBroadcaster, reset_logging_metrics
from tests.utils.notifications import FakeChannel, SettingsBox, make_settings


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `notifications` marker."""

    for item in items:
        item.add_marker(pytest.mark.notifications)


@pytest.fixture(autouse=True)
def memory_sink(monkeypatch) -> InMemorySink:
    """Configure the global logging manager with an in-memory sink."""

    monkeypatch.delenv("LOG_BROADCAST_ENABLED", raising=False)
    logging_lib.configure(load_settings({"LOG_SINKS": "memory", "LOG_LEVEL": "DEBUG", "LOG_ENV": "test"}))
    reset_logging_metrics()

    sink = next(s for s in get_manager().chain.sinks if isinstance(s, InMemorySink))
    yield sink

    reset_loggers()
    reset_logging_metrics()


@pytest.fixture
def recipient() -> Recipient:
    return Recipient(id="7", name="Ada", email="ada@example.com")


@pytest.fixture
def admin() -> Recipient:
    return Recipient(id="1", name="Root", email="root@example.com", is_admin=True)


@pytest.fixture
def settings_box() -> SettingsBox:
    return SettingsBox(make_settings(enabled=("database", "email")))


@pytest.fixture
def store(tmp_path) -> NotificationsTable:
    return NotificationsTable(str(tmp_path / "notifications.db"))


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def fake_channels() -> Dict[str, FakeChannel]:
    return {
        "database": FakeChannel("database", result={"notification_id": 1, "stored": True}),
        "email": FakeChannel("email"),
        "telegram": FakeChannel("telegram"),
    }


@pytest.fixture
def orchestrator(fake_channels, store, settings_box) -> NotificationOrchestrator:
    registry = ChannelRegistry({cid: (lambda ch=ch: ch) for cid, ch in fake_channels.items()})
    return NotificationOrchestrator(registry, store, settings_provider=settings_box)

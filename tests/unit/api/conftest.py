"""Fixtures for the notification API app."""

from __future__ import annotations

from typing import Iterator

import pytest
from flask import Flask

from adapters.messaging.sse import SSEService
from app_platform.config import ApiSettings
from apps.api.bootstrap import ApiRuntime, build_runtime
from apps.api.http.middleware import proxy_header_identity
from apps.api.main import create_app
from logging_lib.logger import reset_loggers

from tests.utils.flask_apps import api_client
from tests.utils.logging import reset_logging_metrics
from tests.utils.notifications import SettingsBox, make_settings


USER_HEADERS = {"X-User-Id": "7", "X-User-Name": "Ada", "X-User-Email": "ada@example.com"}
ADMIN_HEADERS = {"X-User-Id": "1", "X-User-Name": "Root", "X-User-Admin": "true"}


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `api` marker."""

    for item in items:
        item.add_marker(pytest.mark.api)


@pytest.fixture(autouse=True)
def _logging_env(monkeypatch) -> Iterator[None]:
    monkeypatch.setenv("LOG_SINKS", "memory")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("LOG_BROADCAST_ENABLED", raising=False)
    reset_logging_metrics()
    yield
    reset_loggers()
    reset_logging_metrics()


@pytest.fixture
def notification_settings() -> SettingsBox:
    return SettingsBox(make_settings(enabled=("database", "email")))


@pytest.fixture
def runtime(tmp_path, notification_settings) -> ApiRuntime:
    settings = ApiSettings(env="test", db_path=str(tmp_path / "api.db"))
    return build_runtime(
        settings,
        notification_settings=notification_settings,
        sse=SSEService(heartbeat_interval_s=60.0, subscriber_queue_maxsize=16),
    )


@pytest.fixture
def app(runtime) -> Flask:
    return create_app(runtime, identity_loader=proxy_header_identity)


@pytest.fixture
def client(app, baseline_app_config):
    with api_client(app, config=baseline_app_config) as test_client:
        yield test_client

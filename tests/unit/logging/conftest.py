"""Fixtures for logging library unit tests."""

from __future__ import annotations

from typing import List

import pytest

from logging_lib import get_logger
from logging_lib.config import BROADCAST_ENABLED_ENV, load_settings
from logging_lib.logger import LoggerManager, reset_loggers
from logging_lib.sinks.memory import InMemorySink

from tests.utils.logging import RecordingBroadcaster, reset_logging_metrics


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `logging` marker."""

    for item in items:
        item.add_marker(pytest.mark.logging)


@pytest.fixture(autouse=True)
def _reset_logging_state(monkeypatch):
    """Reset logging globals (manager + metrics) and the broadcast gate around each test."""

    monkeypatch.delenv(BROADCAST_ENABLED_ENV, raising=False)
    reset_loggers()
    reset_logging_metrics()
    yield
    reset_logging_metrics()
    reset_loggers()


@pytest.fixture
def logging_settings():
    """Provide deterministic logging settings wired to the in-memory sink."""

    return load_settings(
        {
            "LOG_SERVICE_NAME": "logging-unit-tests",
            "LOG_ENV": "test",
            "LOG_LEVEL": "DEBUG",
            "LOG_SINKS": "memory",
        }
    )


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def logger_manager(monkeypatch, logging_settings):
    """Test-scoped logger manager configured with deterministic settings."""

    import logging_lib.config as config_module
    import logging_lib.logger as logger_module

    manager = LoggerManager()

    monkeypatch.setattr(logger_module, "_MANAGER", manager)
    monkeypatch.setattr(config_module, "_SETTINGS", logging_settings, raising=False)

    manager.configure(logging_settings)

    yield manager

    manager.reset()


@pytest.fixture
def memory_sink(logger_manager) -> InMemorySink:
    """Return the in-memory sink registered during configuration."""

    sinks: List[InMemorySink] = [s for s in logger_manager.chain.sinks if isinstance(s, InMemorySink)]
    if not sinks:
        pytest.fail("Expected an InMemorySink to be registered during configuration")

    return sinks[0]


@pytest.fixture
def memory_logger(logger_manager):
    """Convenience fixture for producing a logger bound to the in-memory sink."""

    return get_logger("memory-test")

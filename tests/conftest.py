"""Top-level pytest configuration for the notification platform tests."""

from __future__ import annotations

import pytest


def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - configuration hook
    """Register global markers used across the repository."""

    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "logging: Logging library focused tests")
    config.addinivalue_line("markers", "notifications: Notification orchestrator and channel tests")
    config.addinivalue_line("markers", "messaging: Real-time transport tests")
    config.addinivalue_line("markers", "api: Flask route tests")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Ensure sensible default markers based on collection context."""

    for item in items:
        item.add_marker(pytest.mark.unit)

        fspath = str(item.fspath)
        if "messaging" in fspath:
            item.add_marker(pytest.mark.messaging)

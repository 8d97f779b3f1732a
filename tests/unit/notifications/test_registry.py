"""Tests for lazy channel handler construction."""

from __future__ import annotations

import threading
import time

from application.notifications import ChannelRegistry

from tests.utils.notifications import FakeChannel


def test_handlers_are_built_lazily_and_cached():
    built = []

    def factory():
        built.append(1)
        return FakeChannel("slack")

    registry = ChannelRegistry({"slack": factory})
    assert built == []

    first = registry.get("slack")
    second = registry.get("slack")

    assert first is second
    assert built == [1]
    assert list(registry.built_ids()) == ["slack"]


def test_unknown_id_resolves_to_none():
    registry = ChannelRegistry({"slack": lambda: FakeChannel("slack")})

    assert registry.get("carrier-pigeon") is None
    assert "carrier-pigeon" not in registry
    assert "slack" in registry


def test_concurrent_first_access_builds_once():
    built = []
    start = threading.Barrier(8)

    def slow_factory():
        built.append(threading.get_ident())
        time.sleep(0.05)
        return FakeChannel("email")

    registry = ChannelRegistry({"email": slow_factory})
    handlers = []

    def worker():
        start.wait()
        handlers.append(registry.get("email"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(built) == 1
    assert len({id(handler) for handler in handlers}) == 1


def test_register_replaces_cached_handler():
    registry = ChannelRegistry({"ntfy": lambda: FakeChannel("ntfy")})
    original = registry.get("ntfy")

    replacement = FakeChannel("ntfy")
    registry.register("ntfy", lambda: replacement)

    assert registry.get("ntfy") is replacement
    assert registry.get("ntfy") is not original


def test_reset_keeps_constructors():
    registry = ChannelRegistry({"ntfy": lambda: FakeChannel("ntfy")})
    first = registry.get("ntfy")

    registry.reset()

    assert registry.get("ntfy") is not first
    assert registry.known_ids() == ("ntfy",)

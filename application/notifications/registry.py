"""Lazily constructed channel handler cache."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, Mapping, Optional

from .channels import Channel


ChannelFactory = Callable[[], Channel]


class ChannelRegistry:
    """Maps channel ids to handler constructors and caches built handlers.

    Each handler is constructed at most once, on first request, even when the
    first requests for an id arrive concurrently. Ids with no registered
    constructor resolve to ``None``.
    """

    def __init__(self, factories: Optional[Mapping[str, ChannelFactory]] = None) -> None:
        self._factories: Dict[str, ChannelFactory] = dict(factories or {}) # Known ids and their constructors
        self._instances: Dict[str, Channel] = {} # Handlers built so far
        self._lock = threading.Lock() # Guards factories, instances and per-id locks
        self._build_locks: Dict[str, threading.Lock] = {} # Serialises construction per id

    def register(self, channel_id: str, factory: ChannelFactory) -> None:
        """Register (or replace) the constructor for ``channel_id``."""

        with self._lock:
            self._factories[channel_id] = factory
            self._instances.pop(channel_id, None)

    def known_ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._factories)

    def __contains__(self, channel_id: object) -> bool:
        with self._lock:
            return channel_id in self._factories

    def get(self, channel_id: str) -> Optional[Channel]:
        """Return the cached handler for ``channel_id``, building it on first use."""

        instance = self._instances.get(channel_id)
        if instance is not None:
            return instance

        with self._lock:
            factory = self._factories.get(channel_id)
            if factory is None:
                return None
            build_lock = self._build_locks.setdefault(channel_id, threading.Lock())

        with build_lock:
            instance = self._instances.get(channel_id)
            if instance is not None:
                return instance

            instance = factory()
            with self._lock:
                self._instances[channel_id] = instance
            return instance

    def built_ids(self) -> Iterable[str]:
        with self._lock:
            return tuple(self._instances)

    def reset(self) -> None:
        """Drop cached handlers; constructors stay registered."""

        with self._lock:
            self._instances.clear()


__all__ = ["ChannelFactory", "ChannelRegistry"]

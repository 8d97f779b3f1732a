"""In-process metrics for the logging runtime."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict


@dataclass
class RuntimeMetrics:
    """Runtime metrics for the logging library."""

    emitted_total: int = 0 # Records handed to the observer chain
    observer_failures: dict[str, int] | None = None # Observer errors keyed by observer name
    broadcast_published: int = 0 # Records published to the log-viewer channel
    broadcast_suppressed: int = 0 # Records skipped because the gate was off
    broadcast_failures: int = 0 # Publish attempts that raised
    redacted_total: int = 0 # Count of values masked
    channel_outcomes: dict[str, Dict[str, int]] | None = None # Delivery outcomes per channel

    def as_dict(self) -> dict[str, object]:
        """Return the metrics as a dictionary."""

        return {
            "emitted_total": self.emitted_total,
            "observer_failures": dict(self.observer_failures or {}),
            "broadcast_published": self.broadcast_published,
            "broadcast_suppressed": self.broadcast_suppressed,
            "broadcast_failures": self.broadcast_failures,
            "redacted_total": self.redacted_total,
            "channel_outcomes": {
                channel: bucket.copy()
                for channel, bucket in (self.channel_outcomes or {}).items()
            },
        }


_LOCK = threading.RLock()
_METRICS = RuntimeMetrics(observer_failures={}, channel_outcomes={})


def record_emit() -> None:
    with _LOCK:
        _METRICS.emitted_total += 1


def record_observer_failure(observer: str) -> None:
    """Record an observer raising while handling a record."""

    with _LOCK:
        failures = _METRICS.observer_failures or {}
        failures[observer] = failures.get(observer, 0) + 1
        _METRICS.observer_failures = failures


def record_broadcast(outcome: str) -> None:
    """Record a broadcast decision: ``published``, ``suppressed`` or ``failed``."""

    with _LOCK:
        if outcome == "published":
            _METRICS.broadcast_published += 1
        elif outcome == "suppressed":
            _METRICS.broadcast_suppressed += 1
        else:
            _METRICS.broadcast_failures += 1


def record_redaction(count: int) -> None:
    """Record masked values."""

    if count <= 0:
        return

    with _LOCK:
        _METRICS.redacted_total += count


def record_channel_outcome(channel: str, success: bool) -> None:
    """Record the outcome of one channel delivery."""

    with _LOCK:
        outcomes = _METRICS.channel_outcomes or {}
        bucket = outcomes.setdefault(channel, {"success": 0, "failure": 0})
        bucket["success" if success else "failure"] += 1
        _METRICS.channel_outcomes = outcomes


def reset_metrics() -> None:
    """Reset the metrics."""

    with _LOCK:
        _METRICS.emitted_total = 0
        _METRICS.observer_failures = {}
        _METRICS.broadcast_published = 0
        _METRICS.broadcast_suppressed = 0
        _METRICS.broadcast_failures = 0
        _METRICS.redacted_total = 0
        _METRICS.channel_outcomes = {}


def get_metrics() -> RuntimeMetrics:
    """Get a snapshot of the metrics."""

    with _LOCK:
        snapshot = RuntimeMetrics(**_METRICS.as_dict())
        return snapshot

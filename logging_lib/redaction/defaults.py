"""Builtin redaction profiles for the logging library."""

from __future__ import annotations

from ..config import DEFAULT_ACCESS_LOG_DENYLIST, DEFAULT_BROADCAST_DENYLIST


MASK = "***"

# Records and notification payloads published to real-time subscribers.
BROADCAST_DENYLIST = DEFAULT_BROADCAST_DENYLIST

# Request bodies captured by the per-request access log.
ACCESS_LOG_DENYLIST = DEFAULT_ACCESS_LOG_DENYLIST


__all__ = ["MASK", "BROADCAST_DENYLIST", "ACCESS_LOG_DENYLIST"]

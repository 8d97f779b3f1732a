from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from logging_lib.config import _bool_env, _int_env


@dataclass(frozen=True)
class RealtimeSettings:
    """Real-time (SSE) transport timings, Redis mirror and breaker defaults."""

    heartbeat_interval_s: float = 20.0
    subscriber_queue_maxsize: int = 100
    redis_enabled: bool = False
    redis_url: Optional[str] = None
    channel_prefix: str = "sse"
    op_timeout_ms: int = 10           # soft per-publish budget
    max_retries: int = 5
    socket_timeout_ms: int = 100      # hard bound on Redis socket calls
    breaker_threshold: int = 5        # trips after N failures
    breaker_window_s: float = 30.0    # rolling window for failure count
    breaker_reset_s: float = 15.0     # time before allowing calls again

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RealtimeSettings":
        source = env if env is not None else os.environ
        redis_url = source.get("REALTIME_REDIS_URL") or None

        return cls(
            heartbeat_interval_s=float(_int_env(source.get("REALTIME_HEARTBEAT_S"), 20)),
            subscriber_queue_maxsize=max(1, _int_env(source.get("REALTIME_QUEUE_MAXSIZE"), 100)),
            redis_enabled=_bool_env(source.get("REALTIME_REDIS_ENABLED"), bool(redis_url)),
            redis_url=redis_url,
            channel_prefix=source.get("REALTIME_CHANNEL_PREFIX", "sse"),
            op_timeout_ms=max(0, _int_env(source.get("REALTIME_REDIS_OP_TIMEOUT_MS"), 10)),
            max_retries=max(0, _int_env(source.get("REALTIME_REDIS_MAX_RETRIES"), 5)),
            socket_timeout_ms=max(1, _int_env(source.get("REALTIME_REDIS_SOCKET_TIMEOUT_MS"), 100)),
            breaker_threshold=max(1, _int_env(source.get("REALTIME_BREAKER_THRESHOLD"), 5)),
            breaker_window_s=float(_int_env(source.get("REALTIME_BREAKER_WINDOW_S"), 30)),
            breaker_reset_s=float(_int_env(source.get("REALTIME_BREAKER_RESET_S"), 15)),
        )

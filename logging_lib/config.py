"""Configuration utilities for the logging library."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping


def _comma_tuple(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    """Convert a comma-separated string to a tuple."""

    if not value:
        return default

    return tuple(filter(None, (part.strip() for part in value.split(","))))


def _bool_env(value: str | None, default: bool) -> bool:
    """Convert a string to a boolean."""

    if value is None:
        return default

    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(value: str | None, default: int) -> int:
    if value is None:
        return default

    try:
        return int(value)
    except (TypeError, ValueError):
        return default


BROADCAST_ENABLED_ENV = "LOG_BROADCAST_ENABLED"

DEFAULT_BROADCAST_DENYLIST: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "cookie",
    "credit_card",
    "cvv",
    "ssn",
)

DEFAULT_ACCESS_LOG_DENYLIST: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "_token",
    "api_token",
)


@dataclass(frozen=True)
class RedactionSettings:
    """Key-substring denylists applied before records leave the process."""

    enabled: bool
    broadcast_denylist: tuple[str, ...]
    access_log_denylist: tuple[str, ...]


@dataclass(frozen=True)
class LoggingSettings:
    """Immutable runtime configuration."""

    service: str
    env: str
    level: str
    sinks: tuple[str, ...]
    default_context: Mapping[str, Any]
    exclude_routes: tuple[str, ...]
    request_body_limit: int
    correlation_header: str
    broadcast_channel: str
    broadcast_event: str
    redaction: RedactionSettings

    def with_overrides(self, **kwargs: Any) -> "LoggingSettings":
        return replace(self, **kwargs)


_SETTINGS_LOCK = threading.RLock()
_SETTINGS: LoggingSettings | None = None


def load_settings(env: Mapping[str, str] | None = None) -> LoggingSettings:
    source = env if env is not None else os.environ

    redaction_settings = RedactionSettings(
        enabled=_bool_env(source.get("LOG_REDACTION_ENABLED"), True),
        broadcast_denylist=tuple(
            part.lower()
            for part in _comma_tuple(
                source.get("LOG_BROADCAST_DENYLIST"), default=DEFAULT_BROADCAST_DENYLIST
            )
        ),
        access_log_denylist=tuple(
            part.lower()
            for part in _comma_tuple(
                source.get("LOG_ACCESS_DENYLIST"), default=DEFAULT_ACCESS_LOG_DENYLIST
            )
        ),
    )

    return LoggingSettings(
        service=source.get("LOG_SERVICE_NAME", "relay-platform"),
        env=source.get("LOG_ENV", "local"),
        level=source.get("LOG_LEVEL", "INFO").upper(),
        sinks=_comma_tuple(source.get("LOG_SINKS"), default=("stdout",)),
        default_context={},
        exclude_routes=_comma_tuple(
            source.get("LOG_EXCLUDE_ROUTES"), default=("/healthz", "/api/logs/stream")
        ),
        request_body_limit=max(0, _int_env(source.get("LOG_REQUEST_BODY_LIMIT"), 16_384)),
        correlation_header=source.get("LOG_CORRELATION_HEADER", "X-Correlation-ID"),
        broadcast_channel=source.get("LOG_BROADCAST_CHANNEL", "app-logs"),
        broadcast_event=source.get("LOG_BROADCAST_EVENT", "AppLogCreated"),
        redaction=redaction_settings,
    )


def broadcast_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Read the log broadcast gate; never cached so operators can flip it live."""

    source = env if env is not None else os.environ
    return _bool_env(source.get(BROADCAST_ENABLED_ENV), False)


def configure_settings(
    settings: LoggingSettings | None = None, **overrides: Any
) -> LoggingSettings:
    with _SETTINGS_LOCK:
        resolved = settings or load_settings()
        if overrides:
            resolved = resolved.with_overrides(**overrides)
        global _SETTINGS
        _SETTINGS = resolved
        return _SETTINGS


def get_settings() -> LoggingSettings:
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            return configure_settings()
        return _SETTINGS

"""Public API for the structured logging library."""

from __future__ import annotations

from typing import Iterable

from .config import LoggingSettings, broadcast_enabled, configure_settings, get_settings, load_settings
from .context import (
    bind_correlation_id,
    capture_context,
    clear_context,
    correlation_scope,
    current_correlation_id,
    get_context,
    logger_context,
    pop_context,
    push_context,
    release_correlation_id,
    run_with_context,
)
from .dispatcher import Sink
from .enrichment import Enricher, enrich
from .logger import configure_manager, get_logger, register_observer, reset_loggers
from .metrics import get_metrics
from .redaction import KeyRedactor, access_log_redactor, broadcast_redactor, redact

__all__ = [
    "configure",
    "get_logger",
    "register_observer",
    "reset_loggers",
    "logger_context",
    "LoggingSettings",
    "load_settings",
    "get_settings",
    "broadcast_enabled",
    "get_metrics",
    "push_context",
    "pop_context",
    "get_context",
    "clear_context",
    "capture_context",
    "run_with_context",
    "bind_correlation_id",
    "release_correlation_id",
    "current_correlation_id",
    "correlation_scope",
    "Enricher",
    "enrich",
    "KeyRedactor",
    "redact",
    "broadcast_redactor",
    "access_log_redactor",
]


def configure(
    settings: LoggingSettings | None = None,
    *,
    observers: Iterable[Sink] = (),
    **overrides,
) -> LoggingSettings:
    """Configure the logging library and install its observers."""

    resolved = configure_settings(settings, **overrides)
    configure_manager(resolved, observers=observers)

    return resolved

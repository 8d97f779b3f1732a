"""Structured logging schema utilities."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Mapping

from .config import LoggingSettings

SCHEMA_VERSION = 2

REQUIRED_FIELDS = {
    "ts",
    "level",
    "service",
    "env",
    "message",
    "context",
    "extra",
    "schema_version",
}

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def utc_now() -> str:
    return (
        _dt.datetime.now(tz=_dt.timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def build_log_record(
    *,
    level: str,
    message: str,
    settings: LoggingSettings,
    component: str,
    context: Mapping[str, Any] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> Dict[str, Any]:
    """Build a structured log record adhering to the canonical schema.

    ``context`` carries caller-supplied fields; ``extra`` is reserved for
    metadata stamped by the pipeline (see :mod:`logging_lib.enrichment`).
    """

    record: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "ts": utc_now(),
        "level": level.upper(),
        "service": settings.service,
        "env": settings.env,
        "message": message,
        "component": component,
        "context": dict(context or {}),
        "extra": dict(extra or {}),
    }

    validate_record(record)

    return record


def validate_record(record: Mapping[str, Any]) -> None:
    """Validate a structured log record."""

    missing = REQUIRED_FIELDS.difference(record.keys())

    if missing:
        raise ValueError(f"Log record missing required fields: {sorted(missing)}")

    for key in ("context", "extra"):
        if not isinstance(record.get(key), Mapping):
            raise TypeError(f"record {key} must be a mapping")

    if str(record["level"]).upper() not in LEVELS:
        raise ValueError(f"Unknown log level: {record['level']}")

"""Stdout sink emitting NDJSON."""

from __future__ import annotations

import json
import sys
import threading
from typing import Mapping

from ..config import LoggingSettings
from ..redaction import broadcast_redactor


class StdoutSink:
    """Write structured records to stdout as NDJSON."""

    name = "stdout"

    def __init__(self, settings: LoggingSettings, stream=None) -> None:
        """Initialize the stdout sink with a given settings and stream."""

        self._settings = settings # The settings for the sink
        self._stream = stream or sys.stdout # The stream to write to
        self._redactor = broadcast_redactor(settings) # Masks secrets before they hit disk
        self._lock = threading.Lock() # The lock for the sink

    def emit(self, record: Mapping[str, object]) -> None:
        """Emit a record to the stdout sink."""

        payload = dict(record)
        payload["context"] = self._redactor.apply(payload.get("context") or {})
        payload["extra"] = self._redactor.apply(payload.get("extra") or {})

        extra = payload["extra"]
        if isinstance(extra, dict) and extra.get("correlation_id"):
            payload.setdefault("correlation_id", extra["correlation_id"])

        payload.setdefault("severity", payload.get("level", "INFO"))

        line = json.dumps(payload, separators=(",", ":"), default=str)

        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()

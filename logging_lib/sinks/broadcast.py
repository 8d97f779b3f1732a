"""Best-effort real-time publication of log records for live log viewers."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from ..config import LoggingSettings, broadcast_enabled, get_settings
from ..metrics import record_broadcast
from ..redaction import KeyRedactor, broadcast_redactor


class Broadcaster(Protocol):
    """Real-time transport: publish ``data`` as ``event`` on ``channel``."""

    def publish(self, channel: str, event: str, data: Any) -> Any:  # pragma: no cover - protocol
        ...


class BroadcastLogSink:
    """Publish redacted records to the log-viewer channel.

    Delivery is fire-and-forget and at-most-once: the gate is re-read for
    every record, and any error while composing or publishing the event is
    counted and discarded so logging never fails because of the transport.
    """

    name = "broadcast"

    def __init__(
        self,
        broadcaster: Broadcaster,
        *,
        settings: Optional[LoggingSettings] = None,
        enabled: Callable[[], bool] = broadcast_enabled,
        redactor: Optional[KeyRedactor] = None,
    ) -> None:
        self._broadcaster = broadcaster
        self._settings = settings
        self._enabled = enabled
        self._redactor = redactor

    def emit(self, record: Mapping[str, Any]) -> None:
        try:
            if not self._enabled():
                record_broadcast("suppressed")
                return

            settings = self._settings or get_settings()
            payload = self.build_event(record, settings)
            self._broadcaster.publish(
                settings.broadcast_channel, settings.broadcast_event, payload
            )
        except Exception:
            record_broadcast("failed")
            return

        record_broadcast("published")

    def build_event(
        self, record: Mapping[str, Any], settings: LoggingSettings
    ) -> Dict[str, Any]:
        """Compose the ``AppLogCreated`` payload for ``record``."""

        context = dict(record.get("context") or {})
        extra = dict(record.get("extra") or {})

        merged = dict(context)
        merged.update(extra)

        redactor = self._redactor or broadcast_redactor(settings)

        return {
            "level": str(record.get("level", "INFO")).lower(),
            "message": record.get("message"),
            "context": redactor.apply(merged),
            "correlation_id": extra.get("correlation_id"),
            "user_id": extra.get("user_id"),
            "timestamp": record.get("ts"),
        }

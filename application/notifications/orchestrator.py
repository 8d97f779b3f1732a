"""Multi-channel notification dispatch."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from app_platform.config.notifications import NotificationSettings, load_notification_settings
from domains.notifications import (
    ChannelDisabledError,
    ChannelUnavailableError,
    DeliveryOutcome,
    NotificationRecord,
    Recipient,
    UnknownChannelError,
)
from logging_lib import get_logger
from logging_lib.metrics import record_channel_outcome

from .channels import describe_channel
from .registry import ChannelRegistry
from .store import NotificationStore, create_in_app_notification


logger = get_logger("notifications.orchestrator")

SettingsProvider = Callable[[], NotificationSettings]


class NotificationOrchestrator:
    """Fans one notification out to a set of channels.

    Settings are fetched from ``settings_provider`` on every dispatch so
    enablement flags and default channels follow live configuration.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        store: NotificationStore,
        *,
        settings_provider: SettingsProvider = load_notification_settings,
    ) -> None:
        self._registry = registry # Lazily built channel handlers
        self._store = store # In-app notification persistence
        self._settings_provider = settings_provider # Live configuration source

    @property
    def registry(self) -> ChannelRegistry:
        return self._registry

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
        channels: Optional[Sequence[str]] = None,
    ) -> Dict[str, DeliveryOutcome]:
        """Deliver to each requested channel and report per-channel outcomes.

        ``channels=None`` means the configured defaults; an explicit empty
        sequence sends nothing. Unknown and disabled ids are skipped and have
        no entry in the result. A failing channel never stops the others.
        """

        settings = self._settings_provider()
        channel_ids = list(settings.default_channels) if channels is None else list(channels)
        payload = dict(data or {})

        results: Dict[str, DeliveryOutcome] = {}

        for channel_id in channel_ids:
            if channel_id not in self._registry:
                logger.debug("notification_channel_skipped", channel=channel_id, reason="unknown")
                continue
            if not settings.is_enabled(channel_id):
                logger.debug("notification_channel_skipped", channel=channel_id, reason="disabled")
                continue

            # Construction failures count as that channel's failure
            try:
                handler = self._registry.get(channel_id)
                if handler is None:
                    logger.debug("notification_channel_skipped", channel=channel_id, reason="unknown")
                    continue
                result = handler.send(recipient, type, title, message, payload)
            except Exception as exc:
                logger.error(
                    "notification_channel_failed",
                    channel=channel_id,
                    user_id=recipient.id,
                    notification_type=type,
                    error=str(exc),
                )
                results[channel_id] = DeliveryOutcome.failed(exc)
                record_channel_outcome(channel_id, False)
                continue

            results[channel_id] = DeliveryOutcome.ok(result)
            record_channel_outcome(channel_id, True)

        return results

    def send_test_notification(self, recipient: Recipient, channel_id: str) -> Any:
        """Send a fixed test message through one channel and return its raw result.

        Unlike :meth:`send`, problems surface as exceptions: unknown id,
        disabled channel, or a channel not offered to non-admin users. Handler
        failures propagate unchanged.
        """

        handler = self._registry.get(channel_id)
        if handler is None:
            raise UnknownChannelError(channel_id)

        settings = self._settings_provider()
        if not settings.is_enabled(channel_id):
            raise ChannelDisabledError(channel_id)

        if not recipient.is_admin and not settings.is_available_to_users(channel_id):
            raise ChannelUnavailableError(channel_id)

        data = {
            "test": True,
            "timestamp": _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="seconds"),
        }

        logger.info("notification_test_sent", channel=channel_id, user_id=recipient.id)

        return handler.send(
            recipient,
            "test",
            "Test Notification",
            f"This is a test notification from {settings.app_name}.",
            data,
        )

    def create_in_app_notification(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> NotificationRecord:
        """Persist an unread in-app notification without any channel checks."""

        return create_in_app_notification(self._store, recipient, type, title, message, data)

    def channel_statuses(self, recipient: Recipient) -> List[Dict[str, Any]]:
        """Describe every registered channel as seen by ``recipient``."""

        settings = self._settings_provider()
        statuses: List[Dict[str, Any]] = []

        for channel_id in self._registry.known_ids():
            descriptor = describe_channel(channel_id)
            enabled = settings.is_enabled(channel_id)
            offered = recipient.is_admin or settings.is_available_to_users(channel_id)
            configured = False
            if enabled and offered:
                handler = self._registry.get(channel_id)
                configured = bool(handler is not None and handler.is_available_for(recipient))
            statuses.append(
                {
                    "id": descriptor.id,
                    "name": descriptor.name,
                    "description": descriptor.description,
                    "always_available": descriptor.always_available,
                    "user_configurable": descriptor.user_configurable,
                    "enabled": enabled,
                    "available": offered,
                    "configured": configured,
                }
            )

        return statuses


__all__ = ["NotificationOrchestrator", "SettingsProvider"]

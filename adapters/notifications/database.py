"""In-app channel: persists the notification and pings the recipient's live channel."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from application.notifications.store import NotificationStore, create_in_app_notification
from domains.notifications import Recipient
from logging_lib import get_settings
from logging_lib.redaction import KeyRedactor, broadcast_redactor
from logging_lib.sinks.broadcast import Broadcaster


NOTIFICATION_SENT_EVENT = "NotificationSent"

logger = logging.getLogger(__name__)


def user_channel(user_id: Any) -> str:
    return f"user.{user_id}"


class DatabaseChannel:
    channel_id = "database"

    def __init__(
        self,
        store: NotificationStore,
        broadcaster: Optional[Broadcaster] = None,
        *,
        redactor: Optional[KeyRedactor] = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._redactor = redactor # defaults to the configured broadcast denylist

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        record = create_in_app_notification(self._store, recipient, type, title, message, data)

        if self._broadcaster is not None:
            # Record is stored; push failures are logged, not raised
            try:
                redactor = self._redactor or broadcast_redactor(get_settings())
                self._broadcaster.publish(
                    user_channel(recipient.id), NOTIFICATION_SENT_EVENT, redactor.apply(record.to_dict())
                )
            except Exception as exc:
                logger.warning("NotificationSent broadcast failed for user %s: %s", recipient.id, exc)

        return {"notification_id": record.id, "stored": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return True

"""Persistence contract for in-app notifications."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol

from domains.notifications import NotificationRecord, Recipient


class NotificationStore(Protocol):
    def create(self, record: NotificationRecord) -> NotificationRecord:
        ...

    def get(self, notification_id: int) -> Optional[NotificationRecord]:
        ...

    def list_for(
        self, recipient_id: str, *, unread_only: bool = False, limit: int = 50
    ) -> List[NotificationRecord]:
        ...

    def mark_read(self, recipient_id: str, notification_id: int) -> bool:
        ...


def create_in_app_notification(
    store: NotificationStore,
    recipient: Recipient,
    type: str,
    title: str,
    message: str,
    data: Optional[Mapping[str, Any]] = None,
) -> NotificationRecord:
    """Persist an unread in-app notification for ``recipient``.

    No enablement or availability checks apply here; callers that need them go
    through the orchestrator's dispatch paths.
    """

    record = NotificationRecord(
        recipient_id=str(recipient.id),
        type=type,
        title=title,
        message=message,
        data=dict(data or {}),
        read_at=None,
    )
    return store.create(record)


__all__ = ["NotificationStore", "create_in_app_notification"]

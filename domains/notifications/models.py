from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


def _isoformat(value: Optional[_dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat(timespec="seconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Recipient:
    """The user a notification is addressed to."""

    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool = False
    settings: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def setting(self, group: str, key: str, default: Any = None) -> Any:
        """Per-user setting lookup; empty strings count as unset."""

        value = (self.settings.get(group) or {}).get(key)
        return default if value in (None, "") else value


@dataclass
class NotificationRecord:
    """Persisted in-app notification."""

    recipient_id: str
    type: str
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    id: Optional[int] = None
    read_at: Optional[_dt.datetime] = None
    created_at: Optional[_dt.datetime] = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.recipient_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": dict(self.data),
            "read_at": _isoformat(self.read_at),
            "created_at": _isoformat(self.created_at),
        }


@dataclass(frozen=True)
class ChannelDescriptor:
    """Static availability metadata for a channel id.

    ``always_available`` channels need no global credentials (in-app, email);
    ``user_configurable`` channels only need per-user settings (webhooks).
    The ``enabled`` flag is external configuration and is read at dispatch.
    """

    id: str
    name: str
    description: str
    always_available: bool = False
    user_configurable: bool = False


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one channel's attempt within a dispatch."""

    success: bool
    result: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, result: Any) -> "DeliveryOutcome":
        return cls(success=True, result=result)

    @classmethod
    def failed(cls, error: BaseException | str) -> "DeliveryOutcome":
        return cls(success=False, error=str(error))

    def as_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "result": self.result}
        return {"success": False, "error": self.error}

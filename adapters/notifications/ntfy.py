from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from domains.notifications import Recipient

from .transport import HttpChannel


_PRIORITIES = {"error": 5, "critical": 5, "warning": 4, "info": 3, "success": 3}


def ntfy_priority(type: str) -> int:
    """Map a notification type (``backup.error`` uses ``backup``'s base) to 1..5."""

    return _PRIORITIES.get(type.split(".", 1)[0], 3)


class NtfyChannel(HttpChannel):
    channel_id = "ntfy"
    label = "ntfy"

    @staticmethod
    def _topic(recipient: Recipient) -> Optional[str]:
        return recipient.setting("notifications", "ntfy_topic")

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        topic = self._require(self._topic(recipient), "topic for user")
        server = str(self._channel().option("server", "https://ntfy.sh")).rstrip("/")
        data = data or {}

        payload: Dict[str, Any] = {
            "topic": topic,
            "title": title,
            "message": message,
            "tags": [type],
            "priority": ntfy_priority(type),
        }
        if data.get("url"):
            payload["click"] = data["url"]
        if data.get("actions"):
            payload["actions"] = data["actions"]

        # JSON publishing goes to the server root; the topic travels in the body
        self._request("POST", server, json=payload)
        return {"topic": topic, "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return self._settings().is_enabled(self.channel_id) and bool(self._topic(recipient))

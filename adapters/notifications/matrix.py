from __future__ import annotations

import uuid
from html import escape
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from domains.notifications import Recipient

from .transport import HttpChannel, response_json


class MatrixChannel(HttpChannel):
    """Client-server API ``m.room.message`` sent as the configured bot account."""

    channel_id = "matrix"
    label = "Matrix"

    def _room_id(self, recipient: Recipient) -> Optional[str]:
        return recipient.setting("notifications", "matrix_room_id") or self._channel().option("default_room")

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        room_id = self._require(self._room_id(recipient), "room ID")
        cfg = self._channel()
        homeserver = str(self._require(cfg.option("homeserver"), "homeserver")).rstrip("/")
        token = self._require(cfg.option("access_token"), "access token")

        txn_id = uuid.uuid4().hex
        url = (
            f"{homeserver}/_matrix/client/v3/rooms/{quote(room_id, safe='')}"
            f"/send/m.room.message/{txn_id}"
        )
        content = {
            "msgtype": "m.text",
            "body": f"{title}\n\n{message}",
            "format": "org.matrix.custom.html",
            "formatted_body": f"<strong>{escape(title)}</strong><br><br>{escape(message)}",
        }

        response = self._request("PUT", url, json=content, headers={"Authorization": f"Bearer {token}"})

        return {"room_id": room_id, "event_id": response_json(response).get("event_id"), "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return self._settings().is_enabled(self.channel_id) and bool(self._room_id(recipient))

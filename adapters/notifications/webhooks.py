"""Slack and Discord incoming-webhook channels.

Both look for a per-user webhook under the ``notifications`` settings group
first and fall back to the globally configured webhook.
"""

from __future__ import annotations

import datetime as _dt
import time
from typing import Any, Dict, Mapping, Optional

from domains.notifications import Recipient

from .transport import HttpChannel


_DISCORD_COLORS = {
    "error": 0xFF0000,
    "warning": 0xFFA500,
    "success": 0x00FF00,
    "info": 0x0099FF,
}
_DISCORD_DEFAULT_COLOR = 0x7289DA

_SLACK_COLORS = {
    "error": "danger",
    "warning": "warning",
    "success": "good",
}
_SLACK_DEFAULT_COLOR = "#7289DA"


def discord_color(type: str) -> int:
    return _DISCORD_COLORS.get(type, _DISCORD_DEFAULT_COLOR)


def slack_color(type: str) -> str:
    return _SLACK_COLORS.get(type, _SLACK_DEFAULT_COLOR)


class _WebhookChannel(HttpChannel):
    user_setting = ""

    def _webhook_url(self, recipient: Recipient) -> Optional[str]:
        return recipient.setting("notifications", self.user_setting) or self._channel().option("webhook_url")

    def is_available_for(self, recipient: Recipient) -> bool:
        return bool(self._webhook_url(recipient))


class DiscordChannel(_WebhookChannel):
    channel_id = "discord"
    label = "Discord"
    user_setting = "discord_webhook_url"

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = self._require(self._webhook_url(recipient), "webhook URL")
        cfg = self._channel()

        payload: Dict[str, Any] = {
            "username": cfg.option("username", self._settings().app_name),
            "embeds": [
                {
                    "title": title,
                    "description": message,
                    "color": discord_color(type),
                    "timestamp": _dt.datetime.now(_dt.timezone.utc).isoformat(),
                }
            ],
        }
        avatar_url = cfg.option("avatar_url")
        if avatar_url:
            payload["avatar_url"] = avatar_url

        self._request("POST", url, json=payload)
        return {"sent": True}


class SlackChannel(_WebhookChannel):
    channel_id = "slack"
    label = "Slack"
    user_setting = "slack_webhook_url"

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = self._require(self._webhook_url(recipient), "webhook URL")
        cfg = self._channel()

        payload = {
            "username": cfg.option("username", self._settings().app_name),
            "icon_emoji": cfg.option("icon", ":robot_face:"),
            "attachments": [
                {
                    "color": slack_color(type),
                    "title": title,
                    "text": message,
                    "ts": int(time.time()),
                }
            ],
        }

        self._request("POST", url, json=payload)
        return {"sent": True}

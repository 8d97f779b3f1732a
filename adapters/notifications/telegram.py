from __future__ import annotations

from html import escape
from typing import Any, Dict, Mapping, Optional

from domains.notifications import Recipient

from .transport import HttpChannel, response_json


TELEGRAM_API = "https://api.telegram.org"


class TelegramChannel(HttpChannel):
    """Bot API ``sendMessage`` to the chat id the user linked."""

    channel_id = "telegram"
    label = "Telegram"

    def __init__(self, *args, api_base: str = TELEGRAM_API, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._api_base = api_base.rstrip("/")

    @staticmethod
    def _chat_id(recipient: Recipient) -> Optional[str]:
        return recipient.setting("notifications", "telegram_chat_id")

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        chat_id = self._require(self._chat_id(recipient), "chat ID for user")
        cfg = self._channel()
        token = self._require(cfg.option("bot_token"), "bot token")
        parse_mode = cfg.option("parse_mode", "HTML")

        if parse_mode == "HTML":
            text = f"<b>{escape(title)}</b>\n\n{escape(message)}"
        else:
            text = f"{title}\n\n{message}"

        response = self._request(
            "POST",
            f"{self._api_base}/bot{token}/sendMessage",
            json={"chat_id": chat_id, "text": text, "parse_mode": parse_mode},
        )
        result = response_json(response).get("result") or {}

        return {"chat_id": chat_id, "message_id": result.get("message_id"), "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return self._settings().is_enabled(self.channel_id) and bool(self._chat_id(recipient))

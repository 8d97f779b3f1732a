"""SMS channels (Twilio, Vonage).

Both read the destination from the user's channel-specific phone setting and
fall back to the account phone number.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Mapping, Optional

from app_platform.config.notifications import NotificationSettings
from domains.notifications import ChannelConfigurationError, ChannelDeliveryError, Recipient
from logging_lib import get_logger

from .transport import HttpChannel, response_json
from .twilio_client import TwilioConfig, get_twilio_client


logger = get_logger("notifications.sms")

VONAGE_SMS_URL = "https://rest.nexmo.com/sms/json"


def sms_body(title: str, message: str) -> str:
    return f"{title}\n\n{message}"


def phone_for(recipient: Recipient, setting_key: str) -> Optional[str]:
    return (
        recipient.setting("notifications", setting_key)
        or recipient.setting("general", "phone_number")
        or recipient.phone
    )


class TwilioChannel:
    channel_id = "twilio"

    def __init__(
        self,
        settings_provider: Callable[[], NotificationSettings],
        *,
        client_factory: Callable[[TwilioConfig], Any] = get_twilio_client,
    ) -> None:
        self._settings_provider = settings_provider
        self._client_factory = client_factory

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        to_number = phone_for(recipient, "twilio_phone_number")
        if not to_number:
            raise ChannelConfigurationError("Phone number not configured for user")

        config = TwilioConfig.from_channel(self._settings_provider().channel(self.channel_id))
        sender = config.sender_params()
        if not sender:
            raise ChannelConfigurationError("Twilio sender (from number or messaging service) not configured")

        client = self._client_factory(config)

        try:
            sent = client.messages.create(to=to_number, body=sms_body(title, message), **sender)
        except Exception as exc:
            logger.error("sms_send_failed", provider="twilio", user_id=recipient.id, error=str(exc))
            raise ChannelDeliveryError(f"Twilio send failed: {exc}") from exc

        sid = getattr(sent, "sid", None)
        if not sid:
            raise ChannelDeliveryError("Twilio did not return a message SID")

        return {"sid": sid, "to": to_number, "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return self._settings_provider().is_enabled(self.channel_id) and bool(
            phone_for(recipient, "twilio_phone_number")
        )


class VonageChannel(HttpChannel):
    channel_id = "vonage"
    label = "Vonage"

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        to_number = self._require(phone_for(recipient, "vonage_phone_number"), "phone number for user")
        cfg = self._channel()
        api_key = self._require(cfg.option("api_key"), "API key")
        api_secret = self._require(cfg.option("api_secret"), "API secret")

        response = self._request(
            "POST",
            VONAGE_SMS_URL,
            json={
                "api_key": api_key,
                "api_secret": api_secret,
                "to": re.sub(r"\D", "", to_number),
                "from": cfg.option("from", self._settings().app_name),
                "text": sms_body(title, message),
            },
        )

        messages = response_json(response).get("messages") or [{}]
        first = messages[0] if isinstance(messages[0], Mapping) else {}
        status = str(first.get("status", "0"))
        if status != "0":
            raise ChannelDeliveryError(f"Vonage SMS failed: {first.get('error-text', 'Unknown error')}")

        return {"message_id": first.get("message-id"), "to": to_number, "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return self._settings().is_enabled(self.channel_id) and bool(
            phone_for(recipient, "vonage_phone_number")
        )

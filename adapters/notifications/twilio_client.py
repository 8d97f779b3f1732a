"""Process-wide Twilio REST client cache."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from app_platform.config.notifications import ChannelSettings
from domains.notifications import ChannelConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwilioConfig:
    """Credentials and default sender for Twilio."""
    account_sid: str
    auth_token: str
    from_number: Optional[str] = None  # E.164, e.g. +15551234567
    messaging_service_sid: Optional[str] = None  # Preferred over from_number when set

    @classmethod
    def from_channel(cls, settings: ChannelSettings) -> "TwilioConfig":
        return cls(
            account_sid=settings.option("account_sid", ""),
            auth_token=settings.option("auth_token", ""),
            from_number=settings.option("from_number"),
            messaging_service_sid=settings.option("messaging_service_sid"),
        )

    def sender_params(self) -> Dict[str, str]:
        """Sender kwargs for ``messages.create``."""
        if self.messaging_service_sid:
            return {"messaging_service_sid": self.messaging_service_sid}
        if self.from_number:
            return {"from_": self.from_number}
        return {}


# (config, client) is published as one value
_twilio_entry: Optional[Tuple[TwilioConfig, Any]] = None
_init_lock = threading.Lock()


def create_twilio_client(config: TwilioConfig) -> Any:
    """Build a Twilio REST client; the SDK is imported on first use."""
    if not config.account_sid or not config.auth_token:
        raise ChannelConfigurationError("Twilio account SID and auth token are required")

    from twilio.rest import Client

    return Client(config.account_sid, config.auth_token)


def get_twilio_client(config: TwilioConfig) -> Any:
    """
    Return the shared client for ``config``.
    A credentials change rebuilds the client; concurrent first calls build it once.
    """
    global _twilio_entry
    entry = _twilio_entry
    if entry is not None and entry[0] == config:
        return entry[1]

    with _init_lock:
        entry = _twilio_entry
        if entry is not None and entry[0] == config:
            return entry[1]

        client = create_twilio_client(config)
        _twilio_entry = (config, client)
        logger.info("Twilio client initialized")
        return client


def reset_twilio_client() -> None:
    global _twilio_entry
    with _init_lock:
        _twilio_entry = None

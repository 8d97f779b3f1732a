"""Channel handler contract and static channel metadata."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from app_platform.config.notifications import ALWAYS_AVAILABLE_CHANNELS, USER_CONFIGURABLE_CHANNELS
from domains.notifications import ChannelDescriptor, Recipient


@runtime_checkable
class Channel(Protocol):
    """A delivery mechanism for one channel id.

    ``send`` returns a channel-specific result (message id, stored record id,
    response status) or raises on failure; the orchestrator converts either
    into a :class:`~domains.notifications.DeliveryOutcome`.
    """

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        ...

    def is_available_for(self, recipient: Recipient) -> bool:
        ...


_CHANNEL_INFO: Dict[str, tuple[str, str]] = {
    "database": ("In-App", "Notifications shown inside the application"),
    "email": ("Email", "Email notifications to your account address"),
    "webpush": ("Browser Push", "Push notifications delivered to your browser"),
    "telegram": ("Telegram", "Messages from the Telegram bot"),
    "discord": ("Discord", "Messages posted to a Discord webhook"),
    "slack": ("Slack", "Messages posted to a Slack webhook"),
    "ntfy": ("ntfy", "Push notifications through an ntfy topic"),
    "matrix": ("Matrix", "Messages sent to a Matrix room"),
    "twilio": ("SMS (Twilio)", "Text messages sent through Twilio"),
    "vonage": ("SMS (Vonage)", "Text messages sent through Vonage"),
}


def describe_channel(channel_id: str) -> ChannelDescriptor:
    """Return display metadata for ``channel_id``; unknown ids get a generic entry."""

    name, description = _CHANNEL_INFO.get(
        channel_id, (channel_id.capitalize(), f"{channel_id.capitalize()} notifications")
    )
    return ChannelDescriptor(
        id=channel_id,
        name=name,
        description=description,
        always_available=channel_id in ALWAYS_AVAILABLE_CHANNELS,
        user_configurable=channel_id in USER_CONFIGURABLE_CHANNELS,
    )


__all__ = ["Channel", "describe_channel"]

"""Concrete notification channel handlers and the default registry wiring."""

from __future__ import annotations

from functools import partial
from typing import Callable, Optional

import requests

from app_platform.config.notifications import NotificationSettings, load_notification_settings
from application.notifications import ChannelRegistry, NotificationStore
from logging_lib.sinks.broadcast import Broadcaster

from .database import NOTIFICATION_SENT_EVENT, DatabaseChannel, user_channel
from .mail import EmailChannel
from .matrix import MatrixChannel
from .ntfy import NtfyChannel
from .sms import TwilioChannel, VonageChannel
from .telegram import TelegramChannel
from .webhooks import DiscordChannel, SlackChannel


def build_channel_registry(
    store: NotificationStore,
    *,
    settings_provider: Callable[[], NotificationSettings] = load_notification_settings,
    broadcaster: Optional[Broadcaster] = None,
    session: Optional[requests.Session] = None,
) -> ChannelRegistry:
    """Registry of every built-in channel; handlers are constructed on first use."""

    http_session = session or requests.Session()
    http = dict(settings_provider=settings_provider, session=http_session)

    return ChannelRegistry(
        {
            "database": partial(DatabaseChannel, store, broadcaster),
            "email": partial(EmailChannel, settings_provider),
            "telegram": partial(TelegramChannel, **http),
            "discord": partial(DiscordChannel, **http),
            "slack": partial(SlackChannel, **http),
            "ntfy": partial(NtfyChannel, **http),
            "matrix": partial(MatrixChannel, **http),
            "twilio": partial(TwilioChannel, settings_provider),
            "vonage": partial(VonageChannel, **http),
        }
    )


__all__ = [
    "NOTIFICATION_SENT_EVENT",
    "DatabaseChannel",
    "DiscordChannel",
    "EmailChannel",
    "MatrixChannel",
    "NtfyChannel",
    "SlackChannel",
    "TelegramChannel",
    "TwilioChannel",
    "VonageChannel",
    "build_channel_registry",
    "user_channel",
]

"""Configuration utilities and loaders."""

from .notifications import (
    ALWAYS_AVAILABLE_CHANNELS,
    USER_CONFIGURABLE_CHANNELS,
    ChannelSettings,
    NotificationSettings,
    load_notification_settings,
)
from .api import ApiSettings
from .realtime import RealtimeSettings

__all__ = [
    "ALWAYS_AVAILABLE_CHANNELS",
    "ApiSettings",
    "USER_CONFIGURABLE_CHANNELS",
    "ChannelSettings",
    "NotificationSettings",
    "RealtimeSettings",
    "load_notification_settings",
]

"""Notification channel configuration.

Settings are rebuilt from the environment on every call to
:func:`load_notification_settings`; the orchestrator calls its provider at
dispatch time so operators can toggle channels without a restart.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from logging_lib.config import _bool_env, _comma_tuple, _int_env


ALWAYS_AVAILABLE_CHANNELS: tuple[str, ...] = ("database", "email")
USER_CONFIGURABLE_CHANNELS: tuple[str, ...] = ("slack", "discord", "ntfy", "webpush")


@dataclass(frozen=True)
class ChannelSettings:
    """Runtime settings for one channel id."""

    enabled: bool
    available_to_users: bool = False
    options: Mapping[str, Any] = field(default_factory=dict)

    def option(self, key: str, default: Any = None) -> Any:
        value = self.options.get(key)
        return default if value in (None, "") else value


_DISABLED = ChannelSettings(enabled=False)


@dataclass(frozen=True)
class NotificationSettings:
    """Immutable snapshot of notification configuration."""

    app_name: str
    default_channels: tuple[str, ...]
    channels: Mapping[str, ChannelSettings]
    http_timeout_s: float = 10.0

    def channel(self, channel_id: str) -> ChannelSettings:
        return self.channels.get(channel_id, _DISABLED)

    def is_enabled(self, channel_id: str) -> bool:
        return self.channel(channel_id).enabled

    def is_available_to_users(self, channel_id: str) -> bool:
        if channel_id in ALWAYS_AVAILABLE_CHANNELS:
            return True
        return self.channel(channel_id).available_to_users

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "NotificationSettings":
        source = env if env is not None else os.environ
        app_name = source.get("APP_NAME", "Relay")

        raw: dict[str, tuple[bool, dict[str, Any]]] = {
            "database": (True, {}),
            "email": (
                source.get("MAIL_MAILER", "smtp").lower() != "log",
                {
                    "smtp_host": source.get("MAIL_HOST"),
                    "smtp_port": _int_env(source.get("MAIL_PORT"), 587),
                    "username": source.get("MAIL_USERNAME"),
                    "password": source.get("MAIL_PASSWORD"),
                    "use_tls": _bool_env(source.get("MAIL_USE_TLS"), True),
                    "from_email": source.get("MAIL_FROM_ADDRESS"),
                },
            ),
            "telegram": (
                bool(source.get("TELEGRAM_BOT_TOKEN")),
                {
                    "bot_token": source.get("TELEGRAM_BOT_TOKEN"),
                    "parse_mode": source.get("TELEGRAM_PARSE_MODE", "HTML"),
                },
            ),
            "discord": (
                bool(source.get("DISCORD_WEBHOOK_URL")),
                {
                    "webhook_url": source.get("DISCORD_WEBHOOK_URL"),
                    "username": source.get("DISCORD_BOT_NAME", app_name),
                    "avatar_url": source.get("DISCORD_AVATAR_URL"),
                },
            ),
            "slack": (
                bool(source.get("SLACK_WEBHOOK_URL")),
                {
                    "webhook_url": source.get("SLACK_WEBHOOK_URL"),
                    "username": source.get("SLACK_BOT_NAME", app_name),
                    "icon": source.get("SLACK_ICON", ":robot_face:"),
                },
            ),
            "ntfy": (
                _bool_env(source.get("NTFY_ENABLED"), True),
                {"server": source.get("NTFY_SERVER", "https://ntfy.sh")},
            ),
            "matrix": (
                bool(source.get("MATRIX_HOMESERVER")) and bool(source.get("MATRIX_ACCESS_TOKEN")),
                {
                    "homeserver": source.get("MATRIX_HOMESERVER"),
                    "access_token": source.get("MATRIX_ACCESS_TOKEN"),
                    "default_room": source.get("MATRIX_DEFAULT_ROOM"),
                },
            ),
            "twilio": (
                bool(source.get("TWILIO_SID")) and bool(source.get("TWILIO_TOKEN")),
                {
                    "account_sid": source.get("TWILIO_SID"),
                    "auth_token": source.get("TWILIO_TOKEN"),
                    "from_number": source.get("TWILIO_FROM"),
                    "messaging_service_sid": source.get("TWILIO_MESSAGING_SERVICE_SID"),
                },
            ),
            "vonage": (
                bool(source.get("VONAGE_API_KEY")) and bool(source.get("VONAGE_API_SECRET")),
                {
                    "api_key": source.get("VONAGE_API_KEY"),
                    "api_secret": source.get("VONAGE_API_SECRET"),
                    "from": source.get("VONAGE_FROM", app_name),
                },
            ),
        }

        channels: dict[str, ChannelSettings] = {}
        for channel_id, (derived_enabled, options) in raw.items():
            prefix = f"NOTIFICATIONS_{channel_id.upper()}"
            channels[channel_id] = ChannelSettings(
                enabled=_bool_env(source.get(f"{prefix}_ENABLED"), derived_enabled),
                available_to_users=(
                    channel_id in ALWAYS_AVAILABLE_CHANNELS
                    or _bool_env(source.get(f"{prefix}_AVAILABLE"), False)
                ),
                options=MappingProxyType(options),
            )

        timeout_ms = _int_env(source.get("NOTIFICATIONS_HTTP_TIMEOUT_MS"), 10_000)

        return cls(
            app_name=app_name,
            default_channels=_comma_tuple(
                source.get("NOTIFICATIONS_DEFAULT_CHANNELS"), default=("database",)
            ),
            channels=MappingProxyType(channels),
            http_timeout_s=max(1.0, timeout_ms / 1000.0),
        )


def load_notification_settings() -> NotificationSettings:
    """Settings provider reading the live process environment."""

    return NotificationSettings.from_env()


__all__ = [
    "ALWAYS_AVAILABLE_CHANNELS",
    "USER_CONFIGURABLE_CHANNELS",
    "ChannelSettings",
    "NotificationSettings",
    "load_notification_settings",
]

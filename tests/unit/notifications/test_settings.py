"""Tests for notification settings derived from the environment."""

from __future__ import annotations

from app_platform.config.notifications import NotificationSettings


def test_defaults():
    settings = NotificationSettings.from_env({})

    assert settings.default_channels == ("database",)
    assert settings.is_enabled("database") is True
    assert settings.is_enabled("email") is True
    assert settings.is_enabled("ntfy") is True
    assert settings.is_enabled("telegram") is False
    assert settings.is_enabled("slack") is False
    assert settings.is_enabled("does-not-exist") is False
    assert settings.http_timeout_s == 10.0


def test_credentials_enable_channels():
    settings = NotificationSettings.from_env(
        {
            "TELEGRAM_BOT_TOKEN": "123:abc",
            "SLACK_WEBHOOK_URL": "https://hooks.slack.com/x",
            "MATRIX_HOMESERVER": "https://matrix.org",
            "TWILIO_SID": "AC1",
            "MAIL_MAILER": "log",
        }
    )

    assert settings.is_enabled("telegram") is True
    assert settings.channel("telegram").option("bot_token") == "123:abc"
    assert settings.is_enabled("slack") is True
    # matrix needs a token too, twilio needs the auth token
    assert settings.is_enabled("matrix") is False
    assert settings.is_enabled("twilio") is False
    assert settings.is_enabled("email") is False


def test_explicit_flags_override_derived_state():
    settings = NotificationSettings.from_env(
        {
            "TELEGRAM_BOT_TOKEN": "123:abc",
            "NOTIFICATIONS_TELEGRAM_ENABLED": "false",
            "NOTIFICATIONS_NTFY_ENABLED": "0",
            "NOTIFICATIONS_SLACK_AVAILABLE": "true",
        }
    )

    assert settings.is_enabled("telegram") is False
    assert settings.is_enabled("ntfy") is False
    assert settings.is_available_to_users("slack") is True
    assert settings.is_available_to_users("telegram") is False
    assert settings.is_available_to_users("email") is True


def test_default_channels_and_timeout():
    settings = NotificationSettings.from_env(
        {"NOTIFICATIONS_DEFAULT_CHANNELS": "database, email", "NOTIFICATIONS_HTTP_TIMEOUT_MS": "2500"}
    )

    assert settings.default_channels == ("database", "email")
    assert settings.http_timeout_s == 2.5

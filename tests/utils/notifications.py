"""Builders and doubles for notification tests."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app_platform.config.notifications import ChannelSettings, NotificationSettings


KNOWN_CHANNELS = ("database", "email", "telegram", "discord", "slack", "ntfy", "matrix", "twilio", "vonage")


def make_settings(
    enabled: Iterable[str] = ("database",),
    *,
    available: Iterable[str] = (),
    default_channels: Iterable[str] = ("database",),
    options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    app_name: str = "Relay",
) -> NotificationSettings:
    """Settings with exactly the given channels enabled."""

    enabled_ids = set(enabled)
    available_ids = set(available)
    options = options or {}
    known = set(KNOWN_CHANNELS) | enabled_ids | set(options)

    channels = {
        channel_id: ChannelSettings(
            enabled=channel_id in enabled_ids,
            available_to_users=channel_id in available_ids or channel_id in ("database", "email"),
            options=MappingProxyType(dict(options.get(channel_id, {}))),
        )
        for channel_id in known
    }

    return NotificationSettings(
        app_name=app_name,
        default_channels=tuple(default_channels),
        channels=MappingProxyType(channels),
        http_timeout_s=5.0,
    )


class SettingsBox:
    """Mutable settings provider so tests can flip configuration between dispatches."""

    def __init__(self, settings: NotificationSettings) -> None:
        self.settings = settings
        self.calls = 0

    def __call__(self) -> NotificationSettings:
        self.calls += 1
        return self.settings


class FakeChannel:
    def __init__(self, channel_id: str, *, result: Any = None, error: Optional[BaseException] = None) -> None:
        self.channel_id = channel_id
        self.result = result if result is not None else {"sent": True, "via": channel_id}
        self.error = error
        self.available = True
        self.calls: List[Dict[str, Any]] = []

    def send(self, recipient, type, title, message, data=None):
        self.calls.append(
            {"recipient": recipient, "type": type, "title": title, "message": message, "data": data}
        )
        if self.error is not None:
            raise self.error
        return self.result

    def is_available_for(self, recipient) -> bool:
        return self.available


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``; records every request."""

    def __init__(self, *responses: FakeResponse, error: Optional[BaseException] = None) -> None:
        self._responses = list(responses)
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        if self._responses:
            return self._responses.pop(0)
        return FakeResponse(200, {})

    @property
    def last(self) -> Dict[str, Any]:
        return self.requests[-1]

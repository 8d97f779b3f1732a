"""Shared plumbing for channels that deliver over HTTP."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

import requests

from app_platform.config.notifications import ChannelSettings, NotificationSettings
from domains.notifications import ChannelConfigurationError, ChannelDeliveryError


class HttpChannel:
    """Base for webhook and REST API channels.

    Subclasses set ``channel_id`` and call :meth:`_request`; any transport
    error or non-2xx response becomes a :class:`ChannelDeliveryError`.
    """

    channel_id = ""
    label = ""

    def __init__(
        self,
        settings_provider: Callable[[], NotificationSettings],
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings_provider = settings_provider # Live notification settings
        self._session = session or requests.Session() # Shared connection pool

    def _settings(self) -> NotificationSettings:
        return self._settings_provider()

    def _channel(self) -> ChannelSettings:
        return self._settings().channel(self.channel_id)

    def _require(self, value: Any, what: str) -> Any:
        if value in (None, ""):
            raise ChannelConfigurationError(f"{self.label or self.channel_id}: {what} not configured")
        return value

    def _request(
        self,
        method: str,
        url: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[tuple[str, str]] = None,
    ) -> requests.Response:
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                data=data,
                headers=headers,
                auth=auth,
                timeout=self._settings().http_timeout_s,
            )
        except requests.RequestException as exc:
            raise ChannelDeliveryError(f"{self.label} request failed: {exc}") from exc

        if not response.ok:
            raise ChannelDeliveryError(f"{self.label} API error: {response.status_code} {response.text[:200]}")

        return response


def response_json(response: requests.Response) -> Mapping[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, Mapping) else {}

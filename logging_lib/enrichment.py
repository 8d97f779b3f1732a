"""Stamp log records with ambient request metadata."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from flask import g, has_request_context, request

from .context import current_correlation_id


UserResolver = Callable[[], Optional[Any]]
RequestResolver = Callable[[], Tuple[Optional[str], Optional[str]]]


def flask_user_id() -> Optional[Any]:
    """Authenticated user id of the current Flask request, if any."""

    if not has_request_context():
        return None

    user = g.get("current_user")
    user_id = getattr(user, "id", None)
    if user_id is not None:
        return user_id

    session = getattr(request, "session", None)
    return getattr(session, "user_id", None)


def flask_request_target() -> Tuple[Optional[str], Optional[str]]:
    """Return ``(client_ip, request_uri)`` of the current Flask request."""

    if not has_request_context():
        return None, None

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip() or None
    else:
        ip_address = request.remote_addr

    query = request.query_string.decode("utf-8", "replace")
    request_uri = f"{request.path}?{query}" if query else request.path

    return ip_address, request_uri


class Enricher:
    """Adds ``correlation_id``, ``user_id``, ``ip_address`` and ``request_uri``.

    Each piece of ambient state is looked up independently; a lookup that is
    unavailable or fails simply leaves its key out of ``extra``.
    """

    def __init__(
        self,
        *,
        correlation_resolver: Callable[[], Optional[str]] = current_correlation_id,
        user_resolver: UserResolver = flask_user_id,
        request_resolver: RequestResolver = flask_request_target,
    ) -> None:
        self._correlation_resolver = correlation_resolver
        self._user_resolver = user_resolver
        self._request_resolver = request_resolver

    def enrich(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        enriched = dict(record)
        extra = dict(record.get("extra") or {})

        correlation_id = self._safe(self._correlation_resolver)
        if correlation_id is not None:
            extra["correlation_id"] = correlation_id

        user_id = self._safe(self._user_resolver)
        if user_id is not None:
            extra["user_id"] = user_id

        target = self._safe(self._request_resolver) or (None, None)
        ip_address, request_uri = target
        if ip_address is not None:
            extra["ip_address"] = ip_address
        if request_uri is not None:
            extra["request_uri"] = request_uri

        enriched["extra"] = extra
        return enriched

    __call__ = enrich

    @staticmethod
    def _safe(resolver: Callable[[], Any]) -> Any:
        try:
            return resolver()
        except Exception:
            return None


_DEFAULT_ENRICHER = Enricher()


def enrich(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Enrich ``record`` using the Flask-aware default resolvers."""

    return _DEFAULT_ENRICHER.enrich(record)


__all__ = ["Enricher", "enrich", "flask_user_id", "flask_request_target"]

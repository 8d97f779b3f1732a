"""Flask integration helpers for logging_lib."""

from __future__ import annotations

import time
from typing import Any, Mapping, Optional

from flask import Flask, Response, g, request

from .config import get_settings
from .context import bind_correlation_id, release_correlation_id
from .logger import get_logger
from .redaction import access_log_redactor


def register_flask_context(app: Flask, *, service: str | None = None) -> None:
    """Attach request lifecycle hooks for correlation ids and access logging.

    Every request gets a correlation id (propagated from the configured header
    or freshly generated) that is bound before any handler runs, echoed on the
    response under the same header name, and released at teardown.
    """

    settings = get_settings()
    component = service or settings.service
    correlation_header = settings.correlation_header
    exclude_routes = settings.exclude_routes
    body_limit = settings.request_body_limit
    redactor = access_log_redactor(settings)
    logger = get_logger(f"{component}.http")

    app.config.setdefault("CORRELATION_ID_HEADER", correlation_header)

    def _should_log_route(path: str) -> bool:
        return not any(path.startswith(prefix) for prefix in exclude_routes)

    @app.before_request
    def _logging_before_request() -> None:  # type: ignore[override]
        binding = bind_correlation_id(request.headers.get(correlation_header))
        g.correlation_id = binding.correlation_id
        g._correlation_binding = binding
        g._logging_start = time.perf_counter()

    @app.after_request
    def _logging_after_request(response: Response) -> Response:  # type: ignore[override]
        correlation_id = g.get("correlation_id")
        if correlation_id:
            response.headers[correlation_header] = correlation_id

        if not _should_log_route(request.path):
            return response

        elapsed_ms = _elapsed_ms(g.pop("_logging_start", None))
        route = request.url_rule.rule if request.url_rule else request.path

        logger.info(
            "http_request",
            route=route,
            method=request.method,
            status=response.status_code,
            lat_ms=elapsed_ms,
            context={
                "user_agent": request.headers.get("User-Agent"),
                "request_fields": _redacted_body(redactor, body_limit),
            },
        )

        return response

    @app.teardown_request
    def _logging_teardown(_exc: Any) -> None:  # type: ignore[override]
        if _exc is not None and _should_log_route(request.path):
            elapsed_ms = _elapsed_ms(g.pop("_logging_start", None))
            status = getattr(_exc, "code", 500)
            try:
                status_code = int(status)
            except (TypeError, ValueError):
                status_code = 500
            logger.error(
                "http_exception",
                route=request.path,
                method=request.method,
                status=status_code,
                lat_ms=elapsed_ms,
                context={
                    "exception": type(_exc).__name__,
                    "error": str(_exc),
                },
            )

        binding = g.pop("_correlation_binding", None)
        if binding is not None:
            release_correlation_id(binding)


def _redacted_body(redactor, limit: int) -> Optional[Mapping[str, Any]]:
    if limit <= 0 or not request.is_json:
        return None

    if (request.content_length or 0) > limit:
        return None

    payload = request.get_json(silent=True)
    if not isinstance(payload, Mapping):
        return None

    return redactor.apply(payload)


def _elapsed_ms(start: float | None) -> float:
    if start is None:
        return 0.0
    return round((time.perf_counter() - start) * 1000.0, 3)

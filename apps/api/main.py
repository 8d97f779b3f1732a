#!/usr/bin/env python3
"""
Notification API: Flask composition root.

Responsibilities:
- Configure structured logging with the live log broadcaster attached
- Wire correlation-id hooks, identity loading, CORS and error handlers
- Register notification, log-stream and health blueprints
"""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from logging_lib import configure as configure_structured_logging, get_logger as get_structured_logger
from logging_lib.flask_ext import register_flask_context

from app_platform.config import ApiSettings
from app_platform.errors.api import register_error_handlers
from apps.api.bootstrap import ApiRuntime, build_runtime
from apps.api.http.middleware import IdentityLoader, anonymous_identity, install_identity_loader, proxy_header_identity
from apps.api.http.router import register_routes


def create_app(
    runtime: Optional[ApiRuntime] = None,
    *,
    identity_loader: Optional[IdentityLoader] = None,
    configure_logging: bool = True,
) -> Flask:
    """Build the API app; tests pass their own runtime and identity loader."""

    rt = runtime or build_runtime()

    if configure_logging:
        configure_structured_logging(
            service="api",
            env=rt.settings.env,
            observers=(rt.log_broadcaster,),
        )

    logger = get_structured_logger("api.main")

    app = Flask(__name__)
    CORS(app, origins=list(rt.settings.cors_origins))

    if identity_loader is None:
        identity_loader = proxy_header_identity if rt.settings.trust_proxy_identity else anonymous_identity

    register_flask_context(app, service="api")
    install_identity_loader(app, identity_loader)
    register_error_handlers(app)

    app.config["runtime"] = rt
    app.config["sse_service"] = rt.sse
    app.config["notification_store"] = rt.store
    app.config["orchestrator"] = rt.orchestrator

    register_routes(app)

    logger.info(
        "api service ready",
        channels=list(rt.registry.known_ids()),
        redis_mirror=rt.sse.redis_backend is not None,
    )

    return app


def main() -> None:
    settings = ApiSettings.from_env()
    app = create_app(build_runtime(settings))
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()

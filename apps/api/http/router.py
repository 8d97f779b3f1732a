"""Central route registration for the API app."""

from __future__ import annotations

from flask import Flask

from logging_lib import get_logger as get_structured_logger

from .health_routes import health_bp
from .log_stream_routes import logs_bp
from .notification_routes import notifications_bp


def register_routes(app: Flask) -> None:
    """Register the routes for the API."""

    logger = get_structured_logger("api.http.router")

    app.register_blueprint(health_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(logs_bp)

    logger.debug("Registered blueprints", blueprints=sorted(app.blueprints))

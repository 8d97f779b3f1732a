"""Live application log stream for administrators."""

from __future__ import annotations

import uuid

from flask import Blueprint, Response, current_app, stream_with_context

from app_platform.errors.api import ApiError
from logging_lib import broadcast_enabled, get_logger as get_structured_logger, get_settings

from .notification_routes import SSE_HEADERS, current_recipient


logs_bp = Blueprint("logs", __name__, url_prefix="/api/logs")

logger = get_structured_logger("api.http.logs")


@logs_bp.route("/stream", methods=["GET"])
def stream_logs():
    """Subscribe an admin to the application log channel."""

    user = current_recipient()
    if not user.is_admin:
        raise ApiError("Administrator access required", "PERMISSION_DENIED")

    channel = get_settings().broadcast_channel
    sse = current_app.config["sse_service"]

    logger.info("log_stream_opened", channel=channel, broadcasting=broadcast_enabled())

    frames = sse.subscribe(channel, f"logs-{user.id}-{uuid.uuid4().hex[:8]}")
    return Response(stream_with_context(frames), mimetype="text/event-stream", headers=SSE_HEADERS)

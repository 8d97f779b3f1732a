"""Notification endpoints: channel status, test sends and the in-app inbox."""

from __future__ import annotations

import uuid

from flask import Blueprint, Response, current_app, g, jsonify, request, stream_with_context

from app_platform.errors.api import ApiError
from domains.notifications import Recipient
from logging_lib import get_logger as get_structured_logger


notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")

logger = get_structured_logger("api.http.notifications")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def current_recipient() -> Recipient:
    """Return the authenticated recipient or fail with AUTH_ERROR."""

    user = g.get("current_user")
    if user is None:
        raise ApiError("Unauthorized", "AUTH_ERROR")
    return user


def _orchestrator():
    return current_app.config["orchestrator"]


def _store():
    return current_app.config["notification_store"]


@notifications_bp.route("/channels", methods=["GET"])
def list_channels():
    """List registered channels with their state for the current user."""

    recipient = current_recipient()
    return jsonify({"channels": _orchestrator().channel_statuses(recipient)})


@notifications_bp.route("/test", methods=["POST"])
def send_test():
    """Send a test notification through one channel."""

    recipient = current_recipient()
    payload = request.get_json(silent=True) or {}
    channel_id = payload.get("channel")

    if not isinstance(channel_id, str) or not channel_id.strip():
        raise ApiError("Field 'channel' is required", "VALIDATION_ERROR")

    result = _orchestrator().send_test_notification(recipient, channel_id.strip())

    return jsonify({"success": True, "channel": channel_id.strip(), "result": result})


@notifications_bp.route("", methods=["GET"])
def list_notifications():
    """Return the current user's in-app notifications, newest first."""

    recipient = current_recipient()
    unread_only = request.args.get("unread", "").lower() in {"1", "true", "yes"}

    try:
        limit = int(request.args.get("limit", 50))
    except ValueError:
        raise ApiError("Query parameter 'limit' must be an integer", "VALIDATION_ERROR")

    records = _store().list_for(recipient.id, unread_only=unread_only, limit=min(max(limit, 1), 200))

    return jsonify({"notifications": [record.to_dict() for record in records]})


@notifications_bp.route("/<int:notification_id>/read", methods=["POST"])
def mark_read(notification_id: int):
    """Mark one of the current user's notifications as read."""

    recipient = current_recipient()
    store = _store()

    record = store.get(notification_id)
    if record is None or str(record.recipient_id) != str(recipient.id):
        raise ApiError("Notification not found", "NOT_FOUND")

    store.mark_read(recipient.id, notification_id)

    return jsonify({"success": True, "notification": store.get(notification_id).to_dict()})


@notifications_bp.route("/stream", methods=["GET"])
def stream():
    """Live ``NotificationSent`` events for the current user as Server-Sent Events."""

    recipient = current_recipient()
    sse = current_app.config["sse_service"]
    client_id = f"user-{recipient.id}-{uuid.uuid4().hex[:8]}"

    logger.info("notification_stream_opened", user_id=recipient.id)

    frames = sse.subscribe(f"user.{recipient.id}", client_id)
    return Response(stream_with_context(frames), mimetype="text/event-stream", headers=SSE_HEADERS)

"""Health endpoints."""

from __future__ import annotations

import time

from flask import Blueprint, current_app, jsonify

from logging_lib import get_metrics


health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def healthz():
    """Liveness probe."""

    return (jsonify({"status": "ok", "timestamp": time.time()}), 200)


@health_bp.route("/api/health")
def health():
    """Runtime counters and real-time transport state."""

    sse = current_app.config["sse_service"]

    return jsonify(
        {
            "status": "ok",
            "timestamp": time.time(),
            "realtime": {
                "subscribers": sse.subscriber_count(),
                "redis_attached": sse.redis_backend is not None,
                "breaker": sse.redis_breaker.snapshot(),
            },
            "logging": get_metrics().as_dict(),
        }
    )

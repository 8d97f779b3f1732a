"""Live log stream endpoint and broadcast wiring."""

from __future__ import annotations

import json

from tests.unit.api.conftest import ADMIN_HEADERS, USER_HEADERS


def test_log_stream_requires_admin(client):
    response = client.get("/api/logs/stream", headers=USER_HEADERS)

    assert response.status_code == 403
    assert response.get_json()["code"] == "PERMISSION_DENIED"


def test_admin_can_open_log_stream(client, runtime):
    response = client.get("/api/logs/stream", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.mimetype == "text/event-stream"
    assert response.headers["Cache-Control"] == "no-cache"
    assert runtime.sse.subscriber_count("app-logs") == 1
    response.close()


def test_request_logs_reach_the_log_channel_when_enabled(client, runtime, monkeypatch):
    stream = runtime.sse.subscribe("app-logs", "viewer")
    next(stream)
    monkeypatch.setenv("LOG_BROADCAST_ENABLED", "true")

    client.get("/api/notifications/channels", headers={**USER_HEADERS, "X-Correlation-ID": "corr-123"})

    frames = []
    while runtime.sse._hub.subscriber_count("app-logs") and len(frames) < 10:
        frame = next(stream).decode("utf-8")
        frames.append(frame)
        if "http_request" in frame:
            break
    stream.close()

    access = frames[-1]
    assert "event: AppLogCreated" in access
    payload = json.loads(next(line[6:] for line in access.splitlines() if line.startswith("data: ")))
    assert payload["message"] == "http_request"
    assert payload["level"] == "info"
    assert payload["correlation_id"] == "corr-123"


def test_request_logs_stay_local_when_gate_is_off(client, runtime):
    stream = runtime.sse.subscribe("app-logs", "viewer")
    next(stream)

    client.get("/healthz")

    assert runtime.sse.subscriber_count("app-logs") == 1
    assert runtime.sse.publish("app-logs", "Probe", {"ok": True}) == 1
    assert "event: Probe" in next(stream).decode("utf-8")
    stream.close()


def test_health_reports_realtime_and_logging_state(client):
    body = client.get("/api/health").get_json()

    assert body["status"] == "ok"
    assert body["realtime"]["redis_attached"] is False
    assert body["realtime"]["breaker"]["state"] == "closed"
    assert "logging" in body

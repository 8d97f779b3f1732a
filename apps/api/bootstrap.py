"""API application bootstrap wiring.

Builds the real-time broadcaster, notification store, channel registry and
orchestrator from settings. Centralizes DI for the API app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from adapters.db.sqlite.notifications import NotificationsTable
from adapters.messaging.sse import SSEService, get_sse_service
from adapters.notifications import build_channel_registry
from app_platform.config import ApiSettings, NotificationSettings, RealtimeSettings, load_notification_settings
from application.notifications import ChannelRegistry, NotificationOrchestrator, NotificationStore
from logging_lib.sinks import BroadcastLogSink


@dataclass
class ApiRuntime:
    """Long-lived collaborators shared by all requests."""

    settings: ApiSettings
    sse: SSEService
    store: NotificationStore
    registry: ChannelRegistry
    orchestrator: NotificationOrchestrator
    log_broadcaster: BroadcastLogSink


def build_runtime(
    settings: Optional[ApiSettings] = None,
    *,
    realtime: Optional[RealtimeSettings] = None,
    notification_settings: Callable[[], NotificationSettings] = load_notification_settings,
    sse: Optional[SSEService] = None,
    store: Optional[NotificationStore] = None,
) -> ApiRuntime:
    cfg = settings or ApiSettings.from_env()
    sse_service = sse or get_sse_service(realtime)
    notification_store = store or NotificationsTable(cfg.db_path)

    registry = build_channel_registry(
        notification_store,
        settings_provider=notification_settings,
        broadcaster=sse_service,
    )
    orchestrator = NotificationOrchestrator(
        registry,
        notification_store,
        settings_provider=notification_settings,
    )

    return ApiRuntime(
        settings=cfg,
        sse=sse_service,
        store=notification_store,
        registry=registry,
        orchestrator=orchestrator,
        log_broadcaster=BroadcastLogSink(sse_service),
    )

"""Factory for constructing SSEService from realtime settings."""
from typing import Optional

from app_platform.config.realtime import RealtimeSettings

from .service import SSEService
from .breakers import CircuitBreaker
from .redis_backend import _RedisConfig


def get_sse_service(settings: Optional[RealtimeSettings] = None) -> SSEService:
	"""
	Create a configured SSEService.
	The Redis mirror is best-effort: when it cannot be attached the service stays in-process.
	"""
	cfg = settings or RealtimeSettings.from_env()

	service = SSEService(
		heartbeat_interval_s=cfg.heartbeat_interval_s,
		subscriber_queue_maxsize=cfg.subscriber_queue_maxsize,
		breaker=CircuitBreaker.from_settings(cfg),
	)

	if cfg.redis_enabled and cfg.redis_url:
		service.attach_redis(
			url=cfg.redis_url,
			config=_RedisConfig(
				url=cfg.redis_url,
				channel_prefix=cfg.channel_prefix,
				op_timeout_s=max(0.0, cfg.op_timeout_ms / 1000.0),
				max_retries=max(0, cfg.max_retries),
				socket_timeout_s=cfg.socket_timeout_ms / 1000.0,
			),
		)

	return service

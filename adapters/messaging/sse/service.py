"""Public SSE service facade over the channel hub and optional Redis mirror.

Publishing delivers to local subscribers of the named channel and mirrors the
message to Redis behind a circuit breaker when a backend is attached.
"""

import logging
import uuid
from typing import Any, Dict, Iterator, Optional

from .hub import _ChannelHub
from .redis_backend import _RedisBackend, _RedisConfig, _RedisPyClientAdapter
from .breakers import CircuitBreaker

logger = logging.getLogger(__name__)


class SSEService:
	"""Named-channel broadcaster used by routes and the log/notification pipelines."""

	def __init__(
		self,
		heartbeat_interval_s: float = 20.0,
		subscriber_queue_maxsize: int = 100,
		*,
		breaker: Optional[CircuitBreaker] = None,
		redis_backend: Optional[_RedisBackend] = None,
	) -> None:
		self._hub = _ChannelHub(heartbeat_interval_s, subscriber_queue_maxsize)
		self._redis_backend: Optional[_RedisBackend] = redis_backend
		self._redis_breaker = breaker or CircuitBreaker()
		self._origin = uuid.uuid4().hex # tags mirrored envelopes so the relay skips our own

	@property
	def redis_backend(self) -> Optional[_RedisBackend]:
		return self._redis_backend

	@property
	def redis_breaker(self) -> CircuitBreaker:
		return self._redis_breaker

	def publish(self, channel: str, event: Optional[str], data: Any) -> int:
		"""Deliver ``data`` as ``event`` to subscribers of ``channel``; returns local deliveries."""

		frame = self._hub.next_frame(data, event=event)
		deliveries = self._hub.publish(channel, frame)
		self._publish_redis_mirrored(channel, event, data)
		return deliveries

	def subscribe(self, channel: str, client_id: str) -> Iterator[bytes]:
		return self._hub.subscribe(channel, client_id)

	def subscriber_count(self, channel: Optional[str] = None) -> int:
		return self._hub.subscriber_count(channel)

	def attach_redis(
		self,
		*,
		client: Any = None,
		url: Optional[str] = None,
		config: Optional[_RedisConfig] = None,
		relay: bool = True,
	) -> bool:
		"""Attach a Redis mirror built from ``client`` or ``url``; returns whether attached."""

		if client is None and url is None:
			return False

		cfg = config or _RedisConfig(url=url)
		try:
			backend_client = client
			if backend_client is None:
				import redis

				backend_client = redis.Redis.from_url(url, **cfg.client_kwargs())

			backend = _RedisBackend(_RedisPyClientAdapter(backend_client), config=cfg)
			if relay:
				backend.start_relay(self._on_remote_envelope)
		except Exception as exc:
			logger.warning("SSE Redis mirror unavailable, staying in-process: %s", exc)
			self._redis_backend = None
			return False

		self._redis_backend = backend
		return True

	def close(self) -> None:
		if self._redis_backend is not None:
			self._redis_backend.close()
			self._redis_backend = None

	def _on_remote_envelope(self, channel: str, envelope: Dict[str, Any]) -> None:
		if envelope.get("origin") == self._origin:
			return
		frame = self._hub.next_frame(envelope.get("data"), event=envelope.get("event"))
		self._hub.publish(channel, frame)

	def _publish_redis_mirrored(self, channel: str, event: Optional[str], data: Any) -> None:
		backend = self._redis_backend
		if backend is None:
			return

		if not self._redis_breaker.allow_call():
			return

		success = False
		try:
			success = backend.publish(
				channel, {"origin": self._origin, "event": event, "data": data}
			)
		except Exception as exc:
			logger.debug("SSE Redis mirror publish raised: %s", exc)
		finally:
			if success:
				self._redis_breaker.on_success()
			else:
				self._redis_breaker.on_failure()

"""Private Redis Pub/Sub mirror for SSE channels (internal only).

Frames published in one process are mirrored to ``<prefix>:<channel>`` so that
other processes can relay them to their own subscribers. The redis package is
imported lazily by the factory; this module only needs the narrow client
protocol below.
"""

from __future__ import annotations

import json
import logging
import random
import threading
import time
from dataclasses import dataclass
from collections import deque
from typing import Any, Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class _RedisConfig:
	"""Backend configuration."""
	url: Optional[str] = None
	channel_prefix: str = "sse"
	read_timeout_s: float = 1.0
	# Soft per-publish budget; cannot preempt a blocking socket call
	op_timeout_s: float = 0.01
	max_retries: int = 5
	fallback_max: int = 256
	# Hard bound on every socket call, including connects to an unreachable host
	socket_timeout_s: float = 0.1

	def client_kwargs(self) -> Dict[str, Any]:
		"""Timeout kwargs for ``redis.Redis.from_url``."""
		timeout = max(self.socket_timeout_s, self.op_timeout_s)
		return {"socket_timeout": timeout, "socket_connect_timeout": timeout}


def _serialize(obj: Any) -> bytes:
	return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=str).encode("utf-8")


def _deserialize(data: Any) -> Any:
	if isinstance(data, (bytes, bytearray)):
		data = data.decode("utf-8")
	try:
		return json.loads(data)
	except (TypeError, ValueError):
		return None


class _BackoffPolicy:
	"""Exponential backoff with full jitter."""
	def __init__(self, base: float = 0.25, factor: float = 2.0, cap: float = 10.0) -> None:
		self._base = base
		self._factor = factor
		self._cap = cap

	def next_sleep(self, attempt: int) -> float:
		return random.uniform(0, min(self._base * (self._factor ** max(0, attempt)), self._cap))


class _RedisClient(Protocol):
	def publish(self, channel: str, message: bytes) -> int: ...
	def psubscribe(self, pattern: str) -> Any: ...
	def get_message(self, timeout: float = 0.0) -> Optional[Dict[str, Any]]: ...
	def close(self) -> None: ...


class _RedisBackend:
	"""Publishes envelopes with retries and relays remote envelopes to a callback."""

	def __init__(
		self,
		client: _RedisClient,
		config: Optional[_RedisConfig] = None,
		backoff: Optional[_BackoffPolicy] = None,
	) -> None:
		self._client = client
		self._cfg = config or _RedisConfig()
		self._prefix = self._cfg.channel_prefix.rstrip(":")
		self._backoff = backoff or _BackoffPolicy()

		self._stop = threading.Event()
		self._thread: Optional[threading.Thread] = None

		# Bounded replay queue for messages that missed their publish budget
		self._fallback: deque = deque(maxlen=self._cfg.fallback_max)
		self._fallback_lock = threading.Lock()

	def topic(self, channel: str) -> str:
		return f"{self._prefix}:{channel}"

	def pending(self) -> int:
		with self._fallback_lock:
			return len(self._fallback)

	def _flush_fallback(self) -> None:
		while True:
			with self._fallback_lock:
				if not self._fallback:
					return
				topic, data = self._fallback.popleft()
			try:
				self._client.publish(topic, data)
			except Exception:
				with self._fallback_lock:
					self._fallback.appendleft((topic, data))
				return

	def publish(self, channel: str, envelope: Dict[str, Any]) -> bool:
		"""Publish one envelope, retrying within the soft time budget.

		On give-up the message is queued for replay after the next success and
		``False`` is returned so the caller's breaker can count the failure.
		"""
		topic = self.topic(channel)
		data = _serialize(envelope)
		start = time.monotonic()
		attempt = 0
		while True:
			try:
				self._client.publish(topic, data)
				break
			except Exception as exc:
				elapsed = time.monotonic() - start
				if elapsed >= self._cfg.op_timeout_s or attempt >= self._cfg.max_retries:
					logger.debug("Redis publish to %s failed: %s", topic, exc)
					with self._fallback_lock:
						self._fallback.append((topic, data))
					return False
				time.sleep(min(self._backoff.next_sleep(attempt), self._cfg.op_timeout_s - elapsed))
				attempt += 1
		self._flush_fallback()
		return True

	def start_relay(self, on_envelope: Callable[[str, Dict[str, Any]], None]) -> None:
		"""Subscribe to every channel under the prefix and forward envelopes."""
		if self._thread and self._thread.is_alive():
			return
		self._client.psubscribe(f"{self._prefix}:*")
		self._stop.clear()
		self._thread = threading.Thread(
			target=self._reader_loop, args=(on_envelope,), name="sse-redis-relay", daemon=True
		)
		self._thread.start()

	def _reader_loop(self, on_envelope: Callable[[str, Dict[str, Any]], None]) -> None:
		attempt = 0
		strip = len(self._prefix) + 1
		while not self._stop.is_set():
			try:
				msg = self._client.get_message(timeout=self._cfg.read_timeout_s)
				if not msg or msg.get("type") not in ("message", "pmessage"):
					continue
				topic = msg.get("channel")
				if isinstance(topic, (bytes, bytearray)):
					topic = topic.decode("utf-8")
				envelope = _deserialize(msg.get("data"))
				if isinstance(envelope, dict) and topic:
					on_envelope(topic[strip:], envelope)
				attempt = 0
			except Exception as exc:
				logger.warning("SSE relay read failed: %s", exc)
				time.sleep(self._backoff.next_sleep(attempt))
				attempt = min(attempt + 1, self._cfg.max_retries)

	def close(self) -> None:
		self._stop.set()
		if self._thread:
			self._thread.join(timeout=2.0)
		self._thread = None
		try:
			self._client.close()
		except Exception as exc:
			logger.debug("Redis close failed: %s", exc)


class _RedisPyClientAdapter:
	"""Narrows a redis-py client to the _RedisClient protocol."""

	def __init__(self, redis_client: Any) -> None:
		self._client = redis_client
		self._pubsub = None

	def publish(self, channel: str, message: bytes) -> int:
		return int(self._client.publish(channel, message) or 0)

	def psubscribe(self, pattern: str) -> Any:
		if self._pubsub is None:
			self._pubsub = self._client.pubsub(ignore_subscribe_messages=True)
		self._pubsub.psubscribe(pattern)
		return self._pubsub

	def get_message(self, timeout: float = 0.0) -> Optional[Dict[str, Any]]:
		if self._pubsub is None:
			return None
		return self._pubsub.get_message(timeout=timeout)

	def close(self) -> None:
		if self._pubsub is not None:
			self._pubsub.close()
			self._pubsub = None
		self._client.close()

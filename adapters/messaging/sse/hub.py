"""Internal in-process SSE hub keyed by channel name."""
import time
import logging
import threading
from queue import Queue, Empty, Full
from typing import Dict, Iterator, Optional
from .formatter import _format_comment, _format_sse

logger = logging.getLogger(__name__)


class _ChannelHub:
	"""Private fan-out hub; each subscriber listens on exactly one channel."""

	def __init__(self, heartbeat_interval_s: float, subscriber_queue_maxsize: int, poll_interval_s: float = 0.5) -> None:
		self._heartbeat_interval_s = heartbeat_interval_s # seconds between heartbeat frames
		self._subscriber_queue_maxsize = subscriber_queue_maxsize # per-subscriber backlog bound
		self._poll_interval_s = poll_interval_s # queue wait between heartbeat checks
		self._channels: Dict[str, Dict[str, Queue]] = {} # channel -> client_id -> queue
		self._lock = threading.RLock()
		self._next_event_id = 0

	def _next_id(self) -> str:
		with self._lock:
			self._next_event_id += 1
			return str(self._next_event_id)

	def next_frame(self, data, event=None) -> str:
		"""Format ``data`` with the next event id."""
		return _format_sse(data, event=event, id_value=self._next_id())

	def publish(self, channel: str, frame: str) -> int:
		deliveries = 0
		dropped = []
		with self._lock:
			subscribers = self._channels.get(channel) or {}
			for client_id, q in list(subscribers.items()):
				try:
					q.put_nowait(frame)
					deliveries += 1
				except Full:
					dropped.append(client_id)
					subscribers.pop(client_id, None)
			if not subscribers:
				self._channels.pop(channel, None)
		if dropped:
			logger.warning("Dropped %s slow subscriber(s) on channel %s", len(dropped), channel)
		return deliveries

	def subscribe(self, channel: str, client_id: str) -> Iterator[bytes]:
		"""Register ``client_id`` on ``channel`` now and return its frame stream."""
		q: Queue = Queue(maxsize=self._subscriber_queue_maxsize)
		with self._lock:
			self._channels.setdefault(channel, {})[client_id] = q
			total = len(self._channels[channel])
		logger.info("SSE subscriber added: %s on %s (total=%d)", client_id, channel, total)
		return self._stream(channel, client_id, q)

	def unsubscribe(self, channel: str, client_id: str, q: Optional[Queue] = None) -> None:
		with self._lock:
			subscribers = self._channels.get(channel)
			if not subscribers:
				return
			if q is None or subscribers.get(client_id) is q:
				subscribers.pop(client_id, None)
			if not subscribers:
				self._channels.pop(channel, None)
		logger.info("SSE subscriber removed: %s from %s", client_id, channel)

	def _stream(self, channel: str, client_id: str, q: Queue) -> Iterator[bytes]:
		last_send = time.monotonic()
		try:
			yield _format_comment("connected").encode("utf-8")
			while True:
				now = time.monotonic()
				if now - last_send >= self._heartbeat_interval_s:
					hb = _format_sse({"ts": int(time.time() * 1000)}, event="heartbeat", id_value=self._next_id())
					yield hb.encode("utf-8")
					last_send = now
				try:
					frame = q.get(timeout=self._poll_interval_s)
				except Empty:
					continue
				last_send = time.monotonic()
				yield frame.encode("utf-8")
		except GeneratorExit:
			pass
		finally:
			self.unsubscribe(channel, client_id, q)

	def subscriber_count(self, channel: Optional[str] = None) -> int:
		with self._lock:
			if channel is not None:
				return len(self._channels.get(channel) or {})
			return sum(len(subs) for subs in self._channels.values())

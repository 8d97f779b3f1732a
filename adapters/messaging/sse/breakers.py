"""Small, dependency-free circuit breaker guarding the Redis mirror."""

from __future__ import annotations

import time
import threading
from collections import deque
from typing import Callable, Optional

from app_platform.config.realtime import RealtimeSettings


class CircuitBreaker:
	"""
	Time-window circuit breaker.

	Opens after ``failure_threshold`` failures within ``window_s`` and stays
	open for ``reset_timeout_s``; the first call afterwards is a trial.
	"""

	def __init__(
		self,
		failure_threshold: int = 5,
		window_s: float = 30.0,
		reset_timeout_s: float = 15.0,
		*,
		clock: Optional[Callable[[], float]] = None,
	) -> None:
		self._failure_threshold = max(1, failure_threshold) # failures needed to open
		self._window_s = window_s # rolling failure window
		self._reset_timeout_s = reset_timeout_s # open duration
		self._clock = clock or time.monotonic
		self._failures: deque = deque()
		self._open_until: float = 0.0
		self._lock = threading.RLock()

	@classmethod
	def from_settings(cls, settings: RealtimeSettings) -> "CircuitBreaker":
		return cls(
			failure_threshold=settings.breaker_threshold,
			window_s=settings.breaker_window_s,
			reset_timeout_s=settings.breaker_reset_s,
		)

	@property
	def state(self) -> str:
		with self._lock:
			if self._clock() < self._open_until:
				return "open"
			return "half_open" if self._open_until else "closed"

	def _trim(self, now: float) -> None:
		cutoff = now - self._window_s
		while self._failures and self._failures[0] < cutoff:
			self._failures.popleft()

	def allow_call(self) -> bool:
		with self._lock:
			now = self._clock()
			if now < self._open_until:
				return False
			self._trim(now)
			return True

	def on_success(self) -> None:
		with self._lock:
			self._open_until = 0.0
			self._failures.clear()

	def on_failure(self) -> None:
		with self._lock:
			now = self._clock()
			# Keep the deque ordered when the clock goes backwards
			if self._failures and now < self._failures[-1]:
				now = self._failures[-1]
			self._failures.append(now)
			self._trim(now)
			if len(self._failures) >= self._failure_threshold:
				self._open_until = now + self._reset_timeout_s

	def snapshot(self) -> dict:
		with self._lock:
			return {
				"state": self.state,
				"failures": len(self._failures),
				"threshold": self._failure_threshold,
				"window_s": self._window_s,
				"reset_timeout_s": self._reset_timeout_s,
			}

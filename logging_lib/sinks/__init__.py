"""Sink implementations."""

from .broadcast import Broadcaster, BroadcastLogSink
from .memory import InMemorySink
from .stdout import StdoutSink

__all__ = ["Broadcaster", "BroadcastLogSink", "InMemorySink", "StdoutSink"]

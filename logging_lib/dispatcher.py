"""Observer chain that fans enriched log records out to sinks."""

from __future__ import annotations

import sys
import threading
from typing import Iterable, List, Mapping, Protocol

from .metrics import record_emit, record_observer_failure


class Sink(Protocol):
    """An observer of enriched log records."""

    def emit(self, record: Mapping[str, object]) -> None:  # pragma: no cover - protocol
        ...


def _observer_name(sink: Sink) -> str:
    return getattr(sink, "name", None) or type(sink).__name__


class ObserverChain:
    """Ordered, pluggable list of sinks invoked synchronously per record.

    One sink raising never prevents the following sinks from seeing the
    record, and never propagates to the code that logged it.
    """

    def __init__(self, sinks: Iterable[Sink] = ()) -> None:
        self._sinks: List[Sink] = list(sinks) # The registered observers
        self._lock = threading.RLock() # Guards registration against concurrent emits

    def register_sink(self, sink: Sink) -> None:
        """Append a sink to the chain."""

        with self._lock:
            self._sinks.append(sink)

    def register_sinks(self, sinks: Iterable[Sink]) -> None:
        for sink in sinks:
            self.register_sink(sink)

    def unregister_sink(self, sink: Sink) -> None:
        with self._lock:
            self._sinks = [existing for existing in self._sinks if existing is not sink]

    @property
    def sinks(self) -> List[Sink]:
        with self._lock:
            return list(self._sinks)

    def submit(self, record: Mapping[str, object]) -> None:
        """Hand a record to every sink, isolating failures per sink."""

        record_emit()

        for sink in self.sinks:
            try:
                sink.emit(record)
            except Exception:
                name = _observer_name(sink)
                record_observer_failure(name)
                print(f"logging_lib observer {name} failed to emit record", file=sys.stderr)

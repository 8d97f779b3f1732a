"""Structured logging facade."""

from __future__ import annotations

import traceback
from threading import RLock
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

from .config import LoggingSettings, get_settings
from .context import get_context
from .dispatcher import ObserverChain, Sink
from .enrichment import Enricher
from .metrics import reset_metrics
from .schema import build_log_record
from .sinks.memory import InMemorySink
from .sinks.stdout import StdoutSink


_LEVEL_NUMERIC = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def _is_enabled_for(level: str, settings: LoggingSettings) -> bool:
    numeric_level = _LEVEL_NUMERIC.get(level.upper(), 20)
    threshold = _LEVEL_NUMERIC.get(settings.level.upper(), 20)
    return numeric_level >= threshold


class StructuredLogger:
    """Structured logger for the logging library."""

    def __init__(self, name: str, manager: "LoggerManager") -> None:
        """Initialize the structured logger with a given name and manager."""

        self._name = name # The name of the logger
        self._manager = manager # The manager for the logger

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str, **fields: Any) -> None:
        """Log a debug message."""

        self._log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        """Log an info message."""

        self._log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        """Log a warning message."""

        self._log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        """Log an error message."""

        self._log("ERROR", message, **fields)

    def critical(self, message: str, **fields: Any) -> None:
        """Log a critical message."""

        self._log("CRITICAL", message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log an error message with the active traceback attached."""

        fields.setdefault("exc_info", traceback.format_exc())
        self._log("ERROR", message, **fields)

    def _log(self, level: str, message: str, **fields: Any) -> None:
        """Build, enrich and hand a record to the observer chain."""

        manager = self._manager
        settings = manager.settings

        if not _is_enabled_for(level, settings):
            return

        runtime_context = dict(manager.base_context)
        runtime_context.update(get_context())

        explicit_context = fields.pop("context", None) or {}
        explicit_extra = fields.pop("extra", None) or {}

        runtime_context.update(fields)
        runtime_context.update(explicit_context)

        record = build_log_record(
            level=level,
            message=message,
            settings=settings,
            component=self._name,
            context=runtime_context,
            extra=explicit_extra,
        )

        manager.chain.submit(manager.enricher.enrich(record))


class LoggerManager:
    """Manager for the structured loggers."""

    def __init__(self) -> None:
        """Initialize the logger manager."""

        self._lock = RLock() # The lock for the logger manager
        self._loggers: Dict[str, StructuredLogger] = {} # The loggers
        self._settings: LoggingSettings | None = None # The settings for the logger manager
        self._chain: ObserverChain | None = None # The observers receiving enriched records
        self._enricher: Enricher = Enricher() # Stamps correlation/user/request metadata
        self._base_context: MutableMapping[str, Any] = {} # The base context for the logger manager

    def configure(
        self,
        settings: LoggingSettings,
        *,
        observers: Iterable[Sink] = (),
        enricher: Optional[Enricher] = None,
    ) -> None:
        """Configure the logger manager with a given settings."""

        with self._lock:
            self._settings = settings
            self._loggers.clear()

            sinks = []

            for sink_name in settings.sinks:
                name = sink_name.strip().lower()

                if name == "stdout":
                    sinks.append(StdoutSink(settings))

                elif name == "memory":
                    sinks.append(InMemorySink())

            sinks.extend(observers)

            self._chain = ObserverChain(sinks)
            self._enricher = enricher or Enricher()
            self._base_context = dict(settings.default_context)

            reset_metrics()

    @property
    def chain(self) -> ObserverChain:
        """Get the observer chain, configuring from the environment if needed."""

        chain = self._chain

        if chain is None:
            self.configure(get_settings())
            chain = self._chain

        assert chain is not None

        return chain

    @property
    def settings(self) -> LoggingSettings:
        """Get the settings for the logger manager."""

        settings = self._settings

        if settings is None:
            settings = get_settings()
            self.configure(settings)

        return settings

    @property
    def enricher(self) -> Enricher:
        return self._enricher

    @property
    def base_context(self) -> Mapping[str, Any]:
        """Get the base context for the logger manager."""

        return dict(self._base_context)

    def register_observer(self, sink: Sink) -> None:
        """Attach an additional observer (e.g. the broadcast sink)."""

        self.chain.register_sink(sink)

    def get_logger(self, name: str) -> StructuredLogger:
        """Get a logger with a given name."""

        with self._lock:
            logger = self._loggers.get(name)

            if logger is None:
                logger = StructuredLogger(name, self)
                self._loggers[name] = logger

            return logger

    def reset(self) -> None:
        """Reset the logger manager."""

        with self._lock:
            self._loggers.clear()
            self._settings = None
            self._chain = None
            self._enricher = Enricher()
            self._base_context.clear()


_MANAGER = LoggerManager()


def configure_manager(
    settings: LoggingSettings,
    *,
    observers: Iterable[Sink] = (),
    enricher: Optional[Enricher] = None,
) -> None:
    """Configure the manager with a given settings."""

    _MANAGER.configure(settings, observers=observers, enricher=enricher)


def get_manager() -> LoggerManager:
    return _MANAGER


def get_logger(name: str) -> StructuredLogger:
    """Get a logger with a given name."""

    return _MANAGER.get_logger(name)


def register_observer(sink: Sink) -> None:
    """Attach an observer to the active manager."""

    _MANAGER.register_observer(sink)


def reset_loggers() -> None:
    """Reset the logger manager."""

    _MANAGER.reset()

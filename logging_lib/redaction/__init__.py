"""Key-driven redaction for structured payloads.

Values are masked purely on the name of their key: a key is sensitive when its
lower-cased form contains any denylisted substring. Value types are never
inspected, so unsupported leaves pass through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Tuple

from ..config import LoggingSettings
from ..metrics import record_redaction
from .defaults import ACCESS_LOG_DENYLIST, BROADCAST_DENYLIST, MASK


def _normalize_denylist(denylist: Iterable[str]) -> tuple[str, ...]:
    return tuple(needle.lower() for needle in denylist if needle)


def _is_sensitive(key: Any, needles: tuple[str, ...]) -> bool:
    if not isinstance(key, str):
        return False

    lowered = key.lower()
    return any(needle in lowered for needle in needles)


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list))


def _empty_like(value: Any) -> Any:
    return {} if isinstance(value, Mapping) else []


def redact(data: Any, denylist: Iterable[str], *, mask: str = MASK) -> Any:
    """Return a redacted copy of ``data``; the input is never mutated.

    Mappings and lists are walked with an explicit stack so arbitrarily deep
    (acyclic) payloads cannot exhaust the interpreter's recursion limit.
    """

    needles = _normalize_denylist(denylist)

    if not _is_container(data):
        return data

    root = _empty_like(data)
    pending: List[Tuple[Any, Any]] = [(data, root)]
    masked = 0

    while pending:
        source, target = pending.pop()

        if isinstance(source, Mapping):
            for key, value in source.items():
                if _is_sensitive(key, needles):
                    target[key] = mask
                    masked += 1
                elif _is_container(value):
                    child = _empty_like(value)
                    target[key] = child
                    pending.append((value, child))
                else:
                    target[key] = value
            continue

        for value in source:
            if _is_container(value):
                child = _empty_like(value)
                target.append(child)
                pending.append((value, child))
            else:
                target.append(value)

    if masked:
        record_redaction(masked)

    return root


@dataclass(frozen=True)
class KeyRedactor:
    """A named denylist configuration of :func:`redact`."""

    name: str
    denylist: tuple[str, ...]
    enabled: bool = True
    mask: str = MASK

    def is_sensitive(self, key: Any) -> bool:
        return _is_sensitive(key, _normalize_denylist(self.denylist))

    def apply(self, data: Any) -> Any:
        if not self.enabled:
            return data
        return redact(data, self.denylist, mask=self.mask)


def broadcast_redactor(settings: LoggingSettings | None = None) -> KeyRedactor:
    """Redactor guarding records that cross the real-time transport boundary."""

    if settings is None:
        return KeyRedactor("broadcast", BROADCAST_DENYLIST)

    return KeyRedactor("broadcast", settings.redaction.broadcast_denylist)


def access_log_redactor(settings: LoggingSettings | None = None) -> KeyRedactor:
    """Narrower redactor applied to request bodies in the access log."""

    if settings is None:
        return KeyRedactor("access_log", ACCESS_LOG_DENYLIST)

    return KeyRedactor(
        "access_log",
        settings.redaction.access_log_denylist,
        enabled=settings.redaction.enabled,
    )


__all__ = [
    "MASK",
    "BROADCAST_DENYLIST",
    "ACCESS_LOG_DENYLIST",
    "KeyRedactor",
    "redact",
    "broadcast_redactor",
    "access_log_redactor",
]

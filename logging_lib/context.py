"""Request-scoped logging state: correlation id and ad-hoc context fields.

Both live in :mod:`contextvars`, so every thread (and every asyncio task) sees
its own binding and concurrent requests never observe each other's ids.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional


Context = Mapping[str, Any]

_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("logging_lib_context", default={})
_CORRELATION_ID: ContextVar[Optional[str]] = ContextVar(
    "logging_lib_correlation_id", default=None
)


@dataclass(frozen=True)
class CorrelationBinding:
    """Handle returned by :func:`bind_correlation_id`; release it at request end."""

    correlation_id: str
    token: Token


def resolve_correlation_id(header_value: Any) -> str:
    """Trim a propagated id, or mint a UUID when the header is absent or blank."""

    if isinstance(header_value, str):
        candidate = header_value.strip()
        if candidate:
            return candidate

    return str(uuid.uuid4())


def bind_correlation_id(header_value: Any = None) -> CorrelationBinding:
    """Bind the correlation id for the current execution context."""

    correlation_id = resolve_correlation_id(header_value)
    token = _CORRELATION_ID.set(correlation_id)
    return CorrelationBinding(correlation_id=correlation_id, token=token)


def release_correlation_id(binding: CorrelationBinding) -> None:
    try:
        _CORRELATION_ID.reset(binding.token)
    except ValueError:
        # Token created in another context (e.g. teardown on a copied context).
        _CORRELATION_ID.set(None)


def current_correlation_id() -> Optional[str]:
    """Return the bound correlation id, or ``None`` outside a bound request."""

    return _CORRELATION_ID.get()


@contextmanager
def correlation_scope(header_value: Any = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block."""

    binding = bind_correlation_id(header_value)
    try:
        yield binding.correlation_id
    finally:
        release_correlation_id(binding)


def push_context(**context: Any) -> Token:
    current = dict(_CONTEXT.get())
    current.update(context)
    return _CONTEXT.set(current)


def pop_context(token: Token) -> None:
    _CONTEXT.reset(token)


def get_context() -> Mapping[str, Any]:
    return dict(_CONTEXT.get())


def clear_context() -> None:
    _CONTEXT.set({})


@contextmanager
def logger_context(**context: Any) -> Iterator[None]:
    """Context manager for temporary context fields."""

    token = push_context(**context)
    try:
        yield
    finally:
        pop_context(token)


def capture_context(extra: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Snapshot context fields plus the correlation id for hand-off to workers."""

    payload = dict(get_context())
    correlation_id = current_correlation_id()
    if correlation_id is not None:
        payload["correlation_id"] = correlation_id
    if extra:
        payload.update(extra)
    return payload


def run_with_context(
    context: Context,
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Execute ``func`` with a captured context (and its correlation id) bound."""

    fields = dict(context)
    correlation_id = fields.pop("correlation_id", None)

    token = push_context(**fields)
    correlation_token = (
        _CORRELATION_ID.set(correlation_id) if correlation_id is not None else None
    )
    try:
        return func(*args, **kwargs)
    finally:
        if correlation_token is not None:
            _CORRELATION_ID.reset(correlation_token)
        pop_context(token)

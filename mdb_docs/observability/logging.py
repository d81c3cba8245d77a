"""
Contextual logging for MDB_DOCS.

Every DocumentStore operation runs inside a correlation scope and a store
context, so each record it emits (including the per-operation line from
``timed_operation``) carries ``correlation_id``, ``db_name`` and
``collection_name``. Callers can open an outer ``correlation_scope`` to tie
several operations to one request id.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)
_store_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "store_context", default=None
)


def get_correlation_id() -> str | None:
    """Correlation id of the current scope, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Run a block under a correlation id.

    With no argument the enclosing scope's id is kept, or a new one is
    generated when there is none. The previous id is restored on exit.

    Yields:
        The active correlation id
    """
    if correlation_id is None:
        correlation_id = _correlation_id.get() or uuid.uuid4().hex
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


@contextmanager
def store_context(db_name: str | None = None, **fields: Any) -> Iterator[dict[str, Any]]:
    """
    Add store fields (db_name, collection_name, ...) to log records in a block.

    Nested contexts extend the enclosing one; fields set to None are left out.
    """
    context = dict(_store_context.get() or {})
    context.update({k: v for k, v in {"db_name": db_name, **fields}.items() if v is not None})
    token = _store_context.set(context)
    try:
        yield context
    finally:
        _store_context.reset(token)


def get_logging_context() -> dict[str, Any]:
    """Fields the current scope adds to every record."""
    context = dict(_store_context.get() or {})
    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that merges the logging context into ``extra``.

    Explicit ``extra`` keys win over context keys.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Contextual logger for a module (typically ``__name__``)."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Emit one structured line for a finished operation.

    Args:
        logger: Logger instance
        operation: Operation name, e.g. "documents.move"
        level: Log level
        success: Whether the operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Extra fields for the record
    """
    extra = get_logging_context()
    extra["operation"] = operation
    extra["success"] = success
    message = f"{'Operation' if success else 'Operation failed'}: {operation}"
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
        message += f" (duration: {duration_ms:.2f}ms)"
    extra.update(context)

    logger.log(level, message, extra=extra)

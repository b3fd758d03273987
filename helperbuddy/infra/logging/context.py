"""Context management for structured logging.

A ContextVar holds key/value pairs (sweep_id, reminder_id, request path...)
that ContextInjectingFilter copies onto every LogRecord emitted in the same
async task. Each asyncio task sees its own copy.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(sweep_id="4f1c...")
        logger.info("Sweep started")  # record carries sweep_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Reset the logging context for the current task."""
    _log_context.set({})


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind fields for the duration of a ``with`` block.

    The previous context is restored on exit, so nested blocks (a sweep
    wrapping per-reminder dispatches) unwind cleanly.

    Example:
        ```python
        with log_context(reminder_id=str(reminder.id)):
            await dispatch(reminder)
        ```
    """
    token = _log_context.set({**_log_context.get(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the context onto each LogRecord.

    Installed on the root QueueHandler by configure_logging(), so it runs in
    the emitting task and context fields reach JSONFormatter without
    touching call sites.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record.

        Args:
            record: The log record to enhance with context.

        Returns:
            True (always allow the record to be logged).
        """
        for key, value in _log_context.get().items():
            # Explicit extra= values win over context
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


__all__ = [
    "ContextInjectingFilter",
    "clear_log_context",
    "get_log_context",
    "log_context",
    "set_log_context",
]

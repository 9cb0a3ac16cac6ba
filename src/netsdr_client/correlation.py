"""
Correlation ID tracking for control requests across async operations.

Provides correlation ID generation and propagation using contextvars so every
log line emitted while a control request is in flight carries its ID.
"""

from __future__ import annotations

import contextvars
from collections.abc import Generator
from contextlib import contextmanager

from uuid_extensions import uuid7

__all__ = [
    "correlation_context",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]

# Context variable for storing correlation ID (async-safe)
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        New UUID v7 string (time-ordered, sortable in logs)
    """
    return str(uuid7())


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in current context (None to clear)."""
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str]:
    """
    Context manager for correlation ID scope.

    Generates a correlation ID if none is provided and restores the previous
    ID on exit.

    Example:
        with correlation_context(pending.correlation_id):
            logger.info("Awaiting reply")  # Includes the request's ID
    """
    previous_id = get_correlation_id()
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    set_correlation_id(correlation_id)
    try:
        yield correlation_id
    finally:
        set_correlation_id(previous_id)

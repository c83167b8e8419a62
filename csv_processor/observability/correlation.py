"""
Correlation ID tracking.

Every log line carries the ID of the unit of work it belongs to: the
X-Correlation-ID of an HTTP request, or the job ID of the queue message
being imported.

Dependencies: contextvars
System role: Request and message tracing across service boundaries
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Current correlation ID, or "" outside any request or message."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    The previous value is restored on exit, so scopes nest.

    Args:
        correlation_id: ID to bind; a random UUID when None or empty

    Yields:
        str: The bound ID
    """
    value = correlation_id or str(uuid.uuid4())
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)

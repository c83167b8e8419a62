"""
Helpers for logging broker payloads and failures.

Message bodies can be arbitrarily large CSV-derived JSON, so they are
previewed rather than logged whole.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

MAX_PREVIEW_LENGTH = 500


def preview(value: Any, max_length: int = MAX_PREVIEW_LENGTH) -> str:
    """
    Render a value as bounded text for a log record.

    Bytes are decoded as UTF-8 with replacement; collections are
    summarized by size.

    Args:
        value: Message body, document or any other value
        max_length: Characters kept before truncating

    Returns:
        str: Loggable text
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("utf-8", errors="replace")
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    elif isinstance(value, (list, tuple)):
        text = f"{type(value).__name__}({len(value)} items)"
    else:
        text = str(value)

    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... ({len(text)} chars)"


def log_failure(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception at ERROR with its traceback and previewed context.

    Args:
        logger: Logger to write to
        message: Log message
        exc: The failure
        **context: Extra fields (job_id, queue, ...)
    """
    extra = {key: preview(value) for key, value in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = preview(str(exc))
    logger.error(message, exc_info=exc, extra=extra)

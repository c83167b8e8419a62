"""
Logger configuration.

One stdout handler for the API and the workers. Each record is stamped
with the active correlation ID ("-" when there is none).

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from csv_processor.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty client libraries held at WARNING.
QUIET_LOGGERS = ("amqp", "kombu", "botocore", "boto3", "urllib3", "aiosqlite")


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Replace root handlers with a single correlated stdout handler.

    Args:
        level: Root level as a name ("debug", "INFO") or number
    """
    if isinstance(level, str):
        level = level.upper()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

"""
Observability module.

Logging configuration, correlation ID scoping and HTTP middleware.
"""

from csv_processor.observability.correlation import correlation_scope, get_correlation_id
from csv_processor.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
]

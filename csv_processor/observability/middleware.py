"""
HTTP middleware for request tracing.

CorrelationMiddleware binds the X-Correlation-ID header (or a fresh ID)
for the request and echoes it on the response. RequestLoggingMiddleware
writes one line per completed request with its status and latency.

Dependencies: starlette
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from csv_processor.observability.correlation import correlation_scope

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request once it has a response, or once it has failed."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        context = {"method": request.method, "path": request.url.path}

        try:
            response: Response = await call_next(request)
        except Exception as e:
            context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.exception(
                f"{request.method} {request.url.path} failed",
                extra={**context, "error_type": type(e).__name__},
            )
            raise

        context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        context["status_code"] = response.status_code
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}", extra=context)
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Scope each request to a correlation ID and return it as a header."""

    async def dispatch(self, request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response: Response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

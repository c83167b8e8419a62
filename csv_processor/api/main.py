"""
FastAPI application for CSV uploads, job polling and exports.

Dependencies: fastapi, uvicorn, csv_processor.api.routers
System role: API entry point

Usage:
    uvicorn csv_processor.api.main:app
    python -m csv_processor.api.main
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from csv_processor.api.deps.dependencies import get_service_cache
from csv_processor.boundary.db import dispose_engine
from csv_processor.configs import get_settings
from csv_processor.core.exceptions import CsvProcessorException, InternalError
from csv_processor.models.common import ErrorResponse
from csv_processor.observability.logger import configure_logging
from csv_processor.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import csv_router, health_router, jobs_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup; release broker and database on shutdown."""
    configure_logging(get_settings().log_level)
    logger.info("CSV processor API starting")

    yield

    get_service_cache().clear()
    await dispose_engine()
    logger.info("CSV processor API stopped")


async def csv_processor_exception_handler(
    request: Request,
    exc: CsvProcessorException,
) -> JSONResponse:
    """Render domain errors as ErrorResponse with the exception's status code."""
    if isinstance(exc, InternalError):
        logger.error(
            "Request failed",
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
    else:
        logger.warning(
            "Request rejected",
            extra={"path": request.url.path, "status_code": exc.status_code, "error_msg": exc.message},
        )

    body = ErrorResponse.from_exception(exc)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


def create_app() -> FastAPI:
    """
    Build the application with middleware, error handling and routers.

    Returns:
        FastAPI: Application with every router mounted under /api/v1
    """
    app = FastAPI(
        title="CSV Processor API",
        description="Asynchronous CSV ingestion with queued import jobs and change notifications",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it runs first: request logs carry the correlation ID.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(CsvProcessorException, csv_processor_exception_handler)

    for router in (health_router, csv_router, jobs_router):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("csv_processor.api.main:app", host="0.0.0.0", port=8000)

"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: sqlalchemy, csv_processor.boundary.db
System role: Liveness and readiness probes
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db import get_async_db

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is serving requests."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    response: Response,
    db: AsyncSession = Depends(get_async_db),
) -> HealthResponse:
    """Readiness: the job store answers a trivial query (503 otherwise)."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error_type": type(e).__name__})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", message="Database unreachable")
    return HealthResponse(status="healthy", message="Database connection OK")

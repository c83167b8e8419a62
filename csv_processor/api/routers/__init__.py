"""API routers."""

from .csv import router as csv_router
from .health import router as health_router
from .jobs import router as jobs_router

__all__ = [
    "csv_router",
    "health_router",
    "jobs_router",
]

"""
Job API endpoints.

Routes: GET /jobs/{id}

Dependencies: csv_processor.application.services, csv_processor.models
System role: Job status HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from csv_processor.api.deps import get_job_service
from csv_processor.application.services import JobService
from csv_processor.models.common import ErrorResponse
from csv_processor.models.csv_job import JobStatusResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get(
    "/{job_id}",
    response_model=JobStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_job_status(
    job_id: UUID,
    job_service: JobService = Depends(get_job_service),
) -> JobStatusResponse:
    """
    Get import job status for polling.

    A job stays "pending" until every record batch is committed, then
    becomes "completed". Failed imports are retried by the worker, so
    a job can stay pending for a long time.

    Args:
        job_id: Job UUID
        job_service: Injected JobService

    Returns:
        JobStatusResponse: Job state and stored record count

    Example Response:
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "fileName": "customers_20250101120000_1a2b3c4d.csv",
            "originalFileName": "customers.csv",
            "type": "import",
            "status": "completed",
            "recordCount": 120,
            "createdAt": "2025-01-01T12:00:00",
            "updatedAt": "2025-01-01T12:00:05"
        }
    """
    return await job_service.get_job_status(job_id)

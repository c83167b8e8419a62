"""
Job service.

Status lookups for import jobs.

Dependencies: csv_processor.boundary.db.CRUD
System role: Job status reporting
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import csv_record_crud
from csv_processor.core.exceptions import NotFoundError
from csv_processor.models.csv_job import JobStatusResponse


class JobService:
    """Read-side access to import jobs."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize job service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def get_job_status(self, job_id: UUID) -> JobStatusResponse:
        """
        Get job status details for polling.

        Args:
            job_id: Job UUID

        Returns:
            JobStatusResponse: Job state plus the number of stored records

        Raises:
            NotFoundError: If the job doesn't exist or was soft deleted
        """
        job = await csv_job_crud.get_by_id(self.db, job_id)
        if job is None or job.is_deleted:
            raise NotFoundError(f"Job {job_id} does not exist", resource="job")

        record_count = await csv_record_crud.count_by_job(self.db, job.id)
        return JobStatusResponse(
            id=job.id,
            file_name=job.file_name,
            original_file_name=job.original_file_name,
            type=job.type.value,
            status=job.status.value,
            record_count=record_count,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )

"""
CSV job CRUD operations.

Extends BaseCRUD with lookups by stored file name, import listing,
and completion.

Dependencies: sqlalchemy, csv_processor.boundary.db.models
System role: Job persistence operations for the import pipeline
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.base import utc_now
from csv_processor.boundary.db.CRUD.base_crud import BaseCRUD
from csv_processor.boundary.db.models.csv_job_model import (
    CsvJobModel,
    CsvJobStatus,
    CsvJobType,
)


class CsvJobCRUD(BaseCRUD[CsvJobModel]):
    """
    CRUD operations for CsvJobModel.

    Extends BaseCRUD with queries used by the upload endpoint, the
    import worker and the export/listing endpoints.
    """

    def __init__(self) -> None:
        """Initialize CsvJobCRUD with CsvJobModel."""
        super().__init__(CsvJobModel)

    async def create_import_job(
        self,
        session: AsyncSession,
        file_name: str,
        original_file_name: str,
        job_id: UUID | None = None,
    ) -> CsvJobModel:
        """
        Create a PENDING import job.

        Args:
            session: Async database session
            file_name: Stored blob name
            original_file_name: Client-supplied name
            job_id: Optional pre-generated ID

        Returns:
            CsvJobModel: Created job
        """
        fields = {
            "file_name": file_name,
            "original_file_name": original_file_name,
            "type": CsvJobType.IMPORT,
            "status": CsvJobStatus.PENDING,
        }
        if job_id is not None:
            fields["id"] = job_id
        return await self.create(session, **fields)

    async def get_by_file_name(
        self,
        session: AsyncSession,
        file_name: str,
    ) -> CsvJobModel | None:
        """
        Retrieve a live import job by stored file name.

        Args:
            session: Async database session
            file_name: Stored blob name

        Returns:
            CsvJobModel if found and not soft deleted, None otherwise
        """
        stmt = select(CsvJobModel).where(
            CsvJobModel.file_name == file_name,
            CsvJobModel.type == CsvJobType.IMPORT,
            CsvJobModel.is_deleted.is_(False),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_imports(
        self,
        session: AsyncSession,
        limit: int | None = None,
    ) -> Sequence[CsvJobModel]:
        """
        Retrieve live import jobs, newest first.

        Args:
            session: Async database session
            limit: Maximum number of jobs to return

        Returns:
            Sequence of CsvJobModels
        """
        stmt = (
            select(CsvJobModel)
            .where(
                CsvJobModel.type == CsvJobType.IMPORT,
                CsvJobModel.is_deleted.is_(False),
            )
            .order_by(CsvJobModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> CsvJobModel | None:
        """
        Mark job as completed and bump its update timestamp.

        Args:
            session: Async database session
            id: Job UUID

        Returns:
            Updated CsvJobModel, or None when the job does not exist
        """
        job = await self.get_by_id(session, id)
        if job is None:
            return None
        job.status = CsvJobStatus.COMPLETED
        job.updated_at = utc_now()
        await session.flush()
        return job


csv_job_crud = CsvJobCRUD()

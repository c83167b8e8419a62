"""
CSV record CRUD operations.

Batch inserts for the import worker and per-job counting for listings.

Dependencies: sqlalchemy, csv_processor.boundary.db.models
System role: Record persistence operations
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.CRUD.base_crud import BaseCRUD
from csv_processor.boundary.db.models.csv_record_model import CsvRecordModel
from csv_processor.core.csv_schema import ParsedRecord


class CsvRecordCRUD(BaseCRUD[CsvRecordModel]):
    """CRUD operations for CsvRecordModel."""

    def __init__(self) -> None:
        """Initialize CsvRecordCRUD with CsvRecordModel."""
        super().__init__(CsvRecordModel)

    async def add_batch(
        self,
        session: AsyncSession,
        records: Iterable[ParsedRecord],
    ) -> int:
        """
        Stage a batch of parsed records and flush them.

        The caller owns the commit so that one batch maps to one commit.

        Args:
            session: Async database session
            records: Parsed rows

        Returns:
            int: Number of rows staged
        """
        rows = [
            CsvRecordModel(
                id=record.id,
                job_id=record.job_id,
                file_name=record.file_name,
                imported_at=record.imported_at,
                data=record.payload,
            )
            for record in records
        ]
        session.add_all(rows)
        await session.flush()
        return len(rows)

    async def count_by_job(self, session: AsyncSession, job_id: UUID) -> int:
        """Count live records of one job."""
        stmt = select(func.count(CsvRecordModel.id)).where(
            CsvRecordModel.job_id == job_id,
            CsvRecordModel.is_deleted.is_(False),
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def count_by_jobs(
        self,
        session: AsyncSession,
        job_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        """
        Count live records for many jobs in one query.

        Returns:
            dict mapping job ID to record count; jobs without records are absent
        """
        if not job_ids:
            return {}
        stmt = (
            select(CsvRecordModel.job_id, func.count(CsvRecordModel.id))
            .where(
                CsvRecordModel.job_id.in_(job_ids),
                CsvRecordModel.is_deleted.is_(False),
            )
            .group_by(CsvRecordModel.job_id)
        )
        result = await session.execute(stmt)
        return {job_id: int(count) for job_id, count in result.all()}


csv_record_crud = CsvRecordCRUD()

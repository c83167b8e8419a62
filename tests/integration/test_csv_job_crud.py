"""
Integration tests for CsvJobCRUD against an in-memory SQLite database.

System role: Verification of import job persistence
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.CRUD.csv_job_crud import CsvJobCRUD, csv_job_crud
from csv_processor.boundary.db.models.csv_job_model import (
    CsvJobModel,
    CsvJobStatus,
    CsvJobType,
)


class TestCsvJobCRUDInit:
    def test_init_should_set_model(self) -> None:
        assert CsvJobCRUD().model == CsvJobModel


class TestCreateImportJob:
    @pytest.mark.asyncio
    async def test_creates_pending_import_job(self, test_async_db: AsyncSession) -> None:
        job = await csv_job_crud.create_import_job(
            test_async_db,
            file_name="sales_20250101120000_abcd1234.csv",
            original_file_name="sales.csv",
        )

        assert isinstance(job.id, uuid.UUID)
        assert job.status == CsvJobStatus.PENDING
        assert job.type == CsvJobType.IMPORT
        assert job.is_deleted is False
        assert job.created_at is not None

    @pytest.mark.asyncio
    async def test_uses_supplied_job_id(self, test_async_db: AsyncSession) -> None:
        job_id = uuid.uuid4()

        job = await csv_job_crud.create_import_job(
            test_async_db, file_name="a.csv", original_file_name="a.csv", job_id=job_id
        )

        assert job.id == job_id
        assert await csv_job_crud.get_by_id(test_async_db, job_id) is job


class TestLookup:
    @pytest.mark.asyncio
    async def test_get_by_file_name(self, test_async_db: AsyncSession) -> None:
        created = await csv_job_crud.create_import_job(
            test_async_db, file_name="b.csv", original_file_name="b.csv"
        )

        found = await csv_job_crud.get_by_file_name(test_async_db, "b.csv")

        assert found is not None
        assert found.id == created.id

    @pytest.mark.asyncio
    async def test_get_by_file_name_missing(self, test_async_db: AsyncSession) -> None:
        assert await csv_job_crud.get_by_file_name(test_async_db, "nope.csv") is None

    @pytest.mark.asyncio
    async def test_list_imports_newest_first(self, test_async_db: AsyncSession) -> None:
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        for offset, name in enumerate(["old.csv", "mid.csv", "new.csv"]):
            await csv_job_crud.create(
                test_async_db,
                file_name=name,
                original_file_name=name,
                created_at=base + timedelta(minutes=offset),
            )

        jobs = await csv_job_crud.list_imports(test_async_db)
        limited = await csv_job_crud.list_imports(test_async_db, limit=2)

        assert [job.file_name for job in jobs] == ["new.csv", "mid.csv", "old.csv"]
        assert len(limited) == 2


class TestStatusChanges:
    @pytest.mark.asyncio
    async def test_mark_completed(self, test_async_db: AsyncSession) -> None:
        job = await csv_job_crud.create_import_job(
            test_async_db, file_name="c.csv", original_file_name="c.csv"
        )

        updated = await csv_job_crud.mark_completed(test_async_db, job.id)

        assert updated is not None
        assert updated.status == CsvJobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_mark_completed_missing_job(self, test_async_db: AsyncSession) -> None:
        assert await csv_job_crud.mark_completed(test_async_db, uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_deleted_job_is_hidden_from_lookups(self, test_async_db: AsyncSession) -> None:
        job = await csv_job_crud.create_import_job(
            test_async_db, file_name="d.csv", original_file_name="d.csv"
        )
        job.is_deleted = True
        await test_async_db.flush()

        assert await csv_job_crud.get_by_file_name(test_async_db, "d.csv") is None
        assert await csv_job_crud.list_imports(test_async_db) == []
        assert await csv_job_crud.get_by_id(test_async_db, job.id) is job

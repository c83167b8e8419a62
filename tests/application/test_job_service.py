"""
Tests for job status reporting.

System role: Verification of job polling
"""

import uuid

import pytest

from csv_processor.application.services.job_service import JobService
from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import csv_record_crud
from csv_processor.core.csv_schema import parse_csv_lines
from csv_processor.core.exceptions import NotFoundError


class TestGetJobStatus:
    @pytest.mark.asyncio
    async def test_reports_status_and_record_count(self, test_async_db) -> None:
        job = await csv_job_crud.create_import_job(
            test_async_db, file_name="a_1.csv", original_file_name="a.csv"
        )
        await csv_record_crud.add_batch(test_async_db, parse_csv_lines(job.id, "a_1.csv", ["x", "1", "2"]))
        await csv_job_crud.mark_completed(test_async_db, job.id)
        await test_async_db.commit()

        status = await JobService(test_async_db).get_job_status(job.id)

        assert status.id == job.id
        assert status.status == "completed"
        assert status.type == "import"
        assert status.record_count == 2
        assert status.original_file_name == "a.csv"

    @pytest.mark.asyncio
    async def test_unknown_job_is_not_found(self, test_async_db) -> None:
        with pytest.raises(NotFoundError):
            await JobService(test_async_db).get_job_status(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_soft_deleted_job_is_not_found(self, test_async_db, test_session_factory) -> None:
        job = await csv_job_crud.create_import_job(
            test_async_db, file_name="b_1.csv", original_file_name="b.csv"
        )
        job.is_deleted = True
        await test_async_db.commit()

        async with test_session_factory() as fresh:
            with pytest.raises(NotFoundError):
                await JobService(fresh).get_job_status(job.id)

"""
Integration tests for CsvRecordCRUD against an in-memory SQLite database.

System role: Verification of record persistence
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import csv_record_crud
from csv_processor.boundary.db.models.csv_record_model import CsvRecordModel
from csv_processor.core.csv_schema import ParsedRecord


async def make_job(session: AsyncSession, name: str):
    return await csv_job_crud.create_import_job(
        session, file_name=name, original_file_name=name
    )


def make_records(job_id, file_name: str, count: int) -> list[ParsedRecord]:
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return [
        ParsedRecord(
            job_id=job_id,
            file_name=file_name,
            payload={"Name": f"row{i}", "Age": str(20 + i)},
            imported_at=start + timedelta(seconds=i),
        )
        for i in range(count)
    ]


@pytest.mark.asyncio
async def test_add_batch_stores_payloads(test_async_db: AsyncSession) -> None:
    job = await make_job(test_async_db, "people.csv")

    staged = await csv_record_crud.add_batch(test_async_db, make_records(job.id, "people.csv", 3))
    await test_async_db.commit()

    result = await test_async_db.execute(
        select(CsvRecordModel)
        .where(CsvRecordModel.job_id == job.id)
        .order_by(CsvRecordModel.imported_at)
    )
    rows = result.scalars().all()
    assert staged == 3
    assert [row.data["Name"] for row in rows] == ["row0", "row1", "row2"]
    assert rows[0].data == {"Name": "row0", "Age": "20"}
    assert all(row.file_name == "people.csv" for row in rows)


@pytest.mark.asyncio
async def test_add_empty_batch(test_async_db: AsyncSession) -> None:
    assert await csv_record_crud.add_batch(test_async_db, []) == 0


@pytest.mark.asyncio
async def test_records_without_job_row_are_stored(test_async_db: AsyncSession) -> None:
    foreign_keys = (await test_async_db.execute(text("PRAGMA foreign_keys"))).scalar()
    orphan_id = uuid.uuid4()

    staged = await csv_record_crud.add_batch(test_async_db, make_records(orphan_id, "gone.csv", 2))
    await test_async_db.commit()

    assert foreign_keys == 1
    assert staged == 2
    assert await csv_job_crud.get_by_id(test_async_db, orphan_id) is None
    assert await csv_record_crud.count_by_job(test_async_db, orphan_id) == 2


@pytest.mark.asyncio
async def test_counts_per_job(test_async_db: AsyncSession) -> None:
    first = await make_job(test_async_db, "first.csv")
    second = await make_job(test_async_db, "second.csv")
    empty = await make_job(test_async_db, "empty.csv")
    await csv_record_crud.add_batch(test_async_db, make_records(first.id, "first.csv", 4))
    await csv_record_crud.add_batch(test_async_db, make_records(second.id, "second.csv", 1))

    counts = await csv_record_crud.count_by_jobs(test_async_db, [first.id, second.id, empty.id])

    assert await csv_record_crud.count_by_job(test_async_db, first.id) == 4
    assert counts == {first.id: 4, second.id: 1}


@pytest.mark.asyncio
async def test_count_by_jobs_with_no_ids(test_async_db: AsyncSession) -> None:
    assert await csv_record_crud.count_by_jobs(test_async_db, []) == {}

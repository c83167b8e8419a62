"""
Job and record store: ORM models, CRUD singletons and sessions.

Dependencies: sqlalchemy, csv_processor.configs
System role: Persistence adapter for import jobs and parsed records
"""

from csv_processor.boundary.db.base import Base
from csv_processor.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from csv_processor.boundary.db.CRUD import csv_job_crud, csv_record_crud
from csv_processor.boundary.db.models import (
    CsvJobModel,
    CsvJobStatus,
    CsvJobType,
    CsvRecordModel,
)

__all__ = [
    "Base",
    "CsvJobModel",
    "CsvJobStatus",
    "CsvJobType",
    "CsvRecordModel",
    "csv_job_crud",
    "csv_record_crud",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]

"""ORM models."""

from csv_processor.boundary.db.models.csv_job_model import (
    CsvJobModel,
    CsvJobStatus,
    CsvJobType,
)
from csv_processor.boundary.db.models.csv_record_model import CsvRecordModel

__all__ = [
    "CsvJobModel",
    "CsvJobStatus",
    "CsvJobType",
    "CsvRecordModel",
]

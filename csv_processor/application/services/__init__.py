"""Application services."""

from csv_processor.application.services.csv_service import CsvService
from csv_processor.application.services.import_service import (
    ImportService,
    build_stored_file_name,
)
from csv_processor.application.services.job_service import JobService

__all__ = [
    "CsvService",
    "ImportService",
    "JobService",
    "build_stored_file_name",
]

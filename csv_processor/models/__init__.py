"""Pydantic schemas for queue messages and HTTP contracts."""

from csv_processor.models.common import ErrorResponse
from csv_processor.models.csv_job import (
    ChangePublishRequest,
    ChangePublishResponse,
    CsvFileInfo,
    ExportResponse,
    ImportAcceptedResponse,
    JobStatusResponse,
    ListCsvFilesResponse,
)
from csv_processor.models.messages import ChangeEvent, ImportJobMessage

__all__ = [
    "ChangeEvent",
    "ChangePublishRequest",
    "ChangePublishResponse",
    "CsvFileInfo",
    "ErrorResponse",
    "ExportResponse",
    "ImportAcceptedResponse",
    "ImportJobMessage",
    "JobStatusResponse",
    "ListCsvFilesResponse",
]

"""
CSV job domain models and schemas.

Request/response schemas for uploads, job status, listing and export.
Responses are emitted with camelCase keys.

Dependencies: pydantic
System role: CSV API contracts
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImportAcceptedResponse(_CamelModel):
    """Receipt returned when an upload has been queued."""

    job_id: UUID
    file_name: str = Field(description="Stored (unique) file name")
    uploaded_at: datetime
    status: str
    message: str


class JobStatusResponse(_CamelModel):
    """Response schema for job status polling."""

    id: UUID
    file_name: str
    original_file_name: str
    type: str
    status: str
    record_count: int
    created_at: datetime
    updated_at: datetime


class CsvFileInfo(_CamelModel):
    """One stored CSV file and the job that imported it."""

    file_name: str
    original_file_name: str
    job_id: UUID
    uploaded_at: datetime
    status: str
    record_count: int


class ListCsvFilesResponse(_CamelModel):
    """All imported files, newest first."""

    total_files: int
    files: list[CsvFileInfo]
    generated_at: datetime
    message: str


class ExportResponse(_CamelModel):
    """Presigned download link for an exported file or archive."""

    url: str
    file_name: str
    expires_at: datetime
    message: str


class ChangePublishRequest(_CamelModel):
    """Request body for broadcasting a change event."""

    change_type: str = Field(default="Created", min_length=1)
    document: Any = None


class ChangePublishResponse(_CamelModel):
    """Acknowledgement that a change event was handed to the broker."""

    change_type: str
    published_at: datetime

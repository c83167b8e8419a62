"""
CSV job ORM model.

Tracks one uploaded file through the import pipeline.

Dependencies: sqlalchemy, csv_processor.boundary.db.base
System role: Import job tracking
"""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from csv_processor.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class CsvJobType(str, enum.Enum):
    """
    Job classification.

    IMPORT: Uploaded CSV waiting for / processed by the import worker
    """

    IMPORT = "import"


class CsvJobStatus(str, enum.Enum):
    """
    Job lifecycle states.

    PENDING: Blob stored and message queued, awaiting worker pickup
    PROCESSING: Reserved for status reporting; not written by the worker
    COMPLETED: Every record batch committed
    FAILED: Reserved for status reporting; failures are retried via requeue
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class CsvJobModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Import job ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        file_name: Stored blob name, unique per upload
        original_file_name: Name the client uploaded
        type: Job classification enum
        status: Current lifecycle state
        created_at: Upload timestamp (UTC)
        updated_at: Last status update timestamp (UTC)
        is_deleted: Soft delete flag

    Workflow:
        1. Upload endpoint stores the blob, creates the job (PENDING), publishes a message
        2. Import worker persists all records, then marks the job COMPLETED
        3. Clients poll /jobs/{id} or list /csv/list
    """

    __tablename__ = "csv_jobs"

    file_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        unique=True,
        doc="Stored (collision-resistant) blob name",
    )

    original_file_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )

    type: Mapped[CsvJobType] = mapped_column(
        Enum(CsvJobType, native_enum=False),
        nullable=False,
        default=CsvJobType.IMPORT,
    )

    status: Mapped[CsvJobStatus] = mapped_column(
        Enum(CsvJobStatus, native_enum=False),
        nullable=False,
        default=CsvJobStatus.PENDING,
    )

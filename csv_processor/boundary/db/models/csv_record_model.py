"""
CSV record ORM model.

One parsed CSV row stored as a JSON document tied to its import job.

Dependencies: sqlalchemy, csv_processor.boundary.db.base
System role: Imported row storage
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from csv_processor.boundary.db.base import Base, SoftDeleteMixin, UUIDMixin, utc_now


class CsvRecordModel(Base, UUIDMixin, SoftDeleteMixin):
    """
    CSV record ORM model.

    Records are written once by the import worker and never updated.
    job_id is indexed but carries no foreign key: records of a job row
    that is missing or deleted are still stored and kept.

    Attributes:
        id: UUID primary key
        job_id: Owning import job
        file_name: Stored blob name the row came from
        imported_at: When the row was parsed (UTC)
        data: Column name -> string value mapping
    """

    __tablename__ = "csv_records"

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    file_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )

    imported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    data: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Column -> value payload",
    )

"""
Import producer.

Accepts an uploaded CSV, stores it under a collision-resistant name,
records a pending import job and queues the job for the import worker.

Dependencies: sqlalchemy, csv_processor.boundary
System role: Upload half of the import pipeline
"""

import asyncio
import logging
import os
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.aws.s3_client import BlobStorageClient
from csv_processor.boundary.broker.rabbitmq import RabbitMQClient
from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.core.exceptions import BadRequestError
from csv_processor.models.csv_job import ImportAcceptedResponse
from csv_processor.models.messages import ImportJobMessage

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_QUEUE = "csv-import-queue"


def build_stored_file_name(
    original_file_name: str,
    now: datetime | None = None,
    unique_id: str | None = None,
) -> str:
    """
    Build the blob name for an upload.

    Format: {base}_{YYYYMMDDHHMMSS}_{8 hex chars}{ext}, timestamp in UTC.

    Args:
        original_file_name: Client-supplied name (directories are dropped)
        now: Upload time (defaults to current UTC time)
        unique_id: Suffix override (defaults to 8 random hex chars)

    Returns:
        str: Stored file name
    """
    base, ext = os.path.splitext(os.path.basename(original_file_name.strip()))
    timestamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    suffix = unique_id or uuid.uuid4().hex[:8]
    return f"{base}_{timestamp}_{suffix}{ext}"


class ImportService:
    """
    Import producer.

    Upload, job creation and publish happen in that order with no
    compensation: a failure after the upload leaves an orphaned blob, and a
    failure after the commit leaves a pending job that is never processed.
    """

    def __init__(
        self,
        db: AsyncSession,
        blob_client: BlobStorageClient,
        broker: RabbitMQClient,
        queue_name: str = DEFAULT_IMPORT_QUEUE,
    ) -> None:
        """
        Initialize import service.

        Args:
            db: AsyncSession for job persistence
            blob_client: Blob store for uploaded files
            broker: Broker client used to enqueue jobs
            queue_name: Durable job queue
        """
        self.db = db
        self.blob_client = blob_client
        self.broker = broker
        self.queue_name = queue_name

    async def submit(
        self,
        original_file_name: str | None,
        content: bytes | None,
    ) -> ImportAcceptedResponse:
        """
        Store an uploaded CSV and queue it for import.

        Args:
            original_file_name: Name the client uploaded
            content: File bytes

        Returns:
            ImportAcceptedResponse: Job ID, stored name and pending status

        Raises:
            BadRequestError: Empty content or blank file name
            BlobStorageError: Upload failed
            BrokerError: Publish failed (the job row is already committed)
        """
        if content is None:
            raise BadRequestError("File is required", field="file")
        if len(content) == 0:
            raise BadRequestError("File must not be empty", field="file")
        if not original_file_name or not original_file_name.strip():
            raise BadRequestError("File name must not be blank", field="file_name")

        stored_name = build_stored_file_name(original_file_name)

        # 1. Blob first, so the worker can always find what the job points to
        await asyncio.to_thread(self.blob_client.upload, stored_name, content)

        # 2. Pending job, committed before the message exists
        job = await csv_job_crud.create_import_job(
            self.db,
            file_name=stored_name,
            original_file_name=original_file_name,
        )
        await self.db.commit()

        # 3. Queue the job
        uploaded_at = datetime.now(timezone.utc)
        message = ImportJobMessage(job_id=job.id, file_name=stored_name, uploaded_at=uploaded_at)
        await asyncio.to_thread(self.broker.publish_to_queue, self.queue_name, message.to_json())

        logger.info(
            "Import job queued",
            extra={
                "job_id": str(job.id),
                "file_name": stored_name,
                "original_file_name": original_file_name,
                "size_bytes": len(content),
            },
        )

        return ImportAcceptedResponse(
            job_id=job.id,
            file_name=stored_name,
            uploaded_at=uploaded_at,
            status=job.status.value,
            message=(
                f"File uploaded as {stored_name}. "
                "It will be imported in the background; poll /jobs/{jobId} for status."
            ),
        )

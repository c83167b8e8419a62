"""
Import worker.

Consumes ImportJobMessages from csv-import-queue one at a time: downloads
the stored CSV, parses it, persists records in batches and marks the job
completed. Acknowledgement follows the ProcessingOutcome of each message:
poison messages are acked and dropped, every other failure is requeued
(no retry ceiling, no dead-letter queue).

A batch failure leaves earlier batches committed and the job pending; the
redelivered message imports the whole file again, so records can be
duplicated.

Dependencies: kombu (via RabbitMQClient), sqlalchemy, boto3 (via BlobStorageClient)
System role: Background half of the import pipeline
"""

import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any

from kombu.message import Message
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from csv_processor.boundary.aws.s3_client import BlobStorageClient
from csv_processor.boundary.broker.rabbitmq import RabbitMQClient, durable_queue
from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import csv_record_crud
from csv_processor.core.csv_schema import parse_csv_bytes
from csv_processor.core.exceptions import (
    BadRequestError,
    MessageParseError,
    ProcessingOutcome,
    classify_exception,
    should_requeue,
)
from csv_processor.models.messages import ImportJobMessage
from csv_processor.observability.correlation import correlation_scope
from csv_processor.observability.log_utils import log_failure, preview
from csv_processor.workers.change_notifier import ChangeNotifier

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_QUEUE = "csv-import-queue"
RECORD_BATCH_SIZE = 50


def decode_import_message(body: Any) -> ImportJobMessage:
    """
    Decode a queue body into an ImportJobMessage.

    Property names are matched case-insensitively.

    Raises:
        MessageParseError: Null, non-JSON or structurally invalid body,
            or a blank FileName
    """
    if body is None:
        raise MessageParseError("Empty message body")
    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8", errors="replace")

    try:
        data = json.loads(body) if isinstance(body, str) else body
    except json.JSONDecodeError as e:
        raise MessageParseError(f"Invalid JSON in message body: {e}") from e
    if not isinstance(data, dict):
        raise MessageParseError("Message body is not a JSON object")

    try:
        message = ImportJobMessage.model_validate(data)
    except ValidationError as e:
        raise MessageParseError(f"Invalid message schema: {e.error_count()} error(s)") from e

    if not message.file_name.strip():
        raise MessageParseError("Message has a blank FileName", {"job_id": str(message.job_id)})
    return message


@dataclass
class MessageContext:
    """
    Unit of work for one delivery.

    Built fresh for every message around its own database session and
    discarded afterwards, so nothing leaks between messages.
    """

    message: ImportJobMessage
    session: AsyncSession
    blob_client: BlobStorageClient
    batch_size: int = RECORD_BATCH_SIZE

    async def run(self) -> int:
        """Download, parse, persist in batches, then complete the job."""
        job_id = self.message.job_id
        file_name = self.message.file_name

        content = await asyncio.to_thread(self.blob_client.download, file_name)
        records = parse_csv_bytes(job_id, file_name, content)
        if not records:
            raise BadRequestError(
                f"No records found in {file_name}",
                details={"job_id": str(job_id)},
            )

        for start in range(0, len(records), self.batch_size):
            batch = records[start : start + self.batch_size]
            await csv_record_crud.add_batch(self.session, batch)
            await self.session.commit()
            logger.debug(
                "Record batch committed",
                extra={"job_id": str(job_id), "offset": start, "size": len(batch)},
            )

        job = await csv_job_crud.mark_completed(self.session, job_id)
        if job is None:
            logger.warning("Job row missing; records kept", extra={"job_id": str(job_id)})
        await self.session.commit()
        return len(records)


class ImportConsumer:
    """
    Import worker bound to the durable job queue.

    Database work runs on one event loop owned by the consumer, so the
    async engine's connections stay on the loop that created them.
    """

    def __init__(
        self,
        broker: RabbitMQClient,
        blob_client: BlobStorageClient,
        session_factory: async_sessionmaker,
        queue_name: str = DEFAULT_IMPORT_QUEUE,
        batch_size: int = RECORD_BATCH_SIZE,
        notifier: ChangeNotifier | None = None,
        prefetch_count: int = 1,
        poll_timeout: float = 1.0,
        engine: AsyncEngine | None = None,
    ) -> None:
        """
        Initialize import consumer.

        Args:
            broker: Broker client for the consume loop
            blob_client: Blob store holding uploaded files
            session_factory: Opens one AsyncSession per message
            queue_name: Durable job queue
            batch_size: Records per commit
            notifier: Publishes a "Created" event after each import when set
            prefetch_count: Unacknowledged deliveries per consumer
            poll_timeout: Seconds between stop checks
            engine: Engine behind session_factory; disposed on the worker loop when run() exits
        """
        self.broker = broker
        self.blob_client = blob_client
        self.session_factory = session_factory
        self.queue_name = queue_name
        self.batch_size = batch_size
        self.notifier = notifier
        self.prefetch_count = prefetch_count
        self.poll_timeout = poll_timeout
        self.engine = engine
        self._stop_event = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None

    def _run_async(self, coro):
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    async def import_file(self, message: ImportJobMessage) -> int:
        """
        Import one stored file and complete its job.

        Args:
            message: Decoded job message

        Returns:
            int: Number of records persisted

        Raises:
            BadRequestError: The file holds no records
            BlobStorageError: Download failed
            SQLAlchemyError: A batch or the job update failed
        """
        async with self.session_factory() as session:
            context = MessageContext(
                message=message,
                session=session,
                blob_client=self.blob_client,
                batch_size=self.batch_size,
            )
            return await context.run()

    def _notify_created(self, message: ImportJobMessage, record_count: int) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.publish(
                "Created",
                {
                    "JobId": str(message.job_id),
                    "FileName": message.file_name,
                    "RecordCount": record_count,
                },
            )
        except Exception as e:
            # The import is already durable; never turn it into a redelivery.
            log_failure(
                logger, "Change notification failed", e, job_id=str(message.job_id)
            )

    def process(self, body: Any) -> ProcessingOutcome:
        """
        Process one delivery body and report its outcome.

        Never raises; failures are classified instead.
        """
        try:
            message = decode_import_message(body)
        except MessageParseError as e:
            logger.warning(
                "Dropping poison message",
                extra={"reason": e.message, "body": preview(body)},
            )
            return ProcessingOutcome.POISON

        with correlation_scope(str(message.job_id)):
            logger.info(
                "Import started",
                extra={"job_id": str(message.job_id), "file_name": message.file_name},
            )
            try:
                record_count = self._run_async(self.import_file(message))
            except Exception as e:
                outcome = classify_exception(e)
                log_failure(
                    logger,
                    "Import failed",
                    e,
                    job_id=str(message.job_id),
                    file_name=message.file_name,
                    outcome=outcome.value,
                )
                return outcome

            logger.info(
                "Import completed",
                extra={"job_id": str(message.job_id), "record_count": record_count},
            )
            self._notify_created(message, record_count)
            return ProcessingOutcome.SUCCESS

    def handle_delivery(self, message: Message) -> ProcessingOutcome:
        """Process a kombu delivery, then ack or requeue it."""
        outcome = self.process(message.body)
        if should_requeue(outcome):
            message.requeue()
        else:
            message.ack()
        return outcome

    def run(self, ready: threading.Event | None = None) -> None:
        """Consume until stop() is called. Blocks the calling thread."""
        self._stop_event.clear()
        try:
            self.broker.consume(
                durable_queue(self.queue_name),
                self.handle_delivery,
                self._stop_event,
                prefetch_count=self.prefetch_count,
                poll_timeout=self.poll_timeout,
                ready=ready,
            )
        finally:
            # Pooled connections belong to the worker loop; close them before it.
            if self.engine is not None:
                self._run_async(self.engine.dispose())
            if self._loop is not None and not self._loop.is_closed():
                self._loop.close()
            self._loop = None

    def stop(self) -> None:
        """Ask the consume loop to exit after the current message."""
        self._stop_event.set()

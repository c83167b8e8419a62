"""
Dependency injection container.

Factory functions for FastAPI dependencies. Broker and blob clients are
process-wide and created lazily; services are built per request around
the request's database session.

Dependencies: csv_processor.configs, csv_processor.application, csv_processor.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.application.services import CsvService, ImportService, JobService
from csv_processor.boundary.aws.s3_client import BlobStorageClient
from csv_processor.boundary.broker.rabbitmq import RabbitMQClient
from csv_processor.boundary.db import get_async_db
from csv_processor.configs import Settings, get_settings
from csv_processor.workers.change_notifier import ChangeNotifier


class ServiceCache:
    """Container for cached client instances."""

    def __init__(self):
        self._blob_client = None
        self._broker = None

    @property
    def blob_client(self) -> BlobStorageClient:
        """Get cached blob storage client."""
        if self._blob_client is None:
            self._blob_client = BlobStorageClient.from_settings(get_settings().blob_storage)
        return self._blob_client

    @property
    def broker(self) -> RabbitMQClient:
        """Get cached broker client (connects on first publish)."""
        if self._broker is None:
            self._broker = RabbitMQClient.from_settings(get_settings().broker)
        return self._broker

    def clear(self) -> None:
        """Close and drop all cached instances."""
        if self._broker is not None:
            self._broker.close()
        self._blob_client = None
        self._broker = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_blob_client() -> BlobStorageClient:
    """Get the shared blob storage client."""
    return get_service_cache().blob_client


def get_broker() -> RabbitMQClient:
    """Get the shared broker client."""
    return get_service_cache().broker


def get_import_service(
    db: AsyncSession = Depends(get_async_db),
    blob_client: BlobStorageClient = Depends(get_blob_client),
    broker: RabbitMQClient = Depends(get_broker),
    settings: Settings = Depends(get_settings_dependency),
) -> ImportService:
    """
    Get import service instance.

    Args:
        db: Async database session (injected via Depends)
        blob_client: Blob storage client (injected)
        broker: Broker client (injected)
        settings: Application settings (injected)

    Returns:
        ImportService: Producer publishing to the configured job queue
    """
    return ImportService(
        db=db,
        blob_client=blob_client,
        broker=broker,
        queue_name=settings.broker.import_queue,
    )


def get_csv_service(
    db: AsyncSession = Depends(get_async_db),
    blob_client: BlobStorageClient = Depends(get_blob_client),
    settings: Settings = Depends(get_settings_dependency),
) -> CsvService:
    """Get CSV listing/export service instance."""
    return CsvService(
        db=db,
        blob_client=blob_client,
        presigned_url_expiry=settings.blob_storage.presigned_url_expiry,
        export_prefix=settings.blob_storage.export_prefix,
    )


def get_job_service(db: AsyncSession = Depends(get_async_db)) -> JobService:
    """
    Get job service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        JobService: Job service instance
    """
    return JobService(db=db)


def get_change_notifier(
    broker: RabbitMQClient = Depends(get_broker),
    settings: Settings = Depends(get_settings_dependency),
) -> ChangeNotifier:
    """Get change notifier bound to the configured exchange."""
    return ChangeNotifier(broker, settings.broker.changes_exchange)

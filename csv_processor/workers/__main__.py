"""
Worker entry point.

Usage:
    python -m csv_processor.workers import
    python -m csv_processor.workers log-changes
    python -m csv_processor.workers email-changes

SIGINT/SIGTERM stop the consume loop after the message in flight.

Dependencies: argparse (stdlib), csv_processor.workers
System role: Process launcher for the import worker and change listeners
"""

import argparse
import logging
import signal
import sys

from csv_processor.boundary.aws.s3_client import BlobStorageClient
from csv_processor.boundary.broker.rabbitmq import RabbitMQClient
from csv_processor.boundary.db.connection import get_async_engine, get_async_session_factory
from csv_processor.boundary.email.sendgrid_client import SendGridEmailSender
from csv_processor.configs import Settings, get_settings
from csv_processor.observability.logger import configure_logging
from csv_processor.workers.change_notifier import (
    ChangeNotifier,
    ChangeSubscriber,
    EmailAlertHandler,
    log_change_event,
)
from csv_processor.workers.import_consumer import ImportConsumer

logger = logging.getLogger(__name__)


def build_import_consumer(settings: Settings, broker: RabbitMQClient) -> ImportConsumer:
    """Wire an ImportConsumer from settings."""
    notifier = None
    if settings.worker.notify_on_import:
        notifier = ChangeNotifier(broker, settings.broker.changes_exchange)
    return ImportConsumer(
        broker=broker,
        blob_client=BlobStorageClient.from_settings(settings.blob_storage),
        session_factory=get_async_session_factory(),
        engine=get_async_engine(),
        queue_name=settings.broker.import_queue,
        batch_size=settings.worker.record_batch_size,
        notifier=notifier,
        prefetch_count=settings.broker.prefetch_count,
        poll_timeout=settings.broker.poll_timeout,
    )


def build_subscriber(settings: Settings, broker: RabbitMQClient) -> ChangeSubscriber:
    """Wire a ChangeSubscriber from settings."""
    return ChangeSubscriber(
        broker,
        settings.broker.changes_exchange,
        prefetch_count=settings.broker.prefetch_count,
        poll_timeout=settings.broker.poll_timeout,
    )


def _install_signal_handlers(stop) -> None:
    def _handle(signum, _frame):
        logger.info("Shutdown signal received", extra={"signal": signum})
        stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="csv_processor.workers")
    parser.add_argument(
        "command",
        choices=["import", "log-changes", "email-changes"],
        help="Worker to run",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    broker = RabbitMQClient.from_settings(settings.broker)

    if args.command == "import":
        consumer = build_import_consumer(settings, broker)
        _install_signal_handlers(consumer.stop)
        logger.info("Import worker starting", extra={"queue": settings.broker.import_queue})
        try:
            consumer.run()
        finally:
            broker.close()
        return 0

    subscriber = build_subscriber(settings, broker)
    if args.command == "log-changes":
        handler = log_change_event
    else:
        notifications = settings.notifications
        if not notifications.email_enabled:
            logger.error("E-mail alerts need NOTIFY_SENDGRID_API_KEY, NOTIFY_FROM_EMAIL and NOTIFY_OPERATOR_EMAIL")
            return 2
        handler = EmailAlertHandler(
            SendGridEmailSender.from_settings(notifications),
            notifications.operator_email,
        )

    _install_signal_handlers(subscriber.stop)
    logger.info("Change listener starting", extra={"exchange": settings.broker.changes_exchange})
    subscriber.subscribe(handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())

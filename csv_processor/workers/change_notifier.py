"""
Change notifications over a fan-out exchange.

ChangeNotifier broadcasts ChangeEvents on csv-changes-topic. Every
ChangeSubscriber binds its own private, broker-named queue, so each one
receives a copy of every event published while it is bound. Delivery is
best effort: nothing is replayed for late subscribers.

Dependencies: kombu (via RabbitMQClient), pydantic
System role: Change broadcast and listeners (log, e-mail alert)
"""

import json
import logging
import threading
from typing import Any, Callable

from kombu.message import Message
from pydantic import ValidationError

from csv_processor.boundary.broker.rabbitmq import RabbitMQClient, subscriber_queue
from csv_processor.boundary.email.sendgrid_client import EmailSender
from csv_processor.models.messages import ChangeEvent
from csv_processor.observability.log_utils import log_failure, preview

logger = logging.getLogger(__name__)

DEFAULT_CHANGES_EXCHANGE = "csv-changes-topic"

ChangeHandler = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Publishes change events; fire-and-forget."""

    def __init__(
        self,
        broker: RabbitMQClient,
        exchange_name: str = DEFAULT_CHANGES_EXCHANGE,
    ) -> None:
        self.broker = broker
        self.exchange_name = exchange_name

    def publish(self, change_type: str, document: Any) -> ChangeEvent:
        """
        Broadcast a change event.

        Args:
            change_type: Free-form change kind, e.g. "Created"
            document: JSON-serializable changed entity

        Returns:
            ChangeEvent: The event as published

        Raises:
            BrokerError: When the broker rejects the publish
        """
        event = ChangeEvent(change_type=change_type, document=document)
        self.broker.publish_to_exchange(self.exchange_name, event.to_json())
        logger.info(
            "Change event published",
            extra={"exchange": self.exchange_name, "change_type": change_type},
        )
        return event


def decode_change_event(body: Any) -> ChangeEvent | None:
    """Decode a delivery body; None when it is not a change event."""
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8", errors="replace")
    try:
        data = json.loads(body) if isinstance(body, str) else body
        return ChangeEvent.model_validate(data)
    except (json.JSONDecodeError, ValidationError, TypeError):
        return None


class ChangeSubscriber:
    """
    Consumes change events from a private queue bound to the exchange.

    The handler runs once per delivery. The message is acked after the
    handler returns and requeued when it raises. Bodies that are not
    change events are acked and dropped.
    """

    def __init__(
        self,
        broker: RabbitMQClient,
        exchange_name: str = DEFAULT_CHANGES_EXCHANGE,
        prefetch_count: int = 1,
        poll_timeout: float = 1.0,
    ) -> None:
        self.broker = broker
        self.exchange_name = exchange_name
        self.prefetch_count = prefetch_count
        self.poll_timeout = poll_timeout
        self._stop_event = threading.Event()

    def handle_delivery(self, handler: ChangeHandler, message: Message) -> bool:
        """
        Run the handler for one delivery and settle the message.

        Returns:
            bool: True when the message was acked, False when requeued
        """
        event = decode_change_event(message.body)
        if event is None:
            logger.warning(
                "Dropping undecodable change event",
                extra={"body": preview(message.body)},
            )
            message.ack()
            return True

        try:
            handler(event)
        except Exception as e:
            log_failure(
                logger,
                "Change handler failed; requeueing",
                e,
                change_type=event.change_type,
            )
            message.requeue()
            return False

        message.ack()
        return True

    def subscribe(self, handler: ChangeHandler, ready: threading.Event | None = None) -> None:
        """
        Bind a fresh queue and dispatch events to handler until stop().

        Blocks the calling thread.

        Args:
            handler: Called with every decoded ChangeEvent
            ready: Set once the queue is bound to the exchange
        """
        self._stop_event.clear()
        self.broker.consume(
            subscriber_queue(self.exchange_name),
            lambda message: self.handle_delivery(handler, message),
            self._stop_event,
            prefetch_count=self.prefetch_count,
            poll_timeout=self.poll_timeout,
            ready=ready,
        )

    def stop(self) -> None:
        """Ask the consume loop to exit after the current poll."""
        self._stop_event.set()


def log_change_event(event: ChangeEvent) -> None:
    """Handler that writes every change event to the log."""
    logger.info(
        "Change received",
        extra={
            "change_type": event.change_type,
            "published_at": event.published_at.isoformat(),
            "document": preview(json.dumps(event.document, default=str)),
        },
    )


class EmailAlertHandler:
    """Handler that e-mails the operator about every change event."""

    def __init__(self, sender: EmailSender, operator_email: str) -> None:
        self.sender = sender
        self.operator_email = operator_email

    def __call__(self, event: ChangeEvent) -> None:
        subject = f"CSV change: {event.change_type}"
        body = "\n".join(
            [
                f"Change type: {event.change_type}",
                f"Published at: {event.published_at.isoformat()}",
                "",
                json.dumps(event.document, indent=2, default=str),
            ]
        )
        # Delivery errors propagate so the subscriber requeues the event.
        self.sender.send(self.operator_email, subject, body)

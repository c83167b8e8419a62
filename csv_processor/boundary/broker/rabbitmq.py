"""
RabbitMQ client for import jobs and change notifications.

Publishes JSON bodies to the durable import queue and to fan-out
exchanges, and runs blocking consume loops with manual acknowledgement.

Publishing shares one lazily opened connection per client. kombu channels
are not thread-safe, so publishes are serialized with a lock. Every consume
loop opens its own connection and stops when its stop event is set; the
event is checked every poll_timeout seconds.

Dependencies: kombu
System role: Message broker adapter (producer, import worker, change notifier)
"""

import logging
import socket
import threading
from typing import Callable

from kombu import Connection, Consumer, Exchange, Producer, Queue
from kombu.exceptions import KombuError
from kombu.message import Message

from csv_processor.configs.broker import BrokerSettings
from csv_processor.core.exceptions import BrokerError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
PERSISTENT = 2

MessageCallback = Callable[[Message], None]


def durable_queue(name: str) -> Queue:
    """Durable, shared, non-auto-delete queue on the default exchange."""
    return Queue(
        name,
        exchange=Exchange(""),
        routing_key=name,
        durable=True,
        exclusive=False,
        auto_delete=False,
    )


def fanout_exchange(name: str) -> Exchange:
    """Durable fan-out exchange that survives its last binding going away."""
    return Exchange(name, type="fanout", durable=True, auto_delete=False)


def subscriber_queue(exchange_name: str) -> Queue:
    """
    Private queue bound to a fan-out exchange.

    The broker generates the name on declaration. The queue is exclusive
    and auto-deleted, so events published while no subscriber is bound
    are lost.
    """
    return Queue(
        "",
        exchange=fanout_exchange(exchange_name),
        routing_key="",
        durable=False,
        exclusive=True,
        auto_delete=True,
    )


class RabbitMQClient:
    """kombu-backed broker client."""

    def __init__(
        self,
        broker_url: str,
        connect_retries: int = 5,
        connection_factory: Callable[[str], Connection] = Connection,
    ) -> None:
        """
        Initialize broker client.

        Args:
            broker_url: kombu URL (amqp://... or memory:// in tests)
            connect_retries: Connection attempts before BrokerError
            connection_factory: Builds connections from the URL (tests)
        """
        self._broker_url = broker_url
        self._connect_retries = connect_retries
        self._connection_factory = connection_factory
        self._connection: Connection | None = None
        self._connection_lock = threading.Lock()
        self._publish_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: BrokerSettings) -> "RabbitMQClient":
        """Build a client from broker settings."""
        return cls(settings.broker_url, connect_retries=settings.connect_retries)

    def _connect(self) -> Connection:
        connection = self._connection_factory(self._broker_url)
        connection.ensure_connection(max_retries=self._connect_retries)
        return connection

    def _get_connection(self) -> Connection:
        """Open the shared publishing connection on first use."""
        if self._connection is None:
            with self._connection_lock:
                if self._connection is None:
                    self._connection = self._connect()
                    logger.info("Broker connection opened", extra={"broker": self._safe_url})
        return self._connection

    @property
    def _safe_url(self) -> str:
        # Drop credentials before logging.
        return self._broker_url.rsplit("@", 1)[-1]

    def _publish(self, body: str, destination: str, **publish_kwargs) -> None:
        try:
            connection = self._get_connection()
            with self._publish_lock:
                producer = Producer(connection.default_channel)
                producer.publish(
                    body,
                    content_type=JSON_CONTENT_TYPE,
                    content_encoding="utf-8",
                    delivery_mode=PERSISTENT,
                    retry=True,
                    retry_policy={"max_retries": self._connect_retries},
                    **publish_kwargs,
                )
        except (KombuError, OSError) as e:
            logger.error(
                "Broker publish failed",
                extra={"destination": destination, "error_type": type(e).__name__},
            )
            raise BrokerError(f"Failed to publish to {destination}", destination) from e

    def publish_to_queue(self, queue_name: str, body: str) -> None:
        """
        Publish a persistent JSON message to a durable queue.

        The queue is declared (idempotently) before the publish.

        Args:
            queue_name: Target queue
            body: JSON text

        Raises:
            BrokerError: When the broker is unreachable or rejects the publish
        """
        queue = durable_queue(queue_name)
        self._publish(
            body,
            queue_name,
            exchange=queue.exchange,
            routing_key=queue_name,
            declare=[queue],
        )
        logger.debug("Published to queue", extra={"queue": queue_name})

    def publish_to_exchange(self, exchange_name: str, body: str) -> None:
        """
        Broadcast a JSON message on a fan-out exchange.

        Args:
            exchange_name: Target fan-out exchange
            body: JSON text

        Raises:
            BrokerError: When the broker is unreachable or rejects the publish
        """
        exchange = fanout_exchange(exchange_name)
        self._publish(
            body,
            exchange_name,
            exchange=exchange,
            routing_key="",
            declare=[exchange],
        )
        logger.debug("Published to exchange", extra={"exchange": exchange_name})

    def consume(
        self,
        queue: Queue,
        on_message: MessageCallback,
        stop_event: threading.Event,
        prefetch_count: int = 1,
        poll_timeout: float = 1.0,
        ready: threading.Event | None = None,
    ) -> None:
        """
        Consume from a queue until stop_event is set.

        Messages are delivered raw with manual acknowledgement: on_message
        must call message.ack() or message.requeue() itself.

        Args:
            queue: Queue to declare and consume from
            on_message: Called with each kombu message
            stop_event: Set to end the loop
            prefetch_count: Unacknowledged messages in flight
            poll_timeout: Seconds between stop_event checks
            ready: Set once the queue is declared and bound

        Raises:
            BrokerError: When the connection cannot be established or drops
        """
        try:
            with self._connect() as connection:
                with connection.channel() as channel:
                    consumer = Consumer(channel, queues=[queue], on_message=on_message)
                    consumer.qos(prefetch_count=prefetch_count)
                    with consumer:
                        logger.info(
                            "Consumer started",
                            extra={"queue": queue.name, "prefetch_count": prefetch_count},
                        )
                        if ready is not None:
                            ready.set()
                        while not stop_event.is_set():
                            try:
                                connection.drain_events(timeout=poll_timeout)
                            except socket.timeout:
                                continue
        except (KombuError, OSError) as e:
            logger.error(
                "Consumer stopped on broker error",
                extra={"queue": queue.name, "error_type": type(e).__name__},
            )
            raise BrokerError(f"Consumer failed on {queue.name}", queue.name) from e

        logger.info("Consumer stopped", extra={"queue": queue.name})

    def close(self) -> None:
        """Close the shared publishing connection."""
        with self._connection_lock:
            if self._connection is not None:
                self._connection.release()
                self._connection = None

"""Message broker adapter."""

from csv_processor.boundary.broker.rabbitmq import (
    RabbitMQClient,
    durable_queue,
    fanout_exchange,
    subscriber_queue,
)

__all__ = [
    "RabbitMQClient",
    "durable_queue",
    "fanout_exchange",
    "subscriber_queue",
]

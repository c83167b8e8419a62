"""
Message broker configuration settings.

RabbitMQ connection parameters plus the names of the durable import queue
and the fan-out change exchange.

Dependencies: pydantic, pydantic_settings
System role: Queue and exchange configuration for import jobs and notifications
"""

from pydantic import Field

from csv_processor.configs.base import BaseSettings, env_config


class BrokerSettings(BaseSettings):
    """RabbitMQ configuration."""

    model_config = env_config("RABBITMQ_")

    host: str = Field(default="localhost", description="RabbitMQ host")
    port: int = Field(default=5672, description="RabbitMQ port")
    user: str = Field(default="guest", description="RabbitMQ user")
    password: str = Field(default="guest", description="RabbitMQ password")
    vhost: str = Field(default="/", description="RabbitMQ virtual host")

    import_queue: str = Field(
        default="csv-import-queue",
        description="Durable queue carrying import job messages",
    )
    changes_exchange: str = Field(
        default="csv-changes-topic",
        description="Fan-out exchange for change notifications",
    )
    prefetch_count: int = Field(
        default=1,
        description="Unacknowledged messages delivered per consumer",
    )
    connect_retries: int = Field(
        default=5,
        description="Connection attempts before giving up",
    )
    poll_timeout: float = Field(
        default=1.0,
        description="Seconds between stop-signal checks in consume loops",
    )

    @property
    def broker_url(self) -> str:
        """
        Construct RabbitMQ broker URL.

        Returns:
            str: kombu-compatible AMQP URL
        """
        vhost = self.vhost.lstrip("/")
        return f"amqp://{self.user}:{self.password}@{self.host}:{self.port}/{vhost}"

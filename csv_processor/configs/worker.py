"""
Import worker configuration.

Dependencies: pydantic_settings
System role: Consumer tuning
"""

from pydantic import Field

from csv_processor.configs.base import BaseSettings, env_config


class WorkerSettings(BaseSettings):
    """Settings for the import consumer."""

    model_config = env_config("WORKER_")

    record_batch_size: int = Field(
        default=50,
        gt=0,
        description="Records inserted per commit",
    )
    notify_on_import: bool = Field(
        default=True,
        description="Publish a 'Created' change event after a successful import",
    )

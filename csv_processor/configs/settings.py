"""
Unified application settings.

One Settings object per process groups every concern's settings; the API
and the workers read it through the cached get_settings().

Dependencies: pydantic, pydantic_settings
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from csv_processor.configs.base import BaseSettings
from csv_processor.configs.blob_storage import BlobStorageSettings
from csv_processor.configs.broker import BrokerSettings
from csv_processor.configs.database import DatabaseSettings
from csv_processor.configs.notifications import NotificationSettings
from csv_processor.configs.worker import WorkerSettings


class Settings(BaseSettings):
    """Application settings; nested groups read their own env prefixes."""

    log_level: str = Field(default="INFO", description="Root log level name")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    broker: BrokerSettings = Field(default_factory=BrokerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get the process-wide settings.

    The environment is read once; tests call get_settings.cache_clear()
    after changing it.

    Returns:
        Settings: Application settings instance
    """
    return Settings()

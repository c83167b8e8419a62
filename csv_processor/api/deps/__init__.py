"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_blob_client,
    get_broker,
    get_change_notifier,
    get_csv_service,
    get_import_service,
    get_job_service,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "get_blob_client",
    "get_broker",
    "get_change_notifier",
    "get_csv_service",
    "get_import_service",
    "get_job_service",
    "get_service_cache",
    "get_settings_dependency",
]

"""
Blob storage configuration.

Settings for the bucket holding uploaded CSV files and export archives.
Works against AWS S3 or any S3-compatible endpoint such as MinIO.

Dependencies: pydantic_settings
System role: Blob store configuration
"""

from pydantic import Field

from csv_processor.configs.base import BaseSettings, env_config


class BlobStorageSettings(BaseSettings):
    """Settings for blob storage operations."""

    model_config = env_config("BLOB_")

    bucket: str = Field(
        default="csvfiles",
        description="Bucket for uploaded CSV files",
    )
    region: str = Field(
        default="us-east-1",
        description="Region for the bucket",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="S3-compatible endpoint (e.g. http://minio:9000); None for AWS",
    )
    access_key: str | None = Field(default=None, description="Access key id")
    secret_key: str | None = Field(default=None, description="Secret access key")
    presigned_url_expiry: int = Field(
        default=7 * 24 * 60 * 60,
        description="Presigned URL expiry in seconds (default 7 days)",
    )
    export_prefix: str = Field(
        default="exports/",
        description="Key prefix for generated export archives",
    )

"""AWS adapters."""

from csv_processor.boundary.aws.s3_client import BlobStorageClient

__all__ = ["BlobStorageClient"]

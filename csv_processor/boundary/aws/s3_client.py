"""
Blob storage client for uploaded CSV files.

Wraps an S3 (or S3-compatible, e.g. MinIO) bucket: upload, download,
existence checks and presigned download URLs. Calls are synchronous;
async callers wrap them with asyncio.to_thread.

Dependencies: boto3
System role: Blob store collaborator for the producer, the import worker and exports
"""

import logging
import mimetypes
from datetime import datetime, timedelta, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from csv_processor.configs.blob_storage import BlobStorageSettings
from csv_processor.core.exceptions import BlobStorageError, NotFoundError

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}
_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


def guess_content_type(file_name: str) -> str:
    """Content type from the file extension; CSV when unknown."""
    if file_name.lower().endswith(".csv"):
        return "text/csv"
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type or "application/octet-stream"


class BlobStorageClient:
    """S3 client for the CSV bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        s3_client=None,
    ) -> None:
        """
        Initialize blob storage client.

        Args:
            bucket: Bucket name for CSV storage
            region: Bucket region
            endpoint_url: Optional S3-compatible endpoint
            access_key: Optional explicit access key
            secret_key: Optional explicit secret key
            s3_client: Pre-built boto3 client (tests)
        """
        self._bucket = bucket
        self._region = region
        self._bucket_checked = False
        self._s3_client = s3_client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )

    @classmethod
    def from_settings(cls, settings: BlobStorageSettings) -> "BlobStorageClient":
        """Build a client from blob storage settings."""
        return cls(
            bucket=settings.bucket,
            region=settings.region,
            endpoint_url=settings.endpoint_url,
            access_key=settings.access_key,
            secret_key=settings.secret_key,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def ensure_bucket(self) -> None:
        """Create the bucket on first use when it does not exist yet."""
        if self._bucket_checked:
            return
        try:
            self._s3_client.head_bucket(Bucket=self._bucket)
        except ClientError as e:
            if _error_code(e) not in _MISSING_BUCKET_CODES:
                raise BlobStorageError(
                    f"Failed to check bucket: {self._bucket}"
                ) from e
            logger.info("Creating bucket", extra={"bucket": self._bucket})
            if self._region == "us-east-1":
                self._s3_client.create_bucket(Bucket=self._bucket)
            else:
                self._s3_client.create_bucket(
                    Bucket=self._bucket,
                    CreateBucketConfiguration={"LocationConstraint": self._region},
                )
        self._bucket_checked = True

    def upload(self, file_name: str, data: bytes, content_type: str | None = None) -> None:
        """
        Upload bytes under the given object key.

        Args:
            file_name: Object key
            data: File content
            content_type: MIME type (guessed from the name when omitted)

        Raises:
            BlobStorageError: When the upload fails
        """
        try:
            self.ensure_bucket()
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=file_name,
                Body=data,
                ContentType=content_type or guess_content_type(file_name),
            )
        except BlobStorageError:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Blob upload failed",
                extra={"file_name": file_name, "error_type": type(e).__name__},
            )
            raise BlobStorageError(f"Failed to upload file: {file_name}", file_name) from e

        logger.info(
            "Blob uploaded",
            extra={"file_name": file_name, "size_bytes": len(data)},
        )

    def download(self, file_name: str) -> bytes:
        """
        Download an object fully into memory.

        Args:
            file_name: Object key

        Returns:
            bytes: Object content

        Raises:
            BlobStorageError: When the object is missing or the download fails
        """
        if not file_name:
            raise BlobStorageError("File name is required", file_name)

        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=file_name)
            data = response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _MISSING_KEY_CODES:
                raise BlobStorageError(f"File not found in storage: {file_name}", file_name) from e
            raise BlobStorageError(f"Failed to download file: {file_name}", file_name) from e
        except BotoCoreError as e:
            raise BlobStorageError(f"Failed to download file: {file_name}", file_name) from e

        logger.info(
            "Blob downloaded",
            extra={"file_name": file_name, "size_bytes": len(data)},
        )
        return data

    def exists(self, file_name: str) -> bool:
        """
        Check if an object exists.

        Args:
            file_name: Object key to check

        Returns:
            bool: True if the object exists, False otherwise
        """
        try:
            self._s3_client.head_object(Bucket=self._bucket, Key=file_name)
            return True
        except ClientError as e:
            if _error_code(e) in _MISSING_KEY_CODES:
                return False
            raise BlobStorageError(f"Failed to check file: {file_name}", file_name) from e

    def generate_presigned_download_url(
        self,
        file_name: str,
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading an object.

        Args:
            file_name: Object key
            expires_in: URL expiry in seconds

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            NotFoundError: If the object does not exist
            BlobStorageError: If presigned URL generation fails
        """
        if not self.exists(file_name):
            raise NotFoundError(f"File not found in storage: {file_name}", resource="blob")

        try:
            presigned_url = self._s3_client.generate_presigned_url(
                ClientMethod="get_object",
                Params={
                    "Bucket": self._bucket,
                    "Key": file_name,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise BlobStorageError(f"Failed to generate download URL: {file_name}", file_name) from e

        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at

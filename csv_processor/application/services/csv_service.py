"""
CSV file service.

Listing and export of imported files: per-job record counts, presigned
download links for single files, and zip archives of every stored file.

Dependencies: sqlalchemy, zipfile (stdlib), csv_processor.boundary
System role: Read-side orchestration for stored CSV files
"""

import asyncio
import io
import logging
import zipfile
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from csv_processor.boundary.aws.s3_client import BlobStorageClient
from csv_processor.boundary.db.CRUD.csv_job_crud import csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import csv_record_crud
from csv_processor.core.exceptions import BadRequestError, BlobStorageError, NotFoundError
from csv_processor.models.csv_job import CsvFileInfo, ExportResponse, ListCsvFilesResponse

logger = logging.getLogger(__name__)

DEFAULT_URL_EXPIRY = 7 * 24 * 60 * 60


class CsvService:
    """
    CSV file service.

    Works only from job rows: a file is listed or exported when a live
    import job references it.
    """

    def __init__(
        self,
        db: AsyncSession,
        blob_client: BlobStorageClient,
        presigned_url_expiry: int = DEFAULT_URL_EXPIRY,
        export_prefix: str = "exports/",
    ) -> None:
        self.db = db
        self.blob_client = blob_client
        self.presigned_url_expiry = presigned_url_expiry
        self.export_prefix = export_prefix

    async def list_files(self) -> ListCsvFilesResponse:
        """
        List imported files with their record counts, newest first.

        Returns:
            ListCsvFilesResponse: Files and summary
        """
        jobs = await csv_job_crud.list_imports(self.db)
        counts = await csv_record_crud.count_by_jobs(self.db, [job.id for job in jobs])

        files = [
            CsvFileInfo(
                file_name=job.file_name,
                original_file_name=job.original_file_name,
                job_id=job.id,
                uploaded_at=job.created_at,
                status=job.status.value,
                record_count=counts.get(job.id, 0),
            )
            for job in jobs
        ]

        message = f"Found {len(files)} CSV file(s)." if files else "No CSV files found."
        return ListCsvFilesResponse(
            total_files=len(files),
            files=files,
            generated_at=datetime.now(timezone.utc),
            message=message,
        )

    async def export_single(self, file_name: str | None) -> ExportResponse:
        """
        Presigned download link for one stored file.

        Args:
            file_name: Stored file name

        Returns:
            ExportResponse: URL and expiry

        Raises:
            BadRequestError: Blank file name
            NotFoundError: No live import job (or blob) for the name
            BlobStorageError: URL generation failed
        """
        if not file_name or not file_name.strip():
            raise BadRequestError("File name must not be blank", field="fileName")

        job = await csv_job_crud.get_by_file_name(self.db, file_name)
        if job is None:
            raise NotFoundError(f"File '{file_name}' not found", resource="csv_file")

        url, expires_at = await asyncio.to_thread(
            self.blob_client.generate_presigned_download_url,
            file_name,
            self.presigned_url_expiry,
        )
        return ExportResponse(
            url=url,
            file_name=file_name,
            expires_at=expires_at,
            message=f"Download link for {file_name}",
        )

    async def export_all(self) -> ExportResponse:
        """
        Zip every stored file, upload the archive and link to it.

        Returns:
            ExportResponse: URL of the uploaded archive

        Raises:
            BadRequestError: Nothing to export
            BlobStorageError: A download, the archive upload or URL generation failed
        """
        jobs = await csv_job_crud.list_imports(self.db)
        if not jobs:
            raise BadRequestError("No CSV files to export")

        # Preserve order, drop duplicates
        file_names = list(dict.fromkeys(job.file_name for job in jobs))
        archive = await asyncio.to_thread(self._build_archive, file_names)

        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        archive_name = f"{self.export_prefix}csv-export-{timestamp}.zip"
        await asyncio.to_thread(
            self.blob_client.upload,
            archive_name,
            archive,
            "application/zip",
        )
        url, expires_at = await asyncio.to_thread(
            self.blob_client.generate_presigned_download_url,
            archive_name,
            self.presigned_url_expiry,
        )

        logger.info(
            "Export archive created",
            extra={"archive": archive_name, "file_count": len(file_names), "size_bytes": len(archive)},
        )
        return ExportResponse(
            url=url,
            file_name=archive_name,
            expires_at=expires_at,
            message=f"Exported {len(file_names)} file(s)",
        )

    def _build_archive(self, file_names: list[str]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for file_name in file_names:
                try:
                    data = self.blob_client.download(file_name)
                except BlobStorageError:
                    logger.error("Export download failed", extra={"file_name": file_name})
                    raise
                archive.writestr(file_name, data)
        return buffer.getvalue()

"""
CSV API endpoints.

Routes:
- POST /csv/upload - Accept a multipart CSV upload and queue an import job
- GET /csv/list - List imported files with record counts
- GET /csv/export/single - Presigned download link for one stored file
- GET /csv/export/all - Zip every stored file and link to the archive
- POST /csv/changes - Broadcast a change event

CsvProcessorException subclasses propagate to the application's
exception handler, which renders them as ErrorResponse.

Dependencies: csv_processor.application.services, csv_processor.core.multipart
System role: CSV HTTP API
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Request, status

from csv_processor.api.deps import (
    get_change_notifier,
    get_csv_service,
    get_import_service,
)
from csv_processor.application.services import CsvService, ImportService
from csv_processor.core.multipart import extract_multipart_file
from csv_processor.models.common import ErrorResponse
from csv_processor.models.csv_job import (
    ChangePublishRequest,
    ChangePublishResponse,
    ExportResponse,
    ImportAcceptedResponse,
    ListCsvFilesResponse,
)
from csv_processor.workers.change_notifier import ChangeNotifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/csv", tags=["csv"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/upload",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ImportAcceptedResponse,
    responses=_ERROR_RESPONSES,
)
async def upload_csv(
    request: Request,
    import_service: ImportService = Depends(get_import_service),
) -> ImportAcceptedResponse:
    """
    Upload a CSV file for background import.

    The raw multipart/form-data body is parsed directly; the first part
    carrying a filename is the upload. The response is returned once the
    file is stored and the job is queued, before any record is imported.

    Args:
        request: Raw HTTP request
        import_service: Injected ImportService

    Returns:
        ImportAcceptedResponse: Job ID and stored file name for polling
    """
    raw_body = await request.body()
    file_name, content = extract_multipart_file(request.headers.get("content-type"), raw_body)

    logger.info(
        "CSV upload received",
        extra={"file_name": file_name, "size_bytes": len(content)},
    )
    return await import_service.submit(file_name, content)


@router.get("/list", response_model=ListCsvFilesResponse)
async def list_csv_files(
    csv_service: CsvService = Depends(get_csv_service),
) -> ListCsvFilesResponse:
    """List imported files, newest first."""
    return await csv_service.list_files()


@router.get("/export/single", response_model=ExportResponse, responses=_ERROR_RESPONSES)
async def export_single_file(
    file_name: str = Query(..., alias="fileName"),
    csv_service: CsvService = Depends(get_csv_service),
) -> ExportResponse:
    """Presigned download URL for one stored file."""
    return await csv_service.export_single(file_name)


@router.get("/export/all", response_model=ExportResponse, responses=_ERROR_RESPONSES)
async def export_all_files(
    csv_service: CsvService = Depends(get_csv_service),
) -> ExportResponse:
    """Zip all stored files and return a presigned URL to the archive."""
    return await csv_service.export_all()


@router.post(
    "/changes",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ChangePublishResponse,
    responses=_ERROR_RESPONSES,
)
async def publish_change(
    request: ChangePublishRequest,
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> ChangePublishResponse:
    """Broadcast a change event to every bound subscriber."""
    event = await asyncio.to_thread(notifier.publish, request.change_type, request.document)
    return ChangePublishResponse(change_type=event.change_type, published_at=event.published_at)

"""
File manager endpoints.

Includes:
- Drop-folder listing per company code
- Manual batch pass trigger
- Scheduler log listing
- Scheduler configuration read-out
- Spreadsheet upload into a drop folder

Handlers are plain functions: every operation blocks on the filesystem or
Neo4j, so FastAPI runs them in its threadpool.
"""

from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from loguru import logger

from app.models.schemas import (
    PassSummaryResponse,
    ProcessNowResponse,
    SchedulerConfigResponse,
    SchedulerLogPage,
    SchedulerLogResponse,
    TenantFoldersResponse,
    UploadResponse,
)
from domains.file_ingest.models import ImportCategory
from domains.file_ingest.processors.audit import total_pages
from domains.file_ingest.scheduler import IngestionBusyError
from domains.file_ingest.service import FileManagerService, get_file_manager
from domains.file_ingest.uploads import UploadValidationError

router = APIRouter()


@router.get("/folders", response_model=List[TenantFoldersResponse])
def list_folders(service: FileManagerService = Depends(get_file_manager)):
    """
    List every company's drop folders and the files waiting in them.

    Missing folders are created on the way.
    """
    return [TenantFoldersResponse.from_tenant(t) for t in service.list_folders()]


@router.post("/process-now", response_model=ProcessNowResponse)
def process_now(service: FileManagerService = Depends(get_file_manager)):
    """
    Run one full batch pass synchronously.

    Returns:
        Pass counters once every pending file has been processed
    """
    try:
        summary = service.process_now()
    except IngestionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return ProcessNowResponse(
        message="Processing completed",
        summary=PassSummaryResponse.from_summary(summary),
    )


@router.get("/logs", response_model=SchedulerLogPage)
def get_logs(
    page: int = Query(0, ge=0),
    size: int = Query(25, ge=1, le=500),
    service: FileManagerService = Depends(get_file_manager),
):
    """
    Page through the scheduler log, newest first.

    Args:
        page: Zero-based page number
        size: Entries per page
    """
    entries, total = service.get_logs(page, size)
    return SchedulerLogPage(
        items=[SchedulerLogResponse.from_entry(e) for e in entries],
        page=page,
        size=size,
        total_elements=total,
        total_pages=total_pages(total, size),
    )


@router.get("/config", response_model=SchedulerConfigResponse)
def get_config(service: FileManagerService = Depends(get_file_manager)):
    """Scheduler settings plus the estimated next run."""
    return SchedulerConfigResponse.from_status(service.status())


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(...),
    company_code: str = Form(...),
    import_type: ImportCategory = Form(...),
    service: FileManagerService = Depends(get_file_manager),
):
    """
    Drop a spreadsheet into a company's folder for the next pass.

    An existing file of the same name is kept; the upload is stored under a
    timestamp-suffixed name instead.
    """
    try:
        stored = service.save_upload(file.filename, file.file.read(), company_code, import_type)
    except UploadValidationError as e:
        logger.warning(f"Rejected upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return UploadResponse(
        message="File uploaded successfully",
        file_name=file.filename,
        stored_as=stored.name,
    )

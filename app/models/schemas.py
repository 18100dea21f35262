"""
Pydantic models for the File Ingest Scheduler API.

Response shapes for the file manager endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from domains.file_ingest.models import (
    PassSummary,
    RunStatus,
    SchedulerLogEntry,
    TenantFolders,
)


# =====================================================
# Scheduler Log Models
# =====================================================

class SchedulerLogResponse(BaseModel):
    """Scheduler log entry model."""
    id: str
    company_code: str
    import_type: str  # AgencyList or PolicyList
    file_name: str
    file_path: str
    status: str  # SUCCESS or FAILED
    created_count: int
    updated_count: int
    error_count: int
    error_message: Optional[str] = None
    processed_by: str  # SCHEDULER or MANUAL
    processed_at: datetime
    archived_path: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: SchedulerLogEntry) -> "SchedulerLogResponse":
        return cls(**entry.as_properties())


class SchedulerLogPage(BaseModel):
    """Page of scheduler log entries, newest first."""
    items: List[SchedulerLogResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


# =====================================================
# Folder Models
# =====================================================

class FileInfoResponse(BaseModel):
    """File waiting in a drop folder."""
    name: str
    path: str
    size: int
    last_modified: str


class FolderInfoResponse(BaseModel):
    """Category folder model."""
    name: str
    path: str
    file_count: int
    files: List[FileInfoResponse]


class TenantFoldersResponse(BaseModel):
    """Drop folders of one company code."""
    company_code: str
    base_path: str
    folders: List[FolderInfoResponse]

    @classmethod
    def from_tenant(cls, tenant: TenantFolders) -> "TenantFoldersResponse":
        return cls(
            company_code=tenant.company_code,
            base_path=tenant.base_path,
            folders=[
                FolderInfoResponse(
                    name=folder.name,
                    path=folder.path,
                    file_count=folder.file_count,
                    files=[
                        FileInfoResponse(
                            name=f.name, path=f.path, size=f.size, last_modified=f.last_modified
                        )
                        for f in folder.files
                    ],
                )
                for folder in tenant.folders
            ],
        )


# =====================================================
# Trigger Models
# =====================================================

class PassSummaryResponse(BaseModel):
    """Counters of one batch pass."""
    origin: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    tenants: int
    discovered: int
    succeeded: int
    failed: int

    @classmethod
    def from_summary(cls, summary: PassSummary) -> "PassSummaryResponse":
        return cls(
            origin=summary.origin.value,
            started_at=summary.started_at,
            finished_at=summary.finished_at,
            tenants=summary.tenants,
            discovered=summary.discovered,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )


class ProcessNowResponse(BaseModel):
    """Manual trigger response."""
    message: str
    summary: PassSummaryResponse


class SchedulerConfigResponse(BaseModel):
    """Scheduler configuration and run status."""
    base_path: str
    enabled: bool
    interval_hours: int
    running: bool
    next_run: datetime
    last_scheduled_run: Optional[datetime] = None
    last_pass: Optional[PassSummaryResponse] = None

    @classmethod
    def from_status(cls, status: RunStatus) -> "SchedulerConfigResponse":
        return cls(
            base_path=str(status.base_path),
            enabled=status.enabled,
            interval_hours=status.interval_hours,
            running=status.running,
            next_run=status.next_run,
            last_scheduled_run=status.last_scheduled_run,
            last_pass=(
                PassSummaryResponse.from_summary(status.last_pass) if status.last_pass else None
            ),
        )


class UploadResponse(BaseModel):
    """Upload result."""
    message: str
    file_name: str
    stored_as: str

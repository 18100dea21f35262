"""Domain types shared by the file ingest collectors, processors and scheduler."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class ImportCategory(str, Enum):
    """Supported import categories; the value is the physical folder name."""

    AGENCY_LIST = "AgencyList"
    POLICY_LIST = "PolicyList"

    @property
    def folder_name(self) -> str:
        return self.value


class ImportStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class TriggerOrigin(str, Enum):
    SCHEDULER = "SCHEDULER"
    MANUAL = "MANUAL"


@dataclass(frozen=True, slots=True)
class RowError:
    """A single row-level problem reported by an import collaborator."""

    row_number: int
    column: str
    message: str
    value: Optional[str] = None  # offending cell, informational only

    def describe(self) -> str:
        return f"Row {self.row_number}, {self.column}: {self.message}"


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Counters returned by an import collaborator for one file."""

    created_count: int = 0
    updated_count: int = 0
    errors: List[RowError] = field(default_factory=list)
    success: bool = True  # informational; row errors do not fail the file


@dataclass(frozen=True, slots=True)
class SchedulerLogEntry:
    """Immutable audit record, one per processed file."""

    id: str
    company_code: str
    import_type: ImportCategory
    file_name: str
    file_path: str
    status: ImportStatus
    created_count: int
    updated_count: int
    error_count: int
    error_message: Optional[str]
    processed_by: TriggerOrigin
    processed_at: datetime
    archived_path: Optional[str] = None

    def as_properties(self) -> Dict[str, Any]:
        """Flatten into plain values suitable for a graph node."""
        payload = asdict(self)
        payload["import_type"] = self.import_type.value
        payload["status"] = self.status.value
        payload["processed_by"] = self.processed_by.value
        return payload

    @classmethod
    def from_properties(cls, props: Dict[str, Any]) -> "SchedulerLogEntry":
        """Rebuild an entry from stored node properties."""
        processed_at = props["processed_at"]
        if hasattr(processed_at, "to_native"):
            processed_at = processed_at.to_native()
        elif isinstance(processed_at, str):
            processed_at = datetime.fromisoformat(processed_at)

        return cls(
            id=props["id"],
            company_code=props["company_code"],
            import_type=ImportCategory(props["import_type"]),
            file_name=props["file_name"],
            file_path=props["file_path"],
            status=ImportStatus(props["status"]),
            created_count=props.get("created_count") or 0,
            updated_count=props.get("updated_count") or 0,
            error_count=props.get("error_count") or 0,
            error_message=props.get("error_message"),
            processed_by=TriggerOrigin(props["processed_by"]),
            processed_at=processed_at,
            archived_path=props.get("archived_path"),
        )


@dataclass(slots=True)
class PassSummary:
    """Outcome counters for one batch pass."""

    origin: TriggerOrigin
    started_at: datetime
    finished_at: Optional[datetime] = None
    tenants: int = 0
    discovered: int = 0
    succeeded: int = 0
    failed: int = 0

    def add(self, entry: SchedulerLogEntry) -> None:
        self.discovered += 1
        if entry.status is ImportStatus.SUCCESS:
            self.succeeded += 1
        else:
            self.failed += 1


@dataclass(frozen=True, slots=True)
class RunStatus:
    """Snapshot of the trigger state, reported by the config endpoint."""

    base_path: Path
    enabled: bool
    interval_hours: int
    running: bool
    last_scheduled_run: Optional[datetime]
    next_run: datetime
    last_pass: Optional[PassSummary] = None

    @staticmethod
    def estimate_next_run(
        last_scheduled_run: Optional[datetime], interval_hours: int, now: datetime
    ) -> datetime:
        """Next run is one interval after the last scheduled run, or after now."""
        anchor = last_scheduled_run or now
        return anchor + timedelta(hours=interval_hours)


@dataclass(frozen=True, slots=True)
class FileInfo:
    """A file currently sitting in a tenant drop folder."""

    name: str
    path: str
    size: int
    last_modified: str


@dataclass(frozen=True, slots=True)
class FolderInfo:
    name: str
    path: str
    files: List[FileInfo]

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass(frozen=True, slots=True)
class TenantFolders:
    company_code: str
    base_path: str
    folders: List[FolderInfo]

"""
Per-file processing.

Runs one pending spreadsheet through its category's importer, classifies the
outcome, archives the file and records exactly one audit entry.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from app.utils.helpers import generate_uuid
from domains.file_ingest.models import (
    ImportCategory,
    ImportStatus,
    RowError,
    SchedulerLogEntry,
    TriggerOrigin,
)
from domains.file_ingest.processors.archive import ArchiveManager
from domains.file_ingest.processors.audit import AuditLogger
from domains.file_ingest.processors.importers import ImporterRegistry

# Actor label handed to importers for every scheduler-driven import,
# manual passes included
IMPORT_ACTOR = "SCHEDULER"
MAX_REPORTED_ROW_ERRORS = 5


def summarize_row_errors(errors: List[RowError]) -> Optional[str]:
    """Join the first few row errors as ``Row <n>, <column>: <message>``."""
    if not errors:
        return None
    return "; ".join(e.describe() for e in errors[:MAX_REPORTED_ROW_ERRORS])


class ImportDispatcher:
    """Routes pending files to importers and settles their outcome."""

    def __init__(
        self,
        importers: ImporterRegistry,
        archive: ArchiveManager,
        audit: AuditLogger,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.importers = importers
        self.archive = archive
        self.audit = audit
        self.clock = clock

    def process(
        self,
        tenant: str,
        category: ImportCategory,
        file: Path,
        origin: TriggerOrigin,
    ) -> SchedulerLogEntry:
        """
        Import, archive and log a single file.

        Importer exceptions are absorbed here: they mark the file FAILED and
        never reach the caller.
        """
        file_name = file.name
        logger.info(f"Processing file: {file_name} for company: {tenant}, type: {category.value}")

        importer = self.importers.for_category(category)
        try:
            result = importer.import_file(tenant, file, False, IMPORT_ACTOR)
            errors = list(result.errors or [])
        except Exception as e:
            detail = str(e) or e.__class__.__name__
            logger.error(f"Failed to process file {file_name}: {detail}")
            archived = self.archive.archive_failure(file, tenant, category, detail)
            entry = self._entry(
                tenant, category, file, origin,
                status=ImportStatus.FAILED,
                created=0, updated=0, error_count=1,
                message=detail,
                archived=archived,
            )
        else:
            archived = self.archive.archive_success(file, tenant, category)
            entry = self._entry(
                tenant, category, file, origin,
                status=ImportStatus.SUCCESS,
                created=result.created_count,
                updated=result.updated_count,
                error_count=len(errors),
                message=summarize_row_errors(errors),
                archived=archived,
            )
            if errors:
                logger.warning(f"{file_name} imported with {len(errors)} row errors")
            logger.success(f"Successfully processed file: {file_name}")

        self.audit.record(entry)
        return entry

    def _entry(
        self,
        tenant: str,
        category: ImportCategory,
        file: Path,
        origin: TriggerOrigin,
        *,
        status: ImportStatus,
        created: int,
        updated: int,
        error_count: int,
        message: Optional[str],
        archived: Optional[Path],
    ) -> SchedulerLogEntry:
        return SchedulerLogEntry(
            id=generate_uuid(),
            company_code=tenant,
            import_type=category,
            file_name=file.name,
            file_path=str(file.absolute()),
            status=status,
            created_count=created,
            updated_count=updated,
            error_count=error_count,
            error_message=message,
            processed_by=origin,
            processed_at=self.clock(),
            archived_path=str(archived) if archived else None,
        )

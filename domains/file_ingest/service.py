"""
File manager service.

Wires the collectors, processors and scheduler together and exposes the
operations used by the API and the operator scripts.
"""

from typing import List, Optional, Tuple

from loguru import logger

from app.utils.config import Settings, get_settings
from app.utils.neo4j_client import Neo4jClient
from domains.file_ingest.collectors.folders import FileScanner, FolderLifecycle
from domains.file_ingest.collectors.tenants import TenantDirectory
from domains.file_ingest.models import (
    ImportCategory,
    PassSummary,
    RunStatus,
    SchedulerLogEntry,
    TenantFolders,
)
from domains.file_ingest.processors.archive import ArchiveManager
from domains.file_ingest.processors.audit import AuditLogger, SchedulerLogRepository
from domains.file_ingest.processors.dispatcher import ImportDispatcher
from domains.file_ingest.processors.importers import ImporterRegistry
from domains.file_ingest.scheduler import FileIngestScheduler, IngestionRunner
from domains.file_ingest.uploads import UploadService


class FileManagerService:
    """Facade over the file ingest domain."""

    def __init__(
        self,
        scheduler: FileIngestScheduler,
        repository: SchedulerLogRepository,
        uploads: UploadService,
    ):
        self.scheduler = scheduler
        self.repository = repository
        self.uploads = uploads

    @property
    def runner(self) -> IngestionRunner:
        return self.scheduler.runner

    def list_folders(self) -> List[TenantFolders]:
        """Describe the drop folders of every tenant, sorted by company code."""
        tenants = sorted(self.runner.tenants.list_tenants())
        return [self.runner.scanner.describe_tenant(t) for t in tenants]

    def get_logs(self, page: int, size: int) -> Tuple[List[SchedulerLogEntry], int]:
        return self.repository.find_page(page, size)

    def process_now(self) -> PassSummary:
        return self.scheduler.process_now()

    def status(self) -> RunStatus:
        return self.scheduler.status()

    def save_upload(
        self,
        filename: Optional[str],
        content: bytes,
        company_code: str,
        category: ImportCategory,
    ):
        return self.uploads.save(filename, content, company_code, category)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        neo4j_client: Optional[Neo4jClient] = None,
        importers: Optional[ImporterRegistry] = None,
    ) -> "FileManagerService":
        """Build the whole object graph from configuration."""
        base_path = settings.get_base_path()
        folders = FolderLifecycle(base_path)
        scanner = FileScanner(folders)
        repository = SchedulerLogRepository(neo4j_client)

        dispatcher = ImportDispatcher(
            importers=importers or ImporterRegistry.from_settings(settings),
            archive=ArchiveManager(base_path),
            audit=AuditLogger(repository),
        )
        runner = IngestionRunner(
            tenants=TenantDirectory(neo4j_client),
            folders=folders,
            scanner=scanner,
            dispatcher=dispatcher,
        )
        scheduler = FileIngestScheduler(
            runner=runner,
            base_path=base_path,
            enabled=settings.scheduler_enabled,
            interval_hours=settings.scheduler_interval_hours,
            initial_delay_seconds=settings.scheduler_initial_delay_seconds,
        )

        logger.info(f"File manager base path: {base_path}")
        return cls(scheduler=scheduler, repository=repository, uploads=UploadService(folders))


# Global service instance
_service: Optional[FileManagerService] = None

# Upper bound on waiting for an in-flight pass at shutdown
SHUTDOWN_TIMEOUT_SECONDS = 10.0


def get_file_manager() -> FileManagerService:
    """Get global file manager instance."""
    global _service
    if _service is None:
        _service = FileManagerService.from_settings(get_settings())
    return _service


def close_file_manager():
    """Stop the scheduler thread and drop the global instance."""
    global _service
    if _service:
        _service.scheduler.stop(timeout=SHUTDOWN_TIMEOUT_SECONDS)
        _service = None

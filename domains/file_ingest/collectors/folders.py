"""
Drop-folder lifecycle and scanning.

Layout under the configured base path::

    <base>/<tenant>/AgencyList/*.xlsx|*.xls
    <base>/<tenant>/PolicyList/*.xlsx|*.xls

Folders are created lazily and idempotently. Scanning tolerates missing
folders and listing errors so one broken tenant never aborts a pass.
"""

from datetime import datetime
from pathlib import Path

from loguru import logger

from app.utils.helpers import is_spreadsheet
from domains.file_ingest.models import FileInfo, FolderInfo, ImportCategory, TenantFolders


class FolderLifecycle:
    """Ensures each tenant has one subfolder per import category."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)

    def tenant_path(self, tenant: str) -> Path:
        return self.base_path / tenant

    def category_path(self, tenant: str, category: ImportCategory) -> Path:
        return self.tenant_path(tenant) / category.folder_name

    def ensure_folders(self, tenant: str) -> None:
        """Create the category folders for ``tenant`` if they are missing."""
        for category in ImportCategory:
            folder = self.category_path(tenant, category)
            try:
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create folder {folder} for company code {tenant}: {e}")

        logger.debug(f"Initialized folders for company code: {tenant}")


class FileScanner:
    """Lists pending spreadsheets in a tenant's category folder."""

    def __init__(self, folders: FolderLifecycle):
        self.folders = folders

    def list_pending_files(self, tenant: str, category: ImportCategory) -> list[Path]:
        """
        Return the spreadsheets waiting in ``<base>/<tenant>/<category>``.

        Returns:
            Regular ``.xlsx``/``.xls`` files sorted by name, or an empty
            list when the folder is missing or unreadable.
        """
        folder = self.folders.category_path(tenant, category)
        if not folder.is_dir():
            return []

        try:
            pending = sorted(
                (p for p in folder.iterdir() if p.is_file() and is_spreadsheet(p.name)),
                key=lambda p: p.name,
            )
        except OSError as e:
            logger.error(f"Error listing files in {tenant}/{category.folder_name}: {e}")
            return []

        logger.info(f"Found {len(pending)} Excel files in {tenant}/{category.folder_name}")
        return pending

    def describe_folder(self, folder: Path) -> FolderInfo:
        """Describe every regular file in ``folder`` for the folder listing."""
        files: list[FileInfo] = []

        if folder.is_dir():
            try:
                entries = sorted(folder.iterdir(), key=lambda p: p.name)
            except OSError as e:
                logger.error(f"Error reading folder {folder}: {e}")
                entries = []

            for entry in entries:
                try:
                    if not entry.is_file():
                        continue
                    stats = entry.stat()
                except OSError:
                    # Vanished or unreadable between listing and stat
                    continue
                files.append(
                    FileInfo(
                        name=entry.name,
                        path=str(entry),
                        size=stats.st_size,
                        last_modified=datetime.fromtimestamp(stats.st_mtime).isoformat(),
                    )
                )

        return FolderInfo(name=folder.name, path=str(folder), files=files)

    def describe_tenant(self, tenant: str) -> TenantFolders:
        """Snapshot every category folder of ``tenant``."""
        self.folders.ensure_folders(tenant)
        return TenantFolders(
            company_code=tenant,
            base_path=str(self.folders.tenant_path(tenant)),
            folders=[
                self.describe_folder(self.folders.category_path(tenant, category))
                for category in ImportCategory
            ],
        )

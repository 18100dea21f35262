"""
Manual uploads into tenant drop folders.

Uploaded spreadsheets are written to ``<base>/<tenant>/<category>/`` where
the next batch pass picks them up. An existing pending file is never
overwritten: the new upload gets a ``_yyyyMMdd_HHmmss`` suffix instead.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable

from loguru import logger

from app.utils.helpers import file_stamp, is_safe_path_segment, is_spreadsheet, split_extension
from domains.file_ingest.collectors.folders import FolderLifecycle
from domains.file_ingest.models import ImportCategory


class UploadValidationError(ValueError):
    """Raised for uploads that must never reach the ingestion pipeline."""


class UploadService:
    """Stores operator uploads as pending files."""

    def __init__(self, folders: FolderLifecycle, clock: Callable[[], datetime] = datetime.now):
        self.folders = folders
        self.clock = clock

    def save(
        self,
        filename: str | None,
        content: bytes,
        company_code: str,
        category: ImportCategory,
    ) -> Path:
        """
        Validate and store an uploaded spreadsheet.

        Args:
            filename: Client-supplied file name; directory parts are dropped
            content: Raw file bytes
            company_code: Target tenant
            category: Target import category

        Returns:
            Path of the stored pending file

        Raises:
            UploadValidationError: Empty file, wrong extension or invalid tenant
        """
        if not content:
            raise UploadValidationError("File is empty")

        name = Path(filename or "").name
        if not name or not is_spreadsheet(name):
            raise UploadValidationError(
                "Invalid file format. Only Excel files (.xlsx, .xls) are allowed"
            )

        company_code = (company_code or "").strip()
        if not is_safe_path_segment(company_code):
            raise UploadValidationError(f"Invalid company code: '{company_code}'")

        self.folders.ensure_folders(company_code)
        folder = self.folders.category_path(company_code, category)
        folder.mkdir(parents=True, exist_ok=True)

        target = self._free_target(folder, name)
        # "xb" refuses to clobber a file that appeared since the name was picked
        with open(target, "xb") as f:
            f.write(content)

        logger.info(f"File uploaded successfully: {target.name} to {company_code}/{category.value}")
        return target

    def _free_target(self, folder: Path, name: str) -> Path:
        target = folder / name
        if not target.exists():
            return target

        stem, ext = split_extension(name)
        base = f"{stem}_{file_stamp(self.clock())}"
        target = folder / f"{base}{ext}"
        sequence = 1
        while target.exists():
            sequence += 1
            target = folder / f"{base}_{sequence}{ext}"
        return target

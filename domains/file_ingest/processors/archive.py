"""
Archival of processed drop-folder files.

Every processed file leaves its source folder and lands in a shared area::

    <base>/sukses/<tenant>_<category>_<yyyyMMdd_HHmmss>_<originalName>
    <base>/failed/<tenant>_<category>_<yyyyMMdd_HHmmss>_<originalName>
    <base>/failed/<tenant>_<category>_<yyyyMMdd_HHmmss>_error.txt

When a name from the same second is already taken, a sequence number is
inserted after the timestamp (``..._<stamp>_2_<originalName>``) rather than
overwriting the earlier archive.
"""

import errno
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.utils.helpers import file_stamp
from domains.file_ingest.models import ImportCategory

SUCCESS_FOLDER = "sukses"
FAILED_FOLDER = "failed"


class ArchiveManager:
    """Moves processed files into the success or failed area."""

    def __init__(self, base_path: Path, clock: Callable[[], datetime] = datetime.now):
        self.base_path = Path(base_path)
        self.clock = clock

    @property
    def success_dir(self) -> Path:
        return self.base_path / SUCCESS_FOLDER

    @property
    def failed_dir(self) -> Path:
        return self.base_path / FAILED_FOLDER

    def archive_success(
        self, file: Path, tenant: str, category: ImportCategory
    ) -> Optional[Path]:
        """
        Move ``file`` into the success area.

        Returns:
            The archived path, or None if the move failed (file stays put)
        """
        try:
            self.success_dir.mkdir(parents=True, exist_ok=True)
            prefix = self._free_prefix(self.success_dir, file.name, tenant, category)
            target = self.success_dir / f"{prefix}_{file.name}"
            _move(file, target)
            logger.info(f"Moved file to {SUCCESS_FOLDER}: {target}")
            return target

        except OSError as e:
            logger.error(f"Failed to move {file} to {SUCCESS_FOLDER} folder: {e}")
            return None

    def archive_failure(
        self, file: Path, tenant: str, category: ImportCategory, error_detail: str
    ) -> Optional[Path]:
        """
        Move ``file`` into the failed area and write its ``_error.txt`` sidecar.

        Returns:
            The archived path, or None if the move failed (file stays put).
            A sidecar that cannot be written is logged and does not undo the move.
        """
        try:
            self.failed_dir.mkdir(parents=True, exist_ok=True)
            stamp = file_stamp(self.clock())
            prefix = self._free_prefix(self.failed_dir, file.name, tenant, category, stamp)
            target = self.failed_dir / f"{prefix}_{file.name}"
            _move(file, target)
            logger.info(f"Moved file to {FAILED_FOLDER}: {target}")

        except OSError as e:
            logger.error(f"Failed to move {file} to {FAILED_FOLDER} folder: {e}")
            return None

        sidecar = self.failed_dir / f"{prefix}_error.txt"
        try:
            sidecar.write_text(
                format_error_report(tenant, category, file.name, stamp, error_detail),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to write error sidecar {sidecar}: {e}")

        return target

    def _free_prefix(
        self,
        folder: Path,
        original_name: str,
        tenant: str,
        category: ImportCategory,
        stamp: Optional[str] = None,
    ) -> str:
        """
        Return ``<tenant>_<category>_<stamp>`` or, if the archive name or its
        sidecar is taken, the same prefix with the first free sequence number.
        """
        base = f"{tenant}_{category.folder_name}_{stamp or file_stamp(self.clock())}"
        prefix = base
        sequence = 1
        while (folder / f"{prefix}_{original_name}").exists() or (
            folder / f"{prefix}_error.txt"
        ).exists():
            sequence += 1
            prefix = f"{base}_{sequence}"
        return prefix


def format_error_report(
    tenant: str, category: ImportCategory, file_name: str, stamp: str, error_detail: str
) -> str:
    """Body of the ``_error.txt`` sidecar."""
    return (
        f"Company Code: {tenant}\n"
        f"Import Type: {category.folder_name}\n"
        f"File Name: {file_name}\n"
        f"Timestamp: {stamp}\n"
        f"Error:\n"
        f"{error_detail}"
    )


def _move(source: Path, target: Path) -> None:
    """Rename atomically where possible, copy then delete across devices."""
    try:
        os.replace(source, target)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        shutil.move(str(source), str(target))

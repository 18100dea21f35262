"""
Helper utilities for the File Ingest Scheduler.

Common functions used across domains.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import uuid4

# yyyyMMdd_HHmmss, the stamp embedded in archived and re-named uploads
STAMP_FORMAT = "%Y%m%d_%H%M%S"

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")


def generate_uuid() -> str:
    """Generate a unique identifier."""
    return str(uuid4())


def file_stamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now, local time) as ``yyyyMMdd_HHmmss``."""
    return (moment or datetime.now()).strftime(STAMP_FORMAT)


def is_spreadsheet(name: str) -> bool:
    """Check whether a file name carries an Excel extension (case-insensitive)."""
    return name.lower().endswith(SPREADSHEET_EXTENSIONS)


def is_safe_path_segment(segment: str) -> bool:
    """
    Check that ``segment`` can be used as a single directory name.

    Rejects blanks, separators and relative markers so a tenant code
    can never point outside the base folder.
    """
    if not segment or not segment.strip():
        return False
    if segment in (".", ".."):
        return False
    return re.search(r'[<>:"/\\|?*\x00]', segment) is None


def split_extension(filename: str) -> tuple[str, str]:
    """Split ``name.ext`` into ``("name", ".ext")``; no dot gives an empty extension."""
    path = Path(filename)
    return path.stem, path.suffix

"""
File Ingestion Collectors

Discover what a batch pass has to work on:
- tenants.py - Company codes of registered users
- folders.py - Per-tenant drop folders and the spreadsheets waiting in them
"""

from .folders import FileScanner, FolderLifecycle
from .tenants import TenantDirectory

__all__ = ["FileScanner", "FolderLifecycle", "TenantDirectory"]

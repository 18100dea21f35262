"""
File Ingestion Processors

Handle each discovered spreadsheet:
- importers.py - Category-bound import collaborators
- dispatcher.py - Import, classify, archive and log one file
- archive.py - Success/failed areas with traceable names and error sidecars
- audit.py - Append-only scheduler log in Neo4j
"""

from .archive import ArchiveManager
from .audit import AuditLogger, SchedulerLogRepository
from .dispatcher import ImportDispatcher
from .importers import Importer, ImporterRegistry

__all__ = [
    "ArchiveManager",
    "AuditLogger",
    "ImportDispatcher",
    "Importer",
    "ImporterRegistry",
    "SchedulerLogRepository",
]

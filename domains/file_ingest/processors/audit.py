"""
Audit trail for processed files.

One ``SchedulerLog`` node per processed file, append-only. Writes go
through :class:`AuditLogger`, which never lets a persistence failure stop
the rest of a pass.
"""

from math import ceil
from typing import List, Tuple

from loguru import logger

from app.utils.neo4j_client import Neo4jClient, get_neo4j_client
from domains.file_ingest.models import SchedulerLogEntry

LOG_LABEL = "SchedulerLog"


class SchedulerLogRepository:
    """Neo4j persistence for :class:`SchedulerLogEntry`."""

    def __init__(self, neo4j_client: Neo4jClient | None = None):
        self._neo4j = neo4j_client

    @property
    def neo4j(self) -> Neo4jClient:
        if self._neo4j is None:
            self._neo4j = get_neo4j_client()
        return self._neo4j

    def save(self, entry: SchedulerLogEntry) -> None:
        self.neo4j.create_node(LOG_LABEL, entry.as_properties())

    def find_page(self, page: int, size: int) -> Tuple[List[SchedulerLogEntry], int]:
        """
        Return one page of entries, newest first, and the total entry count.

        Args:
            page: Zero-based page number
            size: Entries per page
        """
        total = self.neo4j.count_nodes(LOG_LABEL)
        nodes = self.neo4j.page_nodes(
            LOG_LABEL, order_by="processed_at", skip=page * size, limit=size
        )
        return [SchedulerLogEntry.from_properties(n) for n in nodes], total


class AuditLogger:
    """Records log entries without ever aborting the caller."""

    def __init__(self, repository: SchedulerLogRepository):
        self.repository = repository

    def record(self, entry: SchedulerLogEntry) -> bool:
        """Persist ``entry``; returns False when the write failed."""
        try:
            self.repository.save(entry)
        except Exception as e:
            logger.error(
                f"Failed to write scheduler log for {entry.company_code}/"
                f"{entry.import_type.value}/{entry.file_name}: {e}"
            )
            return False

        logger.debug(f"Scheduler log recorded: {entry.id} ({entry.status.value})")
        return True


def total_pages(total: int, size: int) -> int:
    return ceil(total / size) if size else 0

"""
Shared fixtures: an in-memory stand-in for the Neo4j client, scriptable
importers and a controllable clock. Unit and API tests never touch a real
database; ``tests/service`` covers the Cypher against Neo4j.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from domains.file_ingest.models import ImportCategory, ImportResult
from domains.file_ingest.processors.importers import ImporterRegistry
from domains.file_ingest.service import FileManagerService
from app.utils.config import Settings


class FakeNeo4jClient:
    """Implements the subset of Neo4jClient the domain uses."""

    def __init__(self, company_codes: Optional[List[Any]] = None):
        self.company_codes = list(company_codes or [])
        self.nodes: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_reads: Optional[Exception] = None
        self.fail_writes: Optional[Exception] = None

    def execute_read(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        if self.fail_reads:
            raise self.fail_reads
        if "RETURN 1" in query:
            return [{"test": 1}]
        return [{"company_code": code} for code in self.company_codes]

    def create_node(self, label: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_writes:
            raise self.fail_writes
        self.nodes.setdefault(label, []).append(dict(properties))
        return dict(properties)

    def count_nodes(self, label: str) -> int:
        return len(self.nodes.get(label, []))

    def page_nodes(self, label, order_by, skip, limit, descending=True):
        ordered = sorted(
            self.nodes.get(label, []), key=lambda n: n[order_by], reverse=descending
        )
        return [dict(n) for n in ordered[skip:skip + limit]]


class ScriptedImporter:
    """Importer whose outcome per file name is set by the test."""

    def __init__(self, default: Optional[ImportResult] = None):
        self.default = default or ImportResult(created_count=1)
        self.outcomes: Dict[str, Any] = {}
        self.calls: List[tuple] = []

    def import_file(self, company_code, file_path, remove_existing, created_by):
        self.calls.append((company_code, Path(file_path), remove_existing, created_by))
        outcome = self.outcomes.get(Path(file_path).name, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TickingClock:
    """Advances one second per call, starting at ``start``."""

    def __init__(self, start: datetime = datetime(2026, 10, 19, 10, 15, 0)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def base_path(tmp_path) -> Path:
    return tmp_path / "scheduler"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: datetime(2026, 10, 19, 10, 15, 0)


@pytest.fixture
def neo4j() -> FakeNeo4jClient:
    return FakeNeo4jClient(["ACME"])


@pytest.fixture
def agency_importer() -> ScriptedImporter:
    return ScriptedImporter()


@pytest.fixture
def policy_importer() -> ScriptedImporter:
    return ScriptedImporter()


@pytest.fixture
def make_service(base_path, neo4j, agency_importer, policy_importer):
    """Build a FileManagerService over the fakes; keyword args override settings."""

    def _make(**overrides) -> FileManagerService:
        values = {
            "scheduler_base_path": base_path,
            "scheduler_enabled": True,
            "scheduler_interval_hours": 6,
            "scheduler_initial_delay_seconds": 0,
        }
        values.update(overrides)
        settings = Settings(**values)
        service = FileManagerService.from_settings(
            settings,
            neo4j_client=neo4j,
            importers=ImporterRegistry({
                ImportCategory.AGENCY_LIST: agency_importer,
                ImportCategory.POLICY_LIST: policy_importer,
            }),
        )
        clock = TickingClock()
        service.runner.dispatcher.clock = clock
        service.runner.dispatcher.archive.clock = clock
        return service

    return _make


def drop_file(base_path: Path, tenant: str, category: ImportCategory, name: str,
              content: bytes = b"PK\x03\x04") -> Path:
    folder = base_path / tenant / category.folder_name
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_bytes(content)
    return path


@pytest.fixture
def drop(base_path):
    """Place a pending file under ``<base>/<tenant>/<category>/``."""

    def _drop(tenant: str, category: ImportCategory, name: str, content: bytes = b"PK\x03\x04") -> Path:
        return drop_file(base_path, tenant, category, name, content)

    return _drop

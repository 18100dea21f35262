from pathlib import Path

import pytest

from domains.file_ingest.models import (
    ImportCategory,
    ImportResult,
    ImportStatus,
    RowError,
    TriggerOrigin,
)
from domains.file_ingest.processors.archive import ArchiveManager
from domains.file_ingest.processors.audit import AuditLogger, SchedulerLogRepository
from domains.file_ingest.processors.dispatcher import ImportDispatcher, summarize_row_errors
from domains.file_ingest.processors.importers import ImporterRegistry


@pytest.fixture
def dispatcher(base_path, fixed_clock, neo4j, agency_importer, policy_importer):
    return ImportDispatcher(
        importers=ImporterRegistry({
            ImportCategory.AGENCY_LIST: agency_importer,
            ImportCategory.POLICY_LIST: policy_importer,
        }),
        archive=ArchiveManager(base_path, clock=fixed_clock),
        audit=AuditLogger(SchedulerLogRepository(neo4j)),
        clock=fixed_clock,
    )


def test_success_is_archived_and_logged(dispatcher, drop, base_path, neo4j, agency_importer):
    agency_importer.default = ImportResult(created_count=3, updated_count=2)
    source = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx")

    entry = dispatcher.process("ACME", ImportCategory.AGENCY_LIST, source, TriggerOrigin.MANUAL)

    assert entry.status is ImportStatus.SUCCESS
    assert (entry.created_count, entry.updated_count, entry.error_count) == (3, 2, 0)
    assert entry.error_message is None
    assert entry.processed_by is TriggerOrigin.MANUAL
    assert entry.file_name == "agents.xlsx"
    assert entry.file_path == str(source.absolute())
    assert entry.archived_path == str(base_path / "sukses" / "ACME_AgencyList_20261019_101500_agents.xlsx")
    assert not source.exists()

    stored = neo4j.nodes["SchedulerLog"]
    assert len(stored) == 1
    assert stored[0]["company_code"] == "ACME"
    assert stored[0]["import_type"] == "AgencyList"
    assert stored[0]["status"] == "SUCCESS"


def test_importer_receives_tenant_path_and_fixed_flags(dispatcher, drop, policy_importer):
    source = drop("ACME", ImportCategory.POLICY_LIST, "policies.xlsx")

    dispatcher.process("ACME", ImportCategory.POLICY_LIST, source, TriggerOrigin.MANUAL)

    assert policy_importer.calls == [("ACME", source, False, "SCHEDULER")]


def test_row_errors_stay_success_and_are_truncated(dispatcher, drop, agency_importer):
    errors = [RowError(row_number=n, column="Agent Code", message="Required") for n in range(2, 9)]
    agency_importer.default = ImportResult(created_count=1, errors=errors)
    source = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx")

    entry = dispatcher.process("ACME", ImportCategory.AGENCY_LIST, source, TriggerOrigin.SCHEDULER)

    assert entry.status is ImportStatus.SUCCESS
    assert entry.error_count == 7
    assert entry.error_message == (
        "Row 2, Agent Code: Required; Row 3, Agent Code: Required; "
        "Row 4, Agent Code: Required; Row 5, Agent Code: Required; "
        "Row 6, Agent Code: Required"
    )


def test_importer_exception_marks_file_failed(dispatcher, drop, base_path, policy_importer):
    source = drop("ACME", ImportCategory.POLICY_LIST, "policies.xlsx")
    policy_importer.outcomes["policies.xlsx"] = RuntimeError("bad row 3")

    entry = dispatcher.process("ACME", ImportCategory.POLICY_LIST, source, TriggerOrigin.SCHEDULER)

    assert entry.status is ImportStatus.FAILED
    assert (entry.created_count, entry.updated_count, entry.error_count) == (0, 0, 1)
    assert "bad row 3" in entry.error_message
    assert Path(entry.archived_path).parent == base_path / "failed"
    sidecar = base_path / "failed" / "ACME_PolicyList_20261019_101500_error.txt"
    assert "bad row 3" in sidecar.read_text()


def test_exception_without_message_uses_class_name(dispatcher, drop, agency_importer):
    source = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx")
    agency_importer.outcomes["agents.xlsx"] = KeyError()

    entry = dispatcher.process("ACME", ImportCategory.AGENCY_LIST, source, TriggerOrigin.MANUAL)

    assert entry.status is ImportStatus.FAILED
    assert entry.error_message == "KeyError"


def test_audit_write_failure_does_not_stop_processing(dispatcher, drop, base_path, neo4j):
    neo4j.fail_writes = ConnectionError("neo4j down")
    source = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx")

    entry = dispatcher.process("ACME", ImportCategory.AGENCY_LIST, source, TriggerOrigin.MANUAL)

    assert entry.status is ImportStatus.SUCCESS
    assert not source.exists()
    assert list((base_path / "sukses").iterdir())


def test_summarize_row_errors_handles_empty_list():
    assert summarize_row_errors([]) is None


if __name__ == "__main__":  # pragma: no cover
    pytest.main([__file__])

import re
from pathlib import Path

import pytest

from domains.file_ingest.models import ImportCategory
from domains.file_ingest.processors.archive import ArchiveManager

ARCHIVE_NAME = re.compile(r"^ACME_(AgencyList|PolicyList)_\d{8}_\d{6}_.+$")


@pytest.fixture
def archive(base_path, fixed_clock):
    return ArchiveManager(base_path, clock=fixed_clock)


def test_archive_success_moves_with_traceable_name(archive, base_path, drop):
    source = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx", b"payload")

    target = archive.archive_success(source, "ACME", ImportCategory.AGENCY_LIST)

    assert target == base_path / "sukses" / "ACME_AgencyList_20261019_101500_agents.xlsx"
    assert ARCHIVE_NAME.match(target.name)
    assert target.read_bytes() == b"payload"
    assert not source.exists()


def test_archive_failure_writes_sidecar(archive, base_path, drop):
    source = drop("ACME", ImportCategory.POLICY_LIST, "policies.xls")

    target = archive.archive_failure(source, "ACME", ImportCategory.POLICY_LIST, "bad row 3")

    assert target == base_path / "failed" / "ACME_PolicyList_20261019_101500_policies.xls"
    assert target.exists()
    assert not source.exists()

    sidecar = base_path / "failed" / "ACME_PolicyList_20261019_101500_error.txt"
    assert sidecar.read_text(encoding="utf-8") == (
        "Company Code: ACME\n"
        "Import Type: PolicyList\n"
        "File Name: policies.xls\n"
        "Timestamp: 20261019_101500\n"
        "Error:\n"
        "bad row 3"
    )


def test_same_second_collision_gets_sequence_number(archive, base_path, drop):
    first = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx", b"first")
    archive.archive_success(first, "ACME", ImportCategory.AGENCY_LIST)

    second = drop("ACME", ImportCategory.AGENCY_LIST, "agents.xlsx", b"second")
    target = archive.archive_success(second, "ACME", ImportCategory.AGENCY_LIST)

    assert target.name == "ACME_AgencyList_20261019_101500_2_agents.xlsx"
    assert (base_path / "sukses" / "ACME_AgencyList_20261019_101500_agents.xlsx").read_bytes() == b"first"
    assert target.read_bytes() == b"second"


def test_failed_files_in_same_second_keep_their_own_sidecars(archive, base_path, drop):
    a = drop("ACME", ImportCategory.POLICY_LIST, "a.xlsx")
    b = drop("ACME", ImportCategory.POLICY_LIST, "b.xlsx")

    archive.archive_failure(a, "ACME", ImportCategory.POLICY_LIST, "error in a")
    target_b = archive.archive_failure(b, "ACME", ImportCategory.POLICY_LIST, "error in b")

    failed = base_path / "failed"
    assert target_b.name == "ACME_PolicyList_20261019_101500_2_b.xlsx"
    assert "error in a" in (failed / "ACME_PolicyList_20261019_101500_error.txt").read_text()
    assert "error in b" in (failed / "ACME_PolicyList_20261019_101500_2_error.txt").read_text()


def test_move_failure_is_swallowed(archive, base_path):
    missing = base_path / "ACME" / "AgencyList" / "gone.xlsx"

    assert archive.archive_success(missing, "ACME", ImportCategory.AGENCY_LIST) is None
    assert archive.archive_failure(missing, "ACME", ImportCategory.AGENCY_LIST, "boom") is None
    assert not (base_path / "failed" / "ACME_AgencyList_20261019_101500_error.txt").exists()


def test_sidecar_write_failure_keeps_archived_path(archive, base_path, drop, monkeypatch):
    source = drop("ACME", ImportCategory.POLICY_LIST, "policies.xlsx")

    def disk_full(self, *args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(Path, "write_text", disk_full)

    target = archive.archive_failure(source, "ACME", ImportCategory.POLICY_LIST, "bad row 3")

    assert target == base_path / "failed" / "ACME_PolicyList_20261019_101500_policies.xlsx"
    assert target.exists()
    assert not source.exists()
    assert not (base_path / "failed" / "ACME_PolicyList_20261019_101500_error.txt").exists()


if __name__ == "__main__":  # pragma: no cover
    pytest.main([__file__])

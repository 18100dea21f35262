import sys
import types

import pytest

from app.utils.config import Settings
from domains.file_ingest.models import ImportCategory, ImportResult
from domains.file_ingest.processors.importers import (
    ImporterNotConfiguredError,
    ImporterRegistry,
    UnconfiguredImporter,
    load_importer,
)


class AgencyImporter:
    def import_file(self, company_code, file_path, remove_existing, created_by):
        return ImportResult(created_count=1)


@pytest.fixture
def importer_module(monkeypatch):
    module = types.ModuleType("acme_importers")
    module.AgencyImporter = AgencyImporter
    module.policy_importer = AgencyImporter()
    module.not_an_importer = object()
    monkeypatch.setitem(sys.modules, "acme_importers", module)
    return module


def test_registry_requires_every_category(agency_importer):
    with pytest.raises(ValueError, match="PolicyList"):
        ImporterRegistry({ImportCategory.AGENCY_LIST: agency_importer})


def test_registry_routes_by_category(agency_importer, policy_importer):
    registry = ImporterRegistry({
        ImportCategory.AGENCY_LIST: agency_importer,
        ImportCategory.POLICY_LIST: policy_importer,
    })

    assert registry.for_category(ImportCategory.AGENCY_LIST) is agency_importer
    assert registry.for_category(ImportCategory.POLICY_LIST) is policy_importer


def test_missing_target_yields_failing_importer(tmp_path):
    importer = load_importer(None, ImportCategory.POLICY_LIST)

    assert isinstance(importer, UnconfiguredImporter)
    with pytest.raises(ImporterNotConfiguredError, match="PolicyList"):
        importer.import_file("ACME", tmp_path / "p.xlsx", False, "SCHEDULER")


def test_class_targets_are_instantiated(importer_module):
    importer = load_importer("acme_importers:AgencyImporter", ImportCategory.AGENCY_LIST)

    assert isinstance(importer, AgencyImporter)


def test_registry_from_settings(importer_module):
    settings = Settings(
        agency_importer="acme_importers:AgencyImporter",
        policy_importer="acme_importers:policy_importer",
    )

    registry = ImporterRegistry.from_settings(settings)

    assert isinstance(registry.for_category(ImportCategory.AGENCY_LIST), AgencyImporter)
    assert registry.for_category(ImportCategory.POLICY_LIST) is importer_module.policy_importer


@pytest.mark.parametrize(
    "target",
    ["acme_importers", "acme_importers:", "acme_importers:not_an_importer"],
)
def test_invalid_targets_are_rejected(importer_module, target):
    with pytest.raises(ValueError):
        load_importer(target, ImportCategory.AGENCY_LIST)


if __name__ == "__main__":  # pragma: no cover
    pytest.main([__file__])

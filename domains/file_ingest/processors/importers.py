"""
Import collaborators.

The spreadsheet parsing and record upsert logic live outside this service.
Each category is bound to exactly one collaborator implementing
:class:`Importer`; deployments point the settings at their implementations
as ``"package.module:attribute"``.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Mapping, Optional, Protocol, runtime_checkable

from loguru import logger

from app.utils.config import Settings
from domains.file_ingest.models import ImportCategory, ImportResult


@runtime_checkable
class Importer(Protocol):
    """Imports one spreadsheet for one tenant."""

    def import_file(
        self,
        company_code: str,
        file_path: Path,
        remove_existing: bool,
        created_by: str,
    ) -> ImportResult:
        ...


class ImporterNotConfiguredError(RuntimeError):
    """Raised when a category has no collaborator bound to it."""


class UnconfiguredImporter:
    """Stand-in that fails every file so the gap shows up in the audit log."""

    def __init__(self, category: ImportCategory):
        self.category = category

    def import_file(self, company_code, file_path, remove_existing, created_by) -> ImportResult:
        raise ImporterNotConfiguredError(
            f"No importer configured for {self.category.value}"
        )


class ImporterRegistry:
    """Closed mapping from every :class:`ImportCategory` to its importer."""

    def __init__(self, importers: Mapping[ImportCategory, Importer]):
        missing = [c.value for c in ImportCategory if c not in importers]
        if missing:
            raise ValueError(f"Missing importer for: {', '.join(missing)}")
        self._importers = dict(importers)

    def for_category(self, category: ImportCategory) -> Importer:
        return self._importers[category]

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImporterRegistry":
        """Resolve the importer dotted paths declared in settings."""
        return cls({
            ImportCategory.AGENCY_LIST: load_importer(
                settings.agency_importer, ImportCategory.AGENCY_LIST
            ),
            ImportCategory.POLICY_LIST: load_importer(
                settings.policy_importer, ImportCategory.POLICY_LIST
            ),
        })


def load_importer(target: Optional[str], category: ImportCategory) -> Importer:
    """
    Load an importer from ``"package.module:attribute"``.

    A class is instantiated without arguments; any other attribute is used
    as is. An empty target yields an :class:`UnconfiguredImporter`.

    Raises:
        ValueError: If the target is malformed or does not implement ``import_file``
    """
    if not target:
        logger.warning(f"No importer configured for {category.value}; its files will fail")
        return UnconfiguredImporter(category)

    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Invalid importer path '{target}', expected 'package.module:attribute'")

    module = importlib.import_module(module_name)
    obj = module
    for part in attribute.split("."):
        obj = getattr(obj, part)

    importer = obj() if isinstance(obj, type) else obj
    if not isinstance(importer, Importer):
        raise ValueError(f"{target} does not provide an import_file() method")

    logger.info(f"Using {target} for {category.value} imports")
    return importer

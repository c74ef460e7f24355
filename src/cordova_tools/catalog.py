# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typing catalog: which declaration file belongs to which plugin."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    CORDOVA_TYPINGS_NAMESPACE,
    DECLARATION_SUFFIX,
    PACKAGE_JSON_FILENAME,
    PLUGIN_TYPINGS_SUBDIR,
    PLUGINS_DIR_NAME,
)
from .errors import CatalogError
from .project import read_json_object
from .references import normalize_reference

LOGGER = logging.getLogger(__name__)


class CatalogRecord(BaseModel):
    """Schema of a single entry in ``pluginTypings.json``."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    typing_file: str = Field(alias="typingFile", min_length=1)
    force_install_typings: bool = Field(default=False, alias="forceInstallTypings")


@dataclass(frozen=True, slots=True)
class TypingEntry:
    """One known declaration file and where it is installed.

    Entries carrying a ``plugin_id`` are plugin-scoped and land at
    ``cordova/plugins/<plugin_id>.d.ts``. Other entries are global and keep
    the relative path of their bundled source.
    """

    typing_file: str
    source: Path
    plugin_id: str | None = None
    force_install: bool = False

    @property
    def is_plugin_scoped(self) -> bool:
        return bool(self.plugin_id)

    @property
    def destination(self) -> str:
        """Return the destination path relative to the declarations root."""

        if self.plugin_id:
            filename = f"{self.plugin_id}{DECLARATION_SUFFIX}"
            path = PurePosixPath(CORDOVA_TYPINGS_NAMESPACE, PLUGIN_TYPINGS_SUBDIR, filename)
            return normalize_reference(path)
        return normalize_reference(self.typing_file)


@dataclass(frozen=True, slots=True)
class TypingCatalog:
    """Snapshot mapping plugin identifiers to :class:`TypingEntry` objects."""

    entries: Mapping[str, TypingEntry] = field(default_factory=dict)
    rejected: tuple[str, ...] = ()

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, plugin_id: str) -> TypingEntry | None:
        return self.entries.get(plugin_id)

    def destinations(self) -> dict[str, TypingEntry]:
        """Return catalog entries keyed by their normalised destination."""

        return {entry.destination: entry for entry in self.entries.values()}

    def forces_install(self, plugin_id: str) -> bool:
        entry = self.entries.get(plugin_id)
        return entry is not None and entry.force_install


def _parse_records(payload: Mapping[str, Any], *, context: str) -> tuple[dict[str, CatalogRecord], list[str]]:
    records: dict[str, CatalogRecord] = {}
    rejected: list[str] = []
    for plugin_id, raw in payload.items():
        try:
            records[str(plugin_id)] = CatalogRecord.model_validate(raw)
        except ValidationError as exc:
            LOGGER.warning("%s: skipping malformed entry %r: %s", context, plugin_id, exc.errors()[0]["msg"])
            rejected.append(str(plugin_id))
    return records, rejected


def load_static_catalog(
    catalog_path: Path,
    typings_source: Path,
) -> tuple[dict[str, TypingEntry], tuple[str, ...]] | None:
    """Read the bundled catalog document.

    Args:
        catalog_path: Location of ``pluginTypings.json``.
        typings_source: Directory holding the bundled declaration files.

    Returns:
        tuple | None: Entries keyed by plugin id plus the ids of rejected
        entries, or ``None`` when the catalog file does not exist.

    Raises:
        CatalogError: If the file exists but is not a JSON object.
    """

    try:
        text = catalog_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise CatalogError(f"{catalog_path}: unable to read typing catalog") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"{catalog_path}: failed to parse typing catalog") from exc
    if not isinstance(payload, Mapping):
        raise CatalogError(f"{catalog_path}: expected a JSON object")

    records, rejected = _parse_records(payload, context=str(catalog_path))
    entries = {
        plugin_id: TypingEntry(
            typing_file=record.typing_file,
            source=typings_source / record.typing_file,
            force_install=record.force_install_typings,
        )
        for plugin_id, record in records.items()
    }
    return entries, tuple(rejected)


def discover_plugin_typings(project_root: Path, plugin_ids: Iterable[str]) -> dict[str, TypingEntry]:
    """Collect declaration files that installed plugins ship themselves.

    A plugin contributes an entry when ``plugins/<id>/package.json`` has a
    string ``types`` field naming an existing file.
    """

    discovered: dict[str, TypingEntry] = {}
    for plugin_id in plugin_ids:
        plugin_dir = project_root / PLUGINS_DIR_NAME / plugin_id
        manifest = read_json_object(plugin_dir / PACKAGE_JSON_FILENAME)
        if manifest is None:
            continue
        types = manifest.get("types")
        if not isinstance(types, str) or not types:
            continue
        source = plugin_dir / types
        if not source.is_file():
            LOGGER.debug("plugin %s declares missing typing file %s", plugin_id, source)
            continue
        discovered[plugin_id] = TypingEntry(typing_file=types, source=source, plugin_id=plugin_id)
    return discovered


def load_catalog(
    project_root: Path,
    plugin_ids: Iterable[str],
    *,
    catalog_path: Path,
    typings_source: Path,
) -> TypingCatalog | None:
    """Assemble a fresh :class:`TypingCatalog` for one reconciliation pass.

    Entries discovered in plugin manifests replace static entries for the
    same plugin id.

    Returns:
        TypingCatalog | None: Merged snapshot, or ``None`` when the static
        catalog file is missing.
    """

    static = load_static_catalog(catalog_path, typings_source)
    if static is None:
        LOGGER.warning("typing catalog %s is missing; skipping typing synchronisation", catalog_path)
        return None
    entries, rejected = static
    merged = {**entries, **discover_plugin_typings(project_root, plugin_ids)}
    return TypingCatalog(entries=merged, rejected=rejected)


__all__ = [
    "CatalogRecord",
    "TypingCatalog",
    "TypingEntry",
    "discover_plugin_typings",
    "load_catalog",
    "load_static_catalog",
]

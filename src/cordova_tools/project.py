# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Inspect Cordova project metadata: root, flavour, and installed plugins."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from .constants import (
    CONFIG_XML_FILENAME,
    IONIC_PROJECT_FILENAMES,
    PACKAGE_JSON_FILENAME,
    PLUGINS_DIR_NAME,
    PLUGINS_FETCH_FILENAME,
    TSCONFIG_FILENAME,
)

LOGGER = logging.getLogger(__name__)

_IONIC_DEPENDENCIES: Final[frozenset[str]] = frozenset({"ionic", "ionic-angular", "@ionic/angular", "@ionic/core"})
_IONIC2_DEPENDENCIES: Final[frozenset[str]] = frozenset({"ionic-angular", "@ionic/angular", "@ionic/core"})


class ProjectFlavor(str, Enum):
    """Enumerate the project kinds that influence typing management."""

    PLAIN = "plain"
    IONIC1 = "ionic1"
    IONIC2_PLUS = "ionic2+"
    TYPESCRIPT = "typescript"

    @property
    def manages_own_typings(self) -> bool:
        """Return ``True`` when typing reconciliation must not touch the project."""

        return self in {ProjectFlavor.IONIC2_PLUS, ProjectFlavor.TYPESCRIPT}


def read_json_object(path: Path) -> Mapping[str, Any] | None:
    """Return the JSON object stored at ``path`` or ``None`` when unusable."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.debug("ignoring unreadable manifest %s: %s", path, exc)
        return None
    return payload if isinstance(payload, Mapping) else None


def _declared_dependencies(manifest: Mapping[str, Any] | None) -> set[str]:
    if manifest is None:
        return set()
    names: set[str] = set()
    for key in ("dependencies", "devDependencies"):
        section = manifest.get(key)
        if isinstance(section, Mapping):
            names.update(str(name) for name in section)
    return names


def find_project_root(start: Path) -> Path | None:
    """Return the nearest ancestor of ``start`` that contains ``config.xml``."""

    candidate = start.resolve()
    for directory in (candidate, *candidate.parents):
        if (directory / CONFIG_XML_FILENAME).is_file():
            return directory
    return None


def is_ionic_project(project_root: Path) -> bool:
    """Return ``True`` when the project carries any Ionic marker."""

    if any((project_root / name).exists() for name in IONIC_PROJECT_FILENAMES):
        return True
    dependencies = _declared_dependencies(read_json_object(project_root / PACKAGE_JSON_FILENAME))
    return bool(dependencies & _IONIC_DEPENDENCIES)


def is_ionic2_project(project_root: Path) -> bool:
    """Return ``True`` for Ionic 2 and later, identified by their Angular wrapper dependency."""

    dependencies = _declared_dependencies(read_json_object(project_root / PACKAGE_JSON_FILENAME))
    return bool(dependencies & _IONIC2_DEPENDENCIES)


def is_ionic1_project(project_root: Path) -> bool:
    """Return ``True`` for Ionic projects that are not Ionic 2 or later."""

    return is_ionic_project(project_root) and not is_ionic2_project(project_root)


def is_typescript_project(project_root: Path) -> bool:
    """Return ``True`` when the project root holds a ``tsconfig.json``."""

    return (project_root / TSCONFIG_FILENAME).is_file()


def classify(project_root: Path) -> ProjectFlavor:
    """Determine the :class:`ProjectFlavor` of ``project_root``.

    A TypeScript configuration wins over any Ionic flavour. Ionic projects
    with an Angular wrapper dependency are Ionic 2+; every other Ionic
    project is treated as Ionic 1.
    """

    if is_typescript_project(project_root):
        return ProjectFlavor.TYPESCRIPT
    if not is_ionic_project(project_root):
        return ProjectFlavor.PLAIN
    if is_ionic2_project(project_root):
        return ProjectFlavor.IONIC2_PLUS
    return ProjectFlavor.IONIC1


def installed_plugins(project_root: Path) -> tuple[str, ...]:
    """Return plugin identifiers recorded in ``plugins/fetch.json``."""

    fetch = read_json_object(project_root / PLUGINS_DIR_NAME / PLUGINS_FETCH_FILENAME)
    if fetch is None:
        return ()
    return tuple(str(plugin_id) for plugin_id in fetch)


__all__ = [
    "ProjectFlavor",
    "classify",
    "find_project_root",
    "installed_plugins",
    "is_ionic1_project",
    "is_ionic2_project",
    "is_ionic_project",
    "is_typescript_project",
    "read_json_object",
]

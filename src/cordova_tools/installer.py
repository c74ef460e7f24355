# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Materialise and remove declaration files under the declarations root."""

from __future__ import annotations

import json
import logging
import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .catalog import TypingCatalog, TypingEntry
from .constants import DECLARATION_SUFFIX, OWNERSHIP_FILENAME
from .errors import TypingInstallError
from .references import ReferenceSet, normalize_reference, reference_set

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Paths actually written or deleted while applying a plan."""

    installed: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.installed or self.removed)


def _destination_path(declarations_root: Path, reference: str) -> Path:
    """Return the absolute path for ``reference``, refusing to leave the root."""

    root = declarations_root.resolve()
    target = (root / normalize_reference(reference)).resolve()
    if target == root or not target.is_relative_to(root):
        raise TypingInstallError("refusing to touch path outside the declarations root", path=target)
    return target


def install_entry(entry: TypingEntry, declarations_root: Path) -> bool:
    """Copy ``entry`` into place unless its destination already exists.

    Returns:
        bool: ``True`` when a file was written.

    Raises:
        TypingInstallError: If the copy fails.
    """

    target = _destination_path(declarations_root, entry.destination)
    if target.exists():
        return False
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(entry.source, target)
    except OSError as exc:
        raise TypingInstallError(f"unable to install typing from {entry.source}", path=target) from exc
    LOGGER.debug("installed %s -> %s", entry.source, target)
    return True


def _prune_empty_parents(path: Path, root: Path) -> None:
    for directory in path.parents:
        if directory == root or not directory.is_relative_to(root):
            return
        try:
            directory.rmdir()
        except OSError:
            return


def remove_reference(reference: str, declarations_root: Path) -> bool:
    """Delete the file behind ``reference``; a missing file is not an error.

    Returns:
        bool: ``True`` when a file was deleted.

    Raises:
        TypingInstallError: If the file exists but cannot be removed.
    """

    root = declarations_root.resolve()
    target = _destination_path(root, reference)
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise TypingInstallError("unable to remove typing", path=target) from exc
    _prune_empty_parents(target, root)
    LOGGER.debug("removed %s", target)
    return True


def install_typings(entries: Iterable[TypingEntry], declarations_root: Path) -> ApplyResult:
    """Install ``entries`` that are not materialised yet."""

    installed = [entry.destination for entry in entries if install_entry(entry, declarations_root)]
    return ApplyResult(installed=tuple(installed))


def apply(
    add: Iterable[str],
    remove: Iterable[str],
    catalog: TypingCatalog,
    declarations_root: Path,
) -> ApplyResult:
    """Converge the declarations root towards a reconciliation plan.

    Additions are copied from the catalog's source files; removals delete
    the destination file. Applying the same sets twice leaves the same end
    state. A failure stops the run and leaves earlier changes in place.

    Args:
        add: References to materialise.
        remove: References to delete.
        catalog: Catalog snapshot used to locate source files.
        declarations_root: Absolute declarations directory.

    Returns:
        ApplyResult: References that were actually written or deleted.

    Raises:
        TypingInstallError: On the first copy or delete failure, or when an
            added reference has no catalog entry.
    """

    by_destination = catalog.destinations()
    installed: list[str] = []
    for reference in sorted(normalize_reference(item) for item in add):
        entry = by_destination.get(reference)
        if entry is None:
            raise TypingInstallError("no catalog entry provides this typing", path=declarations_root / reference)
        if install_entry(entry, declarations_root):
            installed.append(reference)
    removed = [
        reference
        for reference in sorted(normalize_reference(item) for item in remove)
        if remove_reference(reference, declarations_root)
    ]
    return ApplyResult(installed=tuple(installed), removed=tuple(removed))


def read_ownership(declarations_root: Path) -> ReferenceSet:
    """Return the references recorded as installed by earlier passes.

    A missing or unreadable record yields an empty set, which only makes
    removal more conservative.
    """

    path = declarations_root / OWNERSHIP_FILENAME
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return frozenset()
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning("ignoring unreadable ownership record %s: %s", path, exc)
        return frozenset()
    if not isinstance(payload, list):
        LOGGER.warning("ignoring malformed ownership record %s", path)
        return frozenset()
    return reference_set(item for item in payload if isinstance(item, str))


def write_ownership(declarations_root: Path, references: Iterable[str]) -> Path:
    """Persist the set of references this tool has installed.

    Raises:
        TypingInstallError: If the record cannot be written.
    """

    path = declarations_root / OWNERSHIP_FILENAME
    try:
        declarations_root.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(sorted(reference_set(references)), indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise TypingInstallError("unable to write ownership record", path=path) from exc
    return path


def write_reference_index(index_path: Path, declarations_root: Path) -> Path:
    """Rewrite the triple-slash reference file listing every installed typing.

    Returns:
        Path: The index file that was written.

    Raises:
        TypingInstallError: If the index cannot be written.
    """

    typings: list[str] = []
    if declarations_root.is_dir():
        typings = sorted(
            Path(os.path.relpath(path, index_path.parent)).as_posix()
            for path in declarations_root.rglob(f"*{DECLARATION_SUFFIX}")
            if path.is_file()
        )
    lines = [f'/// <reference path="{typing}"/>' for typing in typings]
    try:
        index_path.parent.mkdir(parents=True, exist_ok=True)
        index_path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    except OSError as exc:
        raise TypingInstallError("unable to write reference index", path=index_path) from exc
    return index_path


__all__ = [
    "ApplyResult",
    "apply",
    "install_entry",
    "install_typings",
    "read_ownership",
    "remove_reference",
    "write_ownership",
    "write_reference_index",
]

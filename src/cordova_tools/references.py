# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reference sets: normalised declaration paths relative to the declarations root."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath

from .constants import PLUGIN_SUBTREES

LOGGER = logging.getLogger(__name__)

ReferenceSet = frozenset[str]


def normalize_reference(path: str | PurePosixPath | Path) -> str:
    """Return ``path`` with forward-slash separators and no redundant parts."""

    text = str(path).replace("\\", "/")
    return str(PurePosixPath(text))


def reference_set(paths: Iterable[str | Path]) -> ReferenceSet:
    """Build a :data:`ReferenceSet` from arbitrary path spellings."""

    return frozenset(normalize_reference(path) for path in paths)


def _list_subtree(declarations_root: Path, subtree: str) -> list[str]:
    directory = declarations_root / subtree
    try:
        entries = list(directory.iterdir())
    except FileNotFoundError:
        return []
    return [
        normalize_reference(entry.relative_to(declarations_root).as_posix())
        for entry in entries
        if entry.is_file()
    ]


def scan_references(
    declarations_root: Path,
    subtrees: Iterable[str] = PLUGIN_SUBTREES,
) -> ReferenceSet:
    """Return the declaration files currently materialised under ``subtrees``.

    Each subtree is listed independently and the listings are merged, so
    their relative order is irrelevant.

    Args:
        declarations_root: Absolute declarations directory of the project.
        subtrees: Subdirectories (relative, forward slashes) to list.

    Returns:
        ReferenceSet: Union of all files found, relative to ``declarations_root``.
    """

    targets = tuple(subtrees)
    if not targets:
        return frozenset()
    with ThreadPoolExecutor(max_workers=len(targets)) as pool:
        listings = pool.map(lambda subtree: _list_subtree(declarations_root, subtree), targets)
        merged = frozenset(reference for listing in listings for reference in listing)
    LOGGER.debug("found %d materialised references under %s", len(merged), declarations_root)
    return merged


def existing_references(declarations_root: Path, candidates: Iterable[str]) -> ReferenceSet:
    """Return the subset of ``candidates`` that exist as files under ``declarations_root``."""

    return frozenset(
        normalize_reference(candidate) for candidate in candidates if (declarations_root / candidate).is_file()
    )


__all__ = [
    "ReferenceSet",
    "existing_references",
    "normalize_reference",
    "reference_set",
    "scan_references",
]

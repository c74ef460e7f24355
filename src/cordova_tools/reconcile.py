# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compute which declaration files to add and remove."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import TypingCatalog
from .constants import CORDOVA_CATALOG_KEY
from .references import ReferenceSet, reference_set


@dataclass(frozen=True, slots=True)
class ReconcilePlan:
    """Outcome of comparing the desired and materialised reference sets."""

    desired: ReferenceSet
    add: ReferenceSet
    remove: ReferenceSet
    unknown_plugins: tuple[str, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not self.add and not self.remove


def desired_references(
    installed_plugins: Iterable[str],
    catalog: TypingCatalog,
) -> tuple[ReferenceSet, tuple[str, ...]]:
    """Return destinations for installed, catalog-known plugins plus unknown ids."""

    destinations: list[str] = []
    unknown: list[str] = []
    for plugin_id in dict.fromkeys(installed_plugins):
        entry = catalog.get(plugin_id)
        if entry is None:
            unknown.append(plugin_id)
            continue
        destinations.append(entry.destination)
    return reference_set(destinations), tuple(unknown)


def tracked_references(catalog: TypingCatalog, owned: Iterable[str] = ()) -> ReferenceSet:
    """Return the references this tool is allowed to delete.

    These are the destinations of every catalog entry except the global
    ``cordova`` typing, plus references recorded as installed by earlier
    passes.
    """

    destinations = (
        entry.destination for plugin_id, entry in catalog.entries.items() if plugin_id != CORDOVA_CATALOG_KEY
    )
    return reference_set(destinations) | reference_set(owned)


def reconcile(
    installed_plugins: Iterable[str],
    catalog: TypingCatalog,
    on_disk: Iterable[str],
    *,
    owned: Iterable[str] = (),
    keep: Iterable[str] = (),
) -> ReconcilePlan:
    """Diff the desired references against what is on disk.

    Both sides are normalised to forward slashes before comparison. Only
    references returned by :func:`tracked_references` are ever
    scheduled for removal, so files the tool did not produce survive.

    Args:
        installed_plugins: Plugin identifiers installed in the project.
        catalog: Catalog snapshot for the current pass.
        on_disk: References found under the declarations root.
        owned: References recorded as installed by earlier passes.
        keep: References that must survive even when no installed plugin
            asks for them (global typings sharing a plugin subtree).

    Returns:
        ReconcilePlan: Add and remove sets together with unknown plugin ids.
    """

    desired, unknown = desired_references(installed_plugins, catalog)
    current = reference_set(on_disk)
    tracked = current & tracked_references(catalog, owned)
    return ReconcilePlan(
        desired=desired,
        add=desired - current,
        remove=tracked - desired - reference_set(keep),
        unknown_plugins=unknown,
    )


__all__ = ["ReconcilePlan", "desired_references", "reconcile", "tracked_references"]

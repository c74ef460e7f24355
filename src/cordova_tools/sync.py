# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reconciliation passes: classify, load the catalog, diff, and apply."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from .catalog import TypingCatalog, TypingEntry, load_catalog, load_static_catalog
from .config import ToolsConfig, load_config
from .constants import CORDOVA_CATALOG_KEY, IONIC1_TYPINGS, IONIC_TYPINGS, NODE_MODULES_DIR_NAME
from .errors import CordovaToolsError
from .installer import apply, install_typings, read_ownership, write_ownership, write_reference_index
from .project import ProjectFlavor, classify, installed_plugins
from .reconcile import desired_references, reconcile, tracked_references
from .references import existing_references, scan_references

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncReport:
    """Summary of one reconciliation pass."""

    project_root: Path
    flavor: ProjectFlavor | None = None
    skipped: bool = False
    catalog_missing: bool = False
    installed: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    unknown_plugins: tuple[str, ...] = ()
    error: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.installed or self.removed)


SyncPass = Callable[[Path, ToolsConfig | None], SyncReport]


def filter_npm_installed(project_root: Path, plugin_ids: Iterable[str], catalog: TypingCatalog) -> tuple[str, ...]:
    """Drop plugins also installed under ``node_modules``.

    Editors acquire typings for npm-installed packages on their own.
    Catalog entries flagged ``forceInstallTypings`` are kept regardless.
    """

    node_modules = project_root / NODE_MODULES_DIR_NAME
    plugins = tuple(plugin_ids)
    if not node_modules.is_dir():
        return plugins
    try:
        npm_modules = {entry.name for entry in node_modules.iterdir()}
    except OSError as exc:
        LOGGER.debug("unable to list %s: %s", node_modules, exc)
        npm_modules = set()
    return tuple(
        plugin_id for plugin_id in plugins if catalog.forces_install(plugin_id) or plugin_id not in npm_modules
    )


def synchronize(project_root: Path, config: ToolsConfig | None = None) -> SyncReport:
    """Run one reconciliation pass for ``project_root``.

    Projects that manage their own typings (Ionic 2+, TypeScript) are left
    untouched. A missing catalog turns the pass into a no-op.

    Args:
        project_root: Root directory of the Cordova project.
        config: Optional configuration; loaded from the project when omitted.

    Returns:
        SyncReport: What the pass did.

    Raises:
        CordovaToolsError: If configuration, catalog, or filesystem work fails.
    """

    settings = config or load_config(project_root)
    flavor = classify(project_root)
    report = SyncReport(project_root=project_root, flavor=flavor)
    if flavor.manages_own_typings:
        LOGGER.debug("skipping typing synchronisation for %s project", flavor.value)
        return replace(report, skipped=True)

    plugins = installed_plugins(project_root)
    catalog = load_catalog(
        project_root,
        plugins,
        catalog_path=settings.catalog_path,
        typings_source=settings.typings_source,
    )
    if catalog is None:
        return replace(report, catalog_missing=True)
    if settings.skip_npm_installed:
        plugins = filter_npm_installed(project_root, plugins, catalog)

    declarations_root = settings.declarations_root(project_root)
    owned = read_ownership(declarations_root)
    desired, _ = desired_references(plugins, catalog)
    candidates = desired | tracked_references(catalog, owned)
    on_disk = scan_references(declarations_root) | existing_references(declarations_root, candidates)

    plan = reconcile(plugins, catalog, on_disk, owned=owned, keep=global_typing_paths(flavor))
    for plugin_id in plan.unknown_plugins:
        LOGGER.info("no typing known for plugin %s", plugin_id)
    result = apply(plan.add, plan.remove, catalog, declarations_root)
    if result.changed:
        write_ownership(declarations_root, ((owned & on_disk) | set(result.installed)) - set(result.removed))
        if settings.write_reference_file:
            write_reference_index(settings.reference_path(project_root), declarations_root)
    return replace(
        report,
        installed=result.installed,
        removed=result.removed,
        unknown_plugins=plan.unknown_plugins,
    )


def global_typing_paths(flavor: ProjectFlavor) -> tuple[str, ...]:
    """Return bundled non-catalog typings installed for ``flavor`` on activation."""

    if flavor is ProjectFlavor.IONIC1:
        return IONIC_TYPINGS + IONIC1_TYPINGS
    return ()


def global_typings(flavor: ProjectFlavor, config: ToolsConfig) -> list[TypingEntry] | None:
    """Return the non-plugin typings a project should always carry.

    Returns ``None`` when the static catalog is missing.
    """

    static = load_static_catalog(config.catalog_path, config.typings_source)
    if static is None:
        return None
    entries, _ = static
    typings: list[TypingEntry] = []
    cordova = entries.get(CORDOVA_CATALOG_KEY)
    if cordova is not None:
        typings.append(cordova)
    typings.extend(
        TypingEntry(typing_file=relative, source=config.typings_source / relative)
        for relative in global_typing_paths(flavor)
    )
    return typings


def activate(project_root: Path, config: ToolsConfig | None = None) -> SyncReport:
    """Install global typings, then run a first reconciliation pass."""

    settings = config or load_config(project_root)
    flavor = classify(project_root)
    if flavor.manages_own_typings:
        return SyncReport(project_root=project_root, flavor=flavor, skipped=True)
    typings = global_typings(flavor, settings)
    if typings is None:
        LOGGER.warning("typing catalog %s is missing; skipping typing synchronisation", settings.catalog_path)
        return SyncReport(project_root=project_root, flavor=flavor, catalog_missing=True)
    declarations_root = settings.declarations_root(project_root)
    installed_globals = install_typings(typings, declarations_root).installed
    report = synchronize(project_root, settings)
    if installed_globals and not report.changed and settings.write_reference_file:
        write_reference_index(settings.reference_path(project_root), declarations_root)
    return replace(report, installed=installed_globals + report.installed)


class TypingSynchronizer:
    """Serialise reconciliation passes for one project.

    Triggers that arrive while a pass is running are coalesced into a single
    follow-up pass executed by the thread that is already working.
    """

    def __init__(
        self,
        project_root: Path,
        config: ToolsConfig | None = None,
        *,
        sync_pass: SyncPass = synchronize,
    ) -> None:
        self.project_root = project_root
        self._config = config
        self._sync_pass = sync_pass
        self._guard = threading.Lock()
        self._running = False
        self._pending = False

    def _run_guarded(self, sync_pass: SyncPass) -> SyncReport:
        try:
            return sync_pass(self.project_root, self._config)
        except (CordovaToolsError, OSError) as exc:
            LOGGER.exception("typing synchronisation failed for %s", self.project_root)
            return SyncReport(project_root=self.project_root, error=str(exc))

    def _serialised(self, first_pass: SyncPass) -> SyncReport | None:
        with self._guard:
            if self._running:
                self._pending = True
                return None
            self._running = True
        sync_pass = first_pass
        try:
            while True:
                with self._guard:
                    self._pending = False
                report = self._run_guarded(sync_pass)
                sync_pass = self._sync_pass
                with self._guard:
                    if not self._pending:
                        self._running = False
                        return report
        except BaseException:
            with self._guard:
                self._running = False
            raise

    def activate(self) -> SyncReport | None:
        """Handle extension activation: install global typings and sync."""

        return self._serialised(activate)

    def request_sync(self) -> SyncReport | None:
        """Handle a "plugins may have changed" trigger.

        Returns:
            SyncReport | None: Report of the last pass run by this call, or
            ``None`` when the request was folded into a pass already running.
        """

        return self._serialised(self._sync_pass)


__all__ = [
    "SyncReport",
    "TypingSynchronizer",
    "activate",
    "filter_npm_installed",
    "global_typing_paths",
    "global_typings",
    "synchronize",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commands that inspect the project and synchronise plugin typings."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_config
from ..errors import CordovaToolsError
from ..logging import fail, info, ok, section, warn
from ..project import classify, installed_plugins
from ..sync import SyncReport, activate, synchronize
from .options import EMOJI_OPTION, ROOT_OPTION, resolve_project_root

ACTIVATE_OPTION = Annotated[
    bool,
    typer.Option("--activate", help="Also install global typings (Cordova, Ionic) before syncing."),
]


def _render_report(report: SyncReport, *, use_emoji: bool) -> None:
    section(f"Typings: {report.project_root.name}", use_emoji=use_emoji)
    if report.skipped:
        flavor = report.flavor.value if report.flavor else "unknown"
        info(f"Skipping typings: {flavor} projects manage their own.", use_emoji=use_emoji)
        return
    if report.catalog_missing:
        warn("Typing catalog is missing; nothing was synchronised.", use_emoji=use_emoji)
        return
    for reference in report.installed:
        info(f"Added {reference}", use_emoji=use_emoji)
    for reference in report.removed:
        info(f"Removed {reference}", use_emoji=use_emoji)
    for plugin_id in report.unknown_plugins:
        warn(f"No typing known for plugin {plugin_id}", use_emoji=use_emoji)
    ok("Typings are up to date.", use_emoji=use_emoji)


def sync_command(
    root: ROOT_OPTION = Path("."),
    activate_first: ACTIVATE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Bring plugin type declarations in line with the installed plugins."""

    project_root = resolve_project_root(root, use_emoji=emoji)
    try:
        config = load_config(project_root)
        report = activate(project_root, config) if activate_first else synchronize(project_root, config)
    except (CordovaToolsError, OSError) as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    _render_report(report, use_emoji=emoji)


def classify_command(
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Print the detected project flavour."""

    project_root = resolve_project_root(root, use_emoji=emoji)
    flavor = classify(project_root)
    typer.echo(flavor.value)
    if flavor.manages_own_typings:
        info("Plugin typings are not managed for this project.", use_emoji=emoji)


def plugins_command(
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """List installed plugin identifiers, one per line."""

    project_root = resolve_project_root(root, use_emoji=emoji)
    for plugin_id in installed_plugins(project_root):
        typer.echo(plugin_id)


def register(app: typer.Typer) -> None:
    """Register typing commands with ``app``."""

    app.command("sync")(sync_command)
    app.command("classify")(classify_command)
    app.command("plugins")(plugins_command)


__all__ = ["classify_command", "plugins_command", "register", "sync_command"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invoke the Cordova or Ionic command-line tool for a project."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from ..constants import CORDOVA_CLI, IONIC_CLI
from ..project import is_ionic_project
from .runner import CapturedOutput, RunningCommand, run_command, start_command


class CordovaSubcommand(str, Enum):
    """Subcommands exposed to users of the tooling."""

    PREPARE = "prepare"
    BUILD = "build"
    RUN = "run"


def cli_name(project_root: Path, *, force_ionic: bool = False) -> str:
    """Return ``ionic`` for Ionic projects (or when forced), else ``cordova``."""

    return IONIC_CLI if force_ionic or is_ionic_project(project_root) else CORDOVA_CLI


def start_cordova_command(
    args: Sequence[str],
    project_root: Path,
    *,
    force_ionic: bool = False,
) -> RunningCommand:
    """Launch the project's CLI with ``args`` and return the live handle."""

    return start_command(cli_name(project_root, force_ionic=force_ionic), args, cwd=project_root, shim=True)


def run_cordova_command(
    subcommand: CordovaSubcommand,
    project_root: Path,
    *,
    extra_args: Sequence[str] = (),
    force_ionic: bool = False,
) -> CapturedOutput:
    """Run ``subcommand`` to completion in ``project_root``.

    Raises:
        ProcessSpawnError: If the CLI is not installed.
        ProcessExitError: If the CLI exits with a non-zero status.
    """

    return run_command(
        cli_name(project_root, force_ionic=force_ionic),
        [subcommand.value, *extra_args],
        cwd=project_root,
        shim=True,
    )


__all__ = ["CordovaSubcommand", "cli_name", "run_cordova_command", "start_cordova_command"]

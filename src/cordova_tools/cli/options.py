# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Typer option declarations and project root resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..logging import fail
from ..project import find_project_root

ROOT_OPTION = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Cordova project root (the directory holding config.xml).",
        show_default=False,
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output."),
]
IONIC_OPTION = Annotated[
    bool,
    typer.Option("--ionic", help="Use the Ionic CLI even if the project does not look like Ionic."),
]
EXTRA_ARGS = Annotated[
    list[str] | None,
    typer.Argument(help="Additional arguments forwarded to the CLI verbatim.", show_default=False),
]


def resolve_project_root(root: Path, *, use_emoji: bool) -> Path:
    """Return the Cordova project root for ``root`` or exit with status 1.

    The requested directory must itself be the project root; running from a
    subdirectory is rejected so typings never land in the wrong place.
    """

    requested = root.resolve()
    project_root = find_project_root(requested)
    if project_root is None:
        fail(f"{requested} is not inside a Cordova project (no config.xml found).", use_emoji=use_emoji)
        raise typer.Exit(code=1)
    if project_root != requested:
        fail(
            f"{requested} is not the Cordova project root; run from {project_root} instead.",
            use_emoji=use_emoji,
        )
        raise typer.Exit(code=1)
    return project_root


__all__ = ["EMOJI_OPTION", "EXTRA_ARGS", "IONIC_OPTION", "ROOT_OPTION", "resolve_project_root"]

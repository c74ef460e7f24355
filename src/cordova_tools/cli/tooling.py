# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commands that shell out to the Cordova or Ionic CLI."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer

from ..errors import ProcessExitError, ProcessSpawnError
from ..logging import fail, info, ok
from ..process.cordova import CordovaSubcommand, cli_name, run_cordova_command
from .options import EMOJI_OPTION, EXTRA_ARGS, IONIC_OPTION, ROOT_OPTION, resolve_project_root

_PASSTHROUGH_SETTINGS = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def execute(
    subcommand: CordovaSubcommand,
    root: Path,
    extra_args: list[str] | None,
    *,
    force_ionic: bool,
    use_emoji: bool,
) -> None:
    """Run ``subcommand`` and report its outcome.

    Both captured streams of a failing command are echoed verbatim and the
    command's own exit status is propagated.
    """

    project_root = resolve_project_root(root, use_emoji=use_emoji)
    tool = cli_name(project_root, force_ionic=force_ionic)
    info(f"Running {tool} {subcommand.value} in {project_root}", use_emoji=use_emoji)
    try:
        captured = run_cordova_command(
            subcommand,
            project_root,
            extra_args=extra_args or (),
            force_ionic=force_ionic,
        )
    except ProcessSpawnError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=1) from exc
    except ProcessExitError as exc:
        fail(str(exc), use_emoji=use_emoji)
        if exc.stderr:
            typer.echo(exc.stderr, err=True, nl=False)
        if exc.stdout:
            typer.echo(exc.stdout, nl=False)
        raise typer.Exit(code=exc.returncode) from exc
    if captured.stdout:
        typer.echo(captured.stdout, nl=False)
    ok(f"{tool} {subcommand.value} completed.", use_emoji=use_emoji)


def _make_command(subcommand: CordovaSubcommand) -> Callable[..., None]:
    def command(
        extra_args: EXTRA_ARGS = None,
        root: ROOT_OPTION = Path("."),
        ionic: IONIC_OPTION = False,
        emoji: EMOJI_OPTION = True,
    ) -> None:
        execute(subcommand, root, extra_args, force_ionic=ionic, use_emoji=emoji)

    command.__doc__ = f"Run `{subcommand.value}` with the project's Cordova or Ionic CLI."
    command.__name__ = f"{subcommand.value}_command"
    return command


def register(app: typer.Typer) -> None:
    """Register ``prepare``, ``build`` and ``run`` with ``app``."""

    for subcommand in CordovaSubcommand:
        app.command(subcommand.value, context_settings=_PASSTHROUGH_SETTINGS)(_make_command(subcommand))


__all__ = ["execute", "register"]

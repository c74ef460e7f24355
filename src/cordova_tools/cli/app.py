# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands together."""

from __future__ import annotations

import typer

from .tooling import register as register_tooling
from .typings import register as register_typings

app = typer.Typer(
    help="Typing synchronisation and CLI helpers for Cordova projects.",
    add_completion=False,
    no_args_is_help=True,
)
register_typings(app)
register_tooling(app)

__all__ = ["app"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The Rich console behind cordova-tools status lines."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class OutputPreset:
    """How CLI status lines are decorated."""

    color: bool
    emoji: bool

    @classmethod
    def for_cli(cls, *, use_emoji: bool, use_color: bool | None = None) -> OutputPreset:
        """Build the preset for a command, following the terminal unless colour is forced."""

        return cls(color=detect_tty() if use_color is None else use_color, emoji=use_emoji)


@lru_cache(maxsize=4)
def cli_console(preset: OutputPreset) -> Console:
    """Return the shared console for ``preset``.

    Lines are never wrapped, so project paths stay intact, and nothing is
    auto-highlighted because messages carry their own style.
    """

    return Console(
        color_system="auto" if preset.color else None,
        force_terminal=True if preset.color else None,
        no_color=not preset.color,
        emoji=preset.emoji,
        highlight=False,
        soft_wrap=True,
    )


__all__ = ["OutputPreset", "cli_console", "detect_tty"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launching, capturing, and tearing down external tool processes."""

from __future__ import annotations

from .runner import CapturedOutput, RunningCommand, executable_name, run_command, start_command
from .terminate import (
    PosixTreeTerminator,
    TreeTerminator,
    WindowsTreeTerminator,
    default_terminator,
    terminate_process,
)

__all__ = [
    "CapturedOutput",
    "PosixTreeTerminator",
    "RunningCommand",
    "TreeTerminator",
    "WindowsTreeTerminator",
    "default_terminator",
    "executable_name",
    "run_command",
    "start_command",
    "terminate_process",
]

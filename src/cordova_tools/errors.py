# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by cordova-tools."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class CordovaToolsError(RuntimeError):
    """Base class for every error raised by the package."""


class ConfigError(CordovaToolsError):
    """Raised when ``cordova-tools.toml`` cannot be parsed or validated."""


class CatalogError(CordovaToolsError):
    """Raised when the static typing catalog exists but is unreadable."""


class TypingInstallError(CordovaToolsError):
    """Raised when a declaration file cannot be copied or deleted."""

    def __init__(self, message: str, *, path: Path) -> None:
        """Record the path involved in the failed filesystem operation.

        Args:
            message: Human-readable failure description.
            path: Filesystem path the installer was operating on.
        """

        super().__init__(f"{message}: {path}")
        self.path = path


class ProcessError(CordovaToolsError):
    """Base class for failures of external command invocations."""

    def __init__(self, message: str, *, command: Sequence[str]) -> None:
        super().__init__(message)
        self.command = tuple(command)


class ProcessSpawnError(ProcessError):
    """Raised when an external command could not be started at all."""


class ProcessExitError(ProcessError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        """Initialise the error with captured subprocess output.

        Args:
            command: Command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """

        super().__init__(
            f"'{' '.join(command)}' failed with exit code {returncode}",
            command=command,
        )
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class TerminationError(CordovaToolsError):
    """Raised when the operating system refuses to terminate a process tree."""

    def __init__(self, message: str, *, pid: int) -> None:
        super().__init__(f"{message} (pid {pid})")
        self.pid = pid


__all__ = [
    "CatalogError",
    "ConfigError",
    "CordovaToolsError",
    "ProcessError",
    "ProcessExitError",
    "ProcessSpawnError",
    "TerminationError",
    "TypingInstallError",
]

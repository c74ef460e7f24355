# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Spawn external commands and capture their output."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists and
# never pass through a shell.
import subprocess  # nosec B404
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..constants import WINDOWS_SHIM_SUFFIX
from ..errors import ProcessExitError, ProcessSpawnError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CapturedOutput:
    """Exit status and both output streams of a finished command."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def executable_name(name: str, *, platform: str | None = None) -> str:
    """Return ``name`` with the host's shim suffix appended where required.

    Node-based command-line tools install ``.cmd`` shims on Windows.
    """

    host = sys.platform if platform is None else platform
    if host == "win32" and not Path(name).suffix:
        return f"{name}{WINDOWS_SHIM_SUFFIX}"
    return name


def _resolve_executable(name: str, command: Sequence[str], *, shim: bool) -> str:
    candidate = Path(name)
    if candidate.is_absolute():
        return str(candidate)
    resolved = shutil.which(executable_name(name) if shim else name)
    if resolved is None:
        raise ProcessSpawnError(f"Executable '{name}' was not found on PATH", command=command)
    return resolved


class RunningCommand:
    """Handle to a launched command whose output is still being captured."""

    def __init__(self, process: subprocess.Popen[str], command: Sequence[str]) -> None:
        self.process = process
        self.command = tuple(command)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.poll()

    def wait(self, *, check: bool = True) -> CapturedOutput:
        """Drain both pipes until the process exits.

        Args:
            check: Raise :class:`ProcessExitError` for a non-zero exit status.

        Returns:
            CapturedOutput: Exit status together with both output streams.

        Raises:
            ProcessExitError: When ``check`` is true and the exit status is non-zero.
        """

        stdout, stderr = self.process.communicate()
        captured = CapturedOutput(
            command=self.command,
            returncode=self.process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
        if check and not captured.succeeded:
            raise ProcessExitError(self.command, captured.returncode, captured.stdout, captured.stderr)
        return captured


def start_command(
    command: str,
    args: Sequence[str] = (),
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    shim: bool = False,
) -> RunningCommand:
    """Launch ``command`` with ``args`` and return a live handle.

    Args:
        command: Executable name or absolute path.
        args: Arguments passed verbatim.
        cwd: Working directory for the child.
        env: Optional replacement environment.
        shim: Resolve ``command`` as a platform shim (``.cmd`` on Windows).

    Raises:
        ProcessSpawnError: If the executable cannot be found or started.
    """

    argv = [command, *args]
    resolved = [_resolve_executable(command, argv, shim=shim), *args]
    LOGGER.debug("starting %s in %s", " ".join(argv), cwd or Path.cwd())
    try:
        process = subprocess.Popen(  # nosec B603 - argument list, no shell
            resolved,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        raise ProcessSpawnError(f"unable to start '{command}': {exc}", command=argv) from exc
    return RunningCommand(process, argv)


def run_command(
    command: str,
    args: Sequence[str] = (),
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    shim: bool = False,
) -> CapturedOutput:
    """Run ``command`` to completion, capturing stdout and stderr.

    No timeout applies; a hung command blocks until it is terminated.

    Raises:
        ProcessSpawnError: If the command could not be started.
        ProcessExitError: When ``check`` is true and the command exits non-zero.
    """

    return start_command(command, args, cwd=cwd, env=env, shim=shim).wait(check=check)


__all__ = ["CapturedOutput", "RunningCommand", "executable_name", "run_command", "start_command"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Forcefully terminate a launched command together with its descendants."""

from __future__ import annotations

import logging
import os
import signal
import subprocess  # nosec B404
from typing import Final, Protocol

import psutil

from ..errors import ProcessSpawnError, TerminationError
from .runner import RunningCommand, run_command

LOGGER = logging.getLogger(__name__)

DEFAULT_SIGNAL: Final[int] = getattr(signal, "SIGKILL", signal.SIGTERM)
_DESCENDANT_WAIT_SECONDS: Final[float] = 3.0
_TASKKILL_NOT_FOUND: Final[int] = 128


class TreeTerminator(Protocol):
    """Capability that kills a process and every process it spawned."""

    def terminate_tree(self, pid: int, sig: int = DEFAULT_SIGNAL) -> None:
        """Kill ``pid`` and its descendants.

        An already-exited ``pid`` is not an error.

        Raises:
            TerminationError: If the operating system refuses the request.
        """
        ...


class PosixTreeTerminator:
    """Enumerate descendants with :mod:`psutil` and signal each of them."""

    def terminate_tree(self, pid: int, sig: int = DEFAULT_SIGNAL) -> None:
        try:
            root = psutil.Process(pid)
            descendants = root.children(recursive=True)
        except psutil.NoSuchProcess:
            LOGGER.debug("process %d already exited", pid)
            return
        except psutil.AccessDenied as exc:
            raise TerminationError("not permitted to inspect process tree", pid=pid) from exc

        # Signal the root first so it cannot spawn replacements for killed children.
        denied: list[int] = []
        for process in (root, *descendants):
            try:
                process.send_signal(sig)
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                denied.append(process.pid)

        signalled = [process for process in descendants if process.pid not in denied]
        _, alive = psutil.wait_procs(signalled, timeout=_DESCENDANT_WAIT_SECONDS)
        for process in alive:
            LOGGER.warning("descendant %d of %d survived termination", process.pid, pid)
        if denied:
            pids = ", ".join(str(item) for item in denied)
            raise TerminationError(f"not permitted to signal process(es) {pids}", pid=pid)


class WindowsTreeTerminator:
    """Delegate to ``taskkill /T /F`` which kills the whole tree in one call."""

    def terminate_tree(self, pid: int, sig: int = DEFAULT_SIGNAL) -> None:
        del sig
        try:
            result = run_command("taskkill", ["/PID", str(pid), "/T", "/F"], check=False)
        except ProcessSpawnError as exc:
            raise TerminationError("unable to launch taskkill", pid=pid) from exc
        if result.returncode in (0, _TASKKILL_NOT_FOUND):
            return
        raise TerminationError(f"taskkill failed: {result.stderr.strip() or result.stdout.strip()}", pid=pid)


def default_terminator() -> TreeTerminator:
    """Return the terminator implementation for the host operating system."""

    if os.name == "nt":
        return WindowsTreeTerminator()
    return PosixTreeTerminator()


def terminate_process(
    handle: RunningCommand | subprocess.Popen[str],
    *,
    terminator: TreeTerminator | None = None,
    sig: int = DEFAULT_SIGNAL,
) -> None:
    """Kill the process behind ``handle`` and all of its descendants.

    Termination is immediate; there is no graceful phase. Terminating a
    process that already exited succeeds without doing anything.

    Args:
        handle: Running command or raw :class:`subprocess.Popen` handle.
        terminator: Tree terminator; defaults to the host implementation.
        sig: Signal delivered on POSIX hosts.

    Raises:
        TerminationError: If the operating system refuses the request.
    """

    process = handle.process if isinstance(handle, RunningCommand) else handle
    if process.poll() is not None:
        return
    (terminator or default_terminator()).terminate_tree(process.pid, sig)
    LOGGER.debug("terminated process tree rooted at %d", process.pid)


__all__ = [
    "DEFAULT_SIGNAL",
    "PosixTreeTerminator",
    "TreeTerminator",
    "WindowsTreeTerminator",
    "default_terminator",
    "terminate_process",
]

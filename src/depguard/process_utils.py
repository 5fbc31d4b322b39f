# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of npm tooling."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

_LOGGER = logging.getLogger(__name__)


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def executable_available(name: str) -> bool:
    """Return ``True`` when ``name`` resolves to an executable on ``PATH``."""

    return shutil.which(name) is not None


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    capture_output: bool = False,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute ``args`` after resolving the executable on ``PATH``.

    Args:
        args: Command and arguments; the first element is looked up on ``PATH``.
        cwd: Working directory for the child process.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout/stderr instead of inheriting the terminal.
        timeout: Optional timeout in seconds; expiry is reported as status 124.

    Returns:
        CompletedProcess[str]: Result of the command.

    Raises:
        FileNotFoundError: When the executable cannot be located.
        SubprocessExecutionError: When ``check`` is true and the command fails.
    """

    normalized = _normalize_args(args)
    _LOGGER.debug("running %s (cwd=%s)", " ".join(args), cwd)

    try:
        completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            capture_output=capture_output,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout.decode(errors="ignore") if isinstance(exc.stdout, bytes) else exc.stdout
        timeout_msg = f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=124,
            stdout=stdout or "",
            stderr=timeout_msg,
        )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


CommandRunner = Callable[[Sequence[str], Path | None], "_CompletedProcess[str]"]

# Shell convention for "command not found".
EXIT_COMMAND_NOT_FOUND = 127


def _run_tolerant(args: Sequence[str], cwd: Path | None, *, capture_output: bool) -> _CompletedProcess[str]:
    try:
        return run_command(args, cwd=cwd, check=False, capture_output=capture_output)
    except FileNotFoundError as exc:
        _LOGGER.debug("%s", exc)
        return subprocess.CompletedProcess(
            args=list(args),
            returncode=EXIT_COMMAND_NOT_FOUND,
            stdout="",
            stderr=str(exc),
        )


def default_runner(args: Sequence[str], cwd: Path | None) -> _CompletedProcess[str]:
    """Run ``args`` with inherited stdio; a missing executable reports status 127."""

    return _run_tolerant(args, cwd, capture_output=False)


def capturing_runner(args: Sequence[str], cwd: Path | None) -> _CompletedProcess[str]:
    """Like :func:`default_runner` but capture stdout and stderr."""

    return _run_tolerant(args, cwd, capture_output=True)


__all__ = [
    "EXIT_COMMAND_NOT_FOUND",
    "CommandRunner",
    "SubprocessExecutionError",
    "capturing_runner",
    "default_runner",
    "executable_available",
    "run_command",
]

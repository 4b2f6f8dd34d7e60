# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists built by
# the pipeline stages and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess  # nosec B404

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str], Path | None, bool], CompletedProcess[str]]
"""Narrow process collaborator: ``runner(args, cwd, capture) -> CompletedProcess``.

Stages only look at ``returncode`` and, when ``capture`` is true, ``stdout``.
"""


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
) -> CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Output is streamed to the terminal unless ``capture_output`` is set, so the
    operator sees the native tool's own diagnostics. There is no timeout; the
    call blocks until the child exits.
    """

    normalized = _normalize_args(args)
    LOGGER.debug("running %s (cwd=%s)", " ".join(normalized), cwd)
    # Bandit: commands are argument lists; no shell expansion takes place.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


def default_runner(args: Sequence[str], cwd: Path | None, capture: bool = False) -> CompletedProcess[str]:
    """Return the completed process for *args* without raising on failure."""

    return run_command(args, cwd=cwd, check=False, capture_output=capture)


def run_checked(
    runner: CommandRunner,
    args: Sequence[str],
    cwd: Path | None,
    *,
    capture: bool = False,
) -> CompletedProcess[str]:
    """Invoke *runner* and raise when the command exits with a non-zero status.

    Raises:
        SubprocessExecutionError: If the command exits with a non-zero status.
        FileNotFoundError: If the executable cannot be located on ``PATH``.
    """

    completed = runner(args, cwd, capture)
    if completed.returncode != 0:
        raise SubprocessExecutionError(
            args,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


def format_command(args: Sequence[str]) -> str:
    """Render *args* for log output."""

    return " ".join(str(arg) for arg in args)


__all__ = [
    "CommandRunner",
    "SubprocessExecutionError",
    "default_runner",
    "format_command",
    "run_checked",
    "run_command",
]

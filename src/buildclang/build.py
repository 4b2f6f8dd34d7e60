# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Clean configure-and-compile of the LLVM tree with CMake and Ninja."""

from __future__ import annotations

import re
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import BuildConfig
from .constants import DISABLED_FEATURES
from .errors import BuildError
from .logging import info, ok, section
from .process_utils import CommandRunner, SubprocessExecutionError, default_runner, run_checked

Clock = Callable[[], float]

_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:https?|git)://[^\s)]+")
_OPEN_PAREN_SPACE: Final[re.Pattern[str]] = re.compile(r"\(\s+")
_SPACE_CLOSE_PAREN: Final[re.Pattern[str]] = re.compile(r"\s+\)")
_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    """Result of the compile step.

    ``elapsed`` counts seconds since the pipeline started. ``compiler_version``
    holds the cleaned ``clang --version`` banner when the probe succeeded.
    """

    success: bool
    elapsed: float
    compiler_version: str | None = None

    @property
    def elapsed_text(self) -> str:
        """Return the elapsed time in words."""

        return format_duration(self.elapsed)


def format_duration(seconds: float) -> str:
    """Return *seconds* as ``"1 hour, 2 minutes and 3 seconds"``.

    Zero-valued leading units are omitted; seconds are always reported.
    """

    total = max(0, int(round(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    parts: list[str] = []
    for value, unit in ((hours, "hour"), (minutes, "minute")):
        if value:
            parts.append(f"{value} {unit}{'' if value == 1 else 's'}")
    parts.append(f"{secs} second{'' if secs == 1 else 's'}")
    if len(parts) == 1:
        return parts[0]
    return f"{', '.join(parts[:-1])} and {parts[-1]}"


def clean_version_string(raw: str) -> str:
    """Return the first line of a ``--version`` banner without URLs or extra spaces.

    ``clang version 9.0.0 (https://github.com/llvm/llvm-project abc123)``
    becomes ``clang version 9.0.0 (abc123)``.
    """

    lines = raw.strip().splitlines()
    if not lines:
        return ""
    line = _URL_PATTERN.sub("", lines[0])
    line = _OPEN_PAREN_SPACE.sub("(", line)
    line = _SPACE_CLOSE_PAREN.sub(")", line)
    line = line.replace("()", "")
    return _WHITESPACE.sub(" ", line).strip()


def cmake_arguments(config: BuildConfig) -> list[str]:
    """Return the full ``cmake`` command used to configure the build."""

    host = config.host
    cflags = config.settings.cflags
    args = [
        "cmake",
        "-G",
        "Ninja",
        "-Wno-dev",
        "-DCMAKE_BUILD_TYPE=Release",
        f"-DCMAKE_C_COMPILER={host.cc}",
        f"-DCMAKE_C_FLAGS={cflags}",
        f"-DCMAKE_CXX_COMPILER={host.cxx}",
        f"-DCMAKE_CXX_FLAGS={cflags}",
        f"-DCMAKE_INSTALL_PREFIX={config.install_dir}",
        f"-DLLVM_BINUTILS_INCDIR={config.binutils_dir / 'include'}",
        f"-DLLVM_ENABLE_PROJECTS={';'.join(config.settings.projects)}",
        f"-DLLVM_TARGETS_TO_BUILD={config.targets_arg}",
    ]
    if host.linker:
        args.append(f"-DLLVM_USE_LINKER={host.linker}")
    args.extend(f"-D{feature}=OFF" for feature in DISABLED_FEATURES)
    args.append(str(config.llvm_dir / "llvm"))
    return args


def reset_build_dir(build_dir: Path) -> None:
    """Remove *build_dir* entirely and recreate it empty."""

    if build_dir.exists():
        shutil.rmtree(build_dir)
    build_dir.mkdir(parents=True)


class BuildRunner:
    """Produce a fresh build of the synced LLVM tree."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        started_at: float,
        runner: CommandRunner | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._config = config
        self._started_at = started_at
        self._runner = runner or default_runner
        self._clock = clock
        self._use_emoji = config.use_emoji

    def run(self) -> BuildOutcome:
        """Clean, configure and compile, returning the successful outcome.

        Raises:
            BuildError: If the build directory cannot be reset, configuring
                fails or the compile exits non-zero.
        """

        build_dir = self._config.build_dir
        section("Building LLVM")
        info(f"Cleaning {build_dir}", use_emoji=self._use_emoji)
        try:
            reset_build_dir(build_dir)
        except OSError as exc:
            raise BuildError(f"Unable to reset build directory {build_dir}: {exc}") from exc
        self.configure()
        outcome = self.compile()
        if not outcome.success:
            raise BuildError("Build failed", elapsed=outcome.elapsed_text)
        self.report(outcome)
        return outcome

    def configure(self) -> None:
        """Run the CMake generator in the build directory.

        Raises:
            BuildError: If ``cmake`` exits with a non-zero status.
        """

        info(
            f"Configuring for {self._config.targets_arg} with {self._config.host.family}",
            use_emoji=self._use_emoji,
        )
        try:
            run_checked(self._runner, cmake_arguments(self._config), self._config.build_dir)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise BuildError(f"CMake configuration failed: {exc}") from exc

    def compile(self) -> BuildOutcome:
        """Build every configured target and classify the result."""

        try:
            completed = self._runner(("ninja",), self._config.build_dir, False)
        except FileNotFoundError as exc:
            raise BuildError(f"Unable to start the build: {exc}") from exc
        elapsed = self._clock() - self._started_at
        if completed.returncode != 0:
            return BuildOutcome(success=False, elapsed=elapsed)
        return BuildOutcome(success=True, elapsed=elapsed, compiler_version=self.probe_version())

    def probe_version(self) -> str | None:
        """Return the cleaned version banner of the freshly built ``clang``."""

        clang = self._config.build_dir / "bin" / "clang"
        try:
            completed = run_checked(self._runner, (str(clang), "--version"), self._config.build_dir, capture=True)
        except (SubprocessExecutionError, FileNotFoundError):
            return None
        return clean_version_string(completed.stdout or "") or None

    def report(self, outcome: BuildOutcome) -> None:
        """Print the elapsed time and, when known, the new compiler version.

        Args:
            outcome: Successful outcome returned by :meth:`compile`.
        """

        ok(f"Build finished in {outcome.elapsed_text}", use_emoji=self._use_emoji)
        if outcome.compiler_version:
            info(f"Compiler: {outcome.compiler_version}", use_emoji=self._use_emoji)


__all__ = [
    "BuildOutcome",
    "BuildRunner",
    "clean_version_string",
    "cmake_arguments",
    "format_duration",
    "reset_build_dir",
]

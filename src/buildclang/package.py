# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Optional archiving of an installed toolchain."""

from __future__ import annotations

import shutil
from pathlib import Path

from .config import BuildConfig
from .constants import COMPRESSORS
from .errors import PackagingError
from .logging import info, ok, section
from .process_utils import CommandRunner, SubprocessExecutionError, default_runner, run_checked
from .sync import RevisionRecord


def resolve_compressor(kind: str) -> str:
    """Return the external compressor used for *kind*.

    Raises:
        PackagingError: If *kind* is not a supported compression kind.
    """

    try:
        return COMPRESSORS[kind]
    except KeyError as exc:
        valid = ", ".join(sorted(COMPRESSORS))
        raise PackagingError(f"Invalid compression kind '{kind}'. Valid values: {valid}") from exc


def package_filename(name: str, version: int, revision: RevisionRecord, kind: str) -> str:
    """Return ``<name>-<version>.0-<12-char revision>.tar.<kind>``."""

    return f"{name}-{version}.0-{revision.short}.tar.{kind}"


class Packager:
    """Archive the installed tree next to the other build artifacts."""

    def __init__(self, config: BuildConfig, *, runner: CommandRunner | None = None) -> None:
        self._config = config
        self._runner = runner or default_runner
        self._use_emoji = config.use_emoji

    def run(self, revision: RevisionRecord | None) -> Path | None:
        """Create the archive, returning its final path or ``None`` when disabled.

        Raises:
            PackagingError: If the compression kind is unknown, no revision is
                available or ``tar`` fails.
        """

        kind = self._config.compression
        if not kind:
            return None
        section("Packaging toolchain")
        compressor = resolve_compressor(kind)
        if revision is None:
            raise PackagingError("No LLVM revision is known for this run; cannot name the package")

        install_dir = self._config.install_dir
        filename = package_filename(self._config.settings.package_name, self._config.version, revision, kind)
        workdir = install_dir.parent
        info(f"Creating {filename} with {compressor}", use_emoji=self._use_emoji)
        args = ("tar", f"--use-compress-program={compressor}", "-cf", filename, install_dir.name)
        try:
            run_checked(self._runner, args, workdir)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise PackagingError(f"Archiving {install_dir} failed: {exc}") from exc

        destination = self._config.artifacts_dir / filename
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(workdir / filename), str(destination))
        except OSError as exc:
            raise PackagingError(f"Unable to move {filename} to {destination.parent}: {exc}") from exc
        ok(f"Package written to {destination}", use_emoji=self._use_emoji)
        return destination


__all__ = ["Packager", "package_filename", "resolve_compressor"]

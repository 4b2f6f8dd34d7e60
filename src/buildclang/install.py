# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Publish build output to the install directory with one generation of rollback."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import BuildConfig
from .errors import InstallError
from .logging import info, ok, section
from .process_utils import CommandRunner, SubprocessExecutionError, default_runner, run_checked


@dataclass(frozen=True, slots=True)
class InstallationSlot:
    """Install directory plus the ``-old`` sibling the previous install moves into."""

    path: Path
    old_path: Path
    rotate: bool

    @classmethod
    def from_config(cls, config: BuildConfig) -> InstallationSlot:
        return cls(path=config.install_dir, old_path=config.old_install_dir, rotate=not config.test_mode)


def rotate_installation(slot: InstallationSlot) -> Path | None:
    """Move the current installation into the ``-old`` slot.

    Any existing ``-old`` directory is removed first, so only one previous
    generation is ever kept.

    Returns:
        Path | None: The ``-old`` path when an installation was moved, else ``None``.
    """

    if not slot.rotate:
        return None
    if slot.old_path.exists():
        shutil.rmtree(slot.old_path)
    if not slot.path.exists():
        return None
    shutil.move(str(slot.path), str(slot.old_path))
    return slot.old_path


class Installer:
    """Run the ``install`` target of the last build into the configured prefix."""

    def __init__(self, config: BuildConfig, *, runner: CommandRunner | None = None) -> None:
        self._config = config
        self._runner = runner or default_runner
        self._use_emoji = config.use_emoji

    def run(self) -> Path:
        """Rotate the previous installation and install the new one.

        The rotation is not undone when the install step fails; the previous
        toolchain stays in the ``-old`` slot for manual recovery.

        Raises:
            InstallError: If rotation or ``ninja install`` fails.
        """

        slot = InstallationSlot.from_config(self._config)
        section("Installing toolchain")
        if not self._config.build_dir.is_dir():
            raise InstallError(f"No build output found in {self._config.build_dir}")
        try:
            moved = rotate_installation(slot)
        except OSError as exc:
            raise InstallError(f"Unable to move {slot.path} to {slot.old_path}: {exc}") from exc
        if moved is not None:
            info(f"Previous toolchain moved to {moved}", use_emoji=self._use_emoji)
        try:
            run_checked(self._runner, ("ninja", "install"), self._config.build_dir)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise InstallError(f"Installation failed: {exc}") from exc
        ok(f"Toolchain installed to {slot.path}", use_emoji=self._use_emoji)
        return slot.path


__all__ = ["InstallationSlot", "Installer", "rotate_installation"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for installation and rotation of the previous toolchain."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import RecordingRunner

from buildclang.build import cmake_arguments
from buildclang.errors import InstallError
from buildclang.install import InstallationSlot, Installer, rotate_installation


def _prepare_build(config, runner: RecordingRunner) -> None:
    config.build_dir.mkdir(parents=True)
    runner(cmake_arguments(config), config.build_dir)
    runner.calls.clear()


def _write_toolchain(path: Path, marker: str) -> None:
    (path / "bin").mkdir(parents=True)
    (path / "bin" / "clang").write_text(marker, encoding="utf-8")


def test_previous_install_is_rotated(make_config) -> None:
    config = make_config()
    runner = RecordingRunner(build_id="new")
    _prepare_build(config, runner)
    _write_toolchain(config.install_dir, "old")

    installed = Installer(config, runner=runner).run()

    assert installed == config.install_dir
    assert (config.old_install_dir / "bin" / "clang").read_text(encoding="utf-8") == "old"
    assert (config.install_dir / "bin" / "clang").read_text(encoding="utf-8") == "new"
    assert runner.calls == [(("ninja", "install"), config.build_dir)]


def test_stale_old_slot_is_discarded(make_config) -> None:
    config = make_config()
    runner = RecordingRunner(build_id="new")
    _prepare_build(config, runner)
    _write_toolchain(config.install_dir, "previous")
    _write_toolchain(config.old_install_dir, "ancient")
    (config.old_install_dir / "leftover").write_text("x", encoding="utf-8")

    Installer(config, runner=runner).run()

    assert (config.old_install_dir / "bin" / "clang").read_text(encoding="utf-8") == "previous"
    assert not (config.old_install_dir / "leftover").exists()


def test_first_install_creates_no_old_slot(make_config, runner: RecordingRunner) -> None:
    config = make_config()
    _prepare_build(config, runner)
    Installer(config, runner=runner).run()
    assert config.install_dir.is_dir()
    assert not config.old_install_dir.exists()


def test_test_mode_never_rotates(make_config) -> None:
    config = make_config(test_mode=True)
    runner = RecordingRunner(build_id="new")
    _prepare_build(config, runner)
    _write_toolchain(config.install_dir, "previous")

    Installer(config, runner=runner).run()

    assert not config.old_install_dir.exists()
    assert (config.install_dir / "bin" / "clang").read_text(encoding="utf-8") == "new"


def test_rotation_is_kept_when_install_fails(make_config) -> None:
    config = make_config()
    runner = RecordingRunner(fail_on=[("ninja", "install")])
    _prepare_build(config, runner)
    _write_toolchain(config.install_dir, "previous")

    with pytest.raises(InstallError, match="Installation failed"):
        Installer(config, runner=runner).run()

    assert not config.install_dir.exists()
    assert (config.old_install_dir / "bin" / "clang").read_text(encoding="utf-8") == "previous"


def test_missing_build_output_is_fatal(make_config, runner: RecordingRunner) -> None:
    config = make_config(install_only=True)
    _write_toolchain(config.install_dir, "previous")
    with pytest.raises(InstallError, match="No build output"):
        Installer(config, runner=runner).run()
    assert runner.calls == []
    assert config.install_dir.exists()


def test_rotate_installation_without_rotation(tmp_path: Path) -> None:
    slot = InstallationSlot(path=tmp_path / "tc", old_path=tmp_path / "tc-old", rotate=False)
    _write_toolchain(slot.path, "x")
    assert rotate_installation(slot) is None
    assert slot.path.exists()

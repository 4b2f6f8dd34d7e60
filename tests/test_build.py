# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the configure and compile stage."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest
from conftest import RecordingRunner

from buildclang.build import BuildRunner, clean_version_string, cmake_arguments, format_duration
from buildclang.errors import BuildError


class SnapshotRunner(RecordingRunner):
    """Record the build directory contents each time CMake starts."""

    def __init__(self) -> None:
        super().__init__()
        self.snapshots: list[list[str]] = []

    def __call__(self, args: Sequence[str], cwd: Path | None, capture: bool = False) -> CompletedProcess[str]:
        if args[0] == "cmake" and cwd is not None:
            self.snapshots.append(sorted(path.name for path in cwd.iterdir()))
        return super().__call__(args, cwd, capture)


def fixed_clock(*values: float):
    remaining = list(values)
    return lambda: remaining.pop(0)


@pytest.mark.parametrize(
    ("seconds", "text"),
    [
        (0, "0 seconds"),
        (1, "1 second"),
        (59.6, "1 minute and 0 seconds"),
        (125, "2 minutes and 5 seconds"),
        (3600, "1 hour and 0 seconds"),
        (3723, "1 hour, 2 minutes and 3 seconds"),
    ],
)
def test_format_duration(seconds: float, text: str) -> None:
    assert format_duration(seconds) == text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (
            "clang version 9.0.0 (https://github.com/llvm/llvm-project.git 0123456789ab)\nTarget: x86\n",
            "clang version 9.0.0 (0123456789ab)",
        ),
        ("clang version 8.0.1 (git://github.com/llvm/llvm-project)", "clang version 8.0.1"),
        ("clang   version\t7.1.0  ", "clang version 7.1.0"),
        ("", ""),
    ],
)
def test_clean_version_string(raw: str, expected: str) -> None:
    assert clean_version_string(raw) == expected


def test_cmake_arguments(make_config) -> None:
    config = make_config(arch="all", version="7")
    args = cmake_arguments(config)

    assert args[:4] == ["cmake", "-G", "Ninja", "-Wno-dev"]
    assert args[-1] == str(config.llvm_dir / "llvm")
    assert "-DCMAKE_C_COMPILER=/usr/bin/clang" in args
    assert "-DCMAKE_CXX_COMPILER=/usr/bin/clang++" in args
    assert "-DLLVM_TARGETS_TO_BUILD=PowerPC;X86;ARM;AArch64" in args
    assert f"-DCMAKE_INSTALL_PREFIX={config.install_dir}" in args
    assert f"-DLLVM_BINUTILS_INCDIR={config.binutils_dir / 'include'}" in args
    for toggle in ("LLVM_INCLUDE_DOCS", "LLVM_INCLUDE_EXAMPLES", "LLVM_INCLUDE_TESTS", "LLVM_ENABLE_BINDINGS"):
        assert f"-D{toggle}=OFF" in args
    assert not any(arg.startswith("-DLLVM_USE_LINKER=") for arg in args)


def test_cmake_uses_detected_linker(make_config) -> None:
    config = make_config(compilers=("gcc", "g++", "ld.lld"))
    assert "-DLLVM_USE_LINKER=lld" in cmake_arguments(config)


def test_successful_build(make_config, runner: RecordingRunner) -> None:
    config = make_config()
    outcome = BuildRunner(config, started_at=100.0, runner=runner, clock=fixed_clock(225.0)).run()

    assert outcome.success is True
    assert outcome.elapsed == 125.0
    assert outcome.elapsed_text == "2 minutes and 5 seconds"
    assert outcome.compiler_version == "clang version 9.0.0 (0123456789ab)"
    assert [command[0] for command in runner.commands] == ["cmake", "ninja", str(config.build_dir / "bin" / "clang")]
    assert all(cwd == config.build_dir for _command, cwd in runner.calls)


def test_build_directory_is_wiped_every_time(make_config) -> None:
    config = make_config()
    runner = SnapshotRunner()
    config.build_dir.mkdir(parents=True)
    (config.build_dir / "CMakeCache.txt").write_text("stale", encoding="utf-8")

    BuildRunner(config, started_at=0.0, runner=runner, clock=lambda: 1.0).run()
    assert (config.build_dir / "bin" / "clang").exists()
    BuildRunner(config, started_at=0.0, runner=runner, clock=lambda: 1.0).run()

    assert runner.snapshots == [[], []]


def test_configure_failure_is_fatal(make_config) -> None:
    runner = RecordingRunner(fail_on=[("cmake",)])
    with pytest.raises(BuildError, match="CMake configuration failed"):
        BuildRunner(make_config(), started_at=0.0, runner=runner).run()
    assert not runner.ran("ninja")


def test_compile_failure_reports_elapsed_time(make_config) -> None:
    runner = RecordingRunner(fail_on=[("ninja",)])
    with pytest.raises(BuildError, match=r"Build failed \(elapsed: 1 minute and 1 second\)") as excinfo:
        BuildRunner(make_config(), started_at=0.0, runner=runner, clock=fixed_clock(61.0)).run()
    assert excinfo.value.elapsed == "1 minute and 1 second"
    assert not any(command[-1] == "--version" for command in runner.commands)


def test_version_probe_failure_is_not_fatal(make_config) -> None:
    config = make_config()
    runner = RecordingRunner(fail_on=[(str(config.build_dir / "bin" / "clang"),)])
    outcome = BuildRunner(config, started_at=0.0, runner=runner, clock=lambda: 5.0).run()
    assert outcome.success is True
    assert outcome.compiler_version is None


def test_unusable_build_directory_is_a_build_error(make_config, runner: RecordingRunner) -> None:
    config = make_config()
    config.build_dir.parent.mkdir(parents=True)
    config.build_dir.write_text("not a directory", encoding="utf-8")

    with pytest.raises(BuildError, match="Unable to reset build directory"):
        BuildRunner(config, started_at=0.0, runner=runner).run()
    assert runner.commands == []

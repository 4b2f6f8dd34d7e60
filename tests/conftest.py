# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from buildclang.config import BuildConfig, BuildRequest, resolve_config

FAKE_SHA = "0123456789abcdef0123456789abcdef01234567"
FAKE_BANNER = (
    "clang version 9.0.0 (https://github.com/llvm/llvm-project.git 0123456789ab)\n"
    "Target: x86_64-unknown-linux-gnu\n"
)


class RecordingRunner:
    """Fake process runner that records calls and mimics the native tools.

    ``fail_on`` holds argument prefixes whose commands exit with status 1.
    Successful ``ninja``, ``ninja install`` and ``tar`` calls leave behind the
    files the real tools would produce so filesystem effects can be asserted.
    """

    def __init__(self, *, fail_on: Sequence[tuple[str, ...]] = (), build_id: str = "build-1") -> None:
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []
        self.fail_on = list(fail_on)
        self.build_id = build_id
        self.install_prefix: Path | None = None

    def __call__(self, args: Sequence[str], cwd: Path | None, capture: bool = False) -> CompletedProcess[str]:
        command = tuple(str(arg) for arg in args)
        self.calls.append((command, cwd))
        if any(command[: len(prefix)] == prefix for prefix in self.fail_on):
            return CompletedProcess(command, 1, "", "boom")
        return CompletedProcess(command, 0, self._effects(command, cwd), "")

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [command for command, _cwd in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(command[: len(prefix)] == prefix for command in self.commands)

    def _effects(self, command: tuple[str, ...], cwd: Path | None) -> str:
        if command[:2] == ("git", "rev-parse"):
            return f"{FAKE_SHA}\n"
        if command[-1:] == ("--version",):
            return FAKE_BANNER
        if command[0] == "cmake":
            prefix = next(arg for arg in command if arg.startswith("-DCMAKE_INSTALL_PREFIX="))
            self.install_prefix = Path(prefix.split("=", 1)[1])
        if command == ("ninja",) and cwd is not None:
            (cwd / "bin").mkdir(parents=True, exist_ok=True)
            (cwd / "bin" / "clang").write_text(self.build_id, encoding="utf-8")
        if command == ("ninja", "install") and self.install_prefix is not None:
            (self.install_prefix / "bin").mkdir(parents=True, exist_ok=True)
            (self.install_prefix / "bin" / "clang").write_text(self.build_id, encoding="utf-8")
        if command[0] == "tar" and cwd is not None:
            (cwd / command[3]).write_bytes(b"archive")
        return ""


def fake_which(available: Sequence[str]) -> Callable[[str], str | None]:
    names = set(available)

    def _which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in names else None

    return _which


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., BuildConfig]:
    """Return a factory resolving a configuration rooted at ``tmp_path``."""

    def _make(
        arch: str = "arm64",
        version: str = "9",
        *,
        compilers: Sequence[str] = ("clang", "clang++"),
        **overrides: object,
    ) -> BuildConfig:
        request = BuildRequest(arch=arch, version=version, root=tmp_path, use_emoji=False)
        for key, value in overrides.items():
            setattr(request, key, value)
        return resolve_config(request, which=fake_which(compilers))

    return _make


@pytest.fixture
def patch_file(tmp_path: Path) -> Path:
    path = tmp_path / "patches" / "llvm-7.x-sanitizers.patch"
    path.parent.mkdir(parents=True)
    path.write_text("--- a/x\n+++ b/x\n", encoding="utf-8")
    return path

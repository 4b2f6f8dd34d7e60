# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option declarations for the build command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import BuildRequest

ARCH_OPTION = Annotated[
    str,
    typer.Option(
        "--arch",
        "-a",
        help="Target backends: arm, arm64, i686, powerpc, ARM (arm + arm64) or all.",
        show_default=False,
    ),
]
VERSION_OPTION = Annotated[
    str,
    typer.Option(
        "--version",
        "-v",
        help="Clang major version to build: 7, 8 or 9.",
        show_default=False,
    ),
]
INSTALL_FOLDER_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--install-folder",
        "-i",
        help="Install prefix (default: <root>/toolchains/clang-<version>.x).",
    ),
]
BUILD_ONLY_OPTION = Annotated[
    bool,
    typer.Option("--build-only", "-b", help="Stop after building."),
]
INSTALL_ONLY_OPTION = Annotated[
    bool,
    typer.Option("--install-only", "-I", help="Skip sync and build; install the last build output."),
]
STOCK_OPTION = Annotated[
    bool,
    typer.Option("--stock", "-S", help="Do not apply the local patch."),
]
TEST_OPTION = Annotated[
    bool,
    typer.Option("--test", "-T", help="Install into the test prefix and keep no -old copy."),
]
UPDATE_ONLY_OPTION = Annotated[
    bool,
    typer.Option("--update-only", "-u", help="Stop after syncing the source trees."),
]
PACKAGE_OPTION = Annotated[
    str | None,
    typer.Option(
        "--package",
        "-p",
        help="Archive the installed toolchain with gz or xz compression.",
    ),
]
ROOT_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--root",
        help="Directory holding src/, build/, toolchains/ and patches/ (default: current directory).",
        show_default=False,
    ),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="TOML settings file (default: <root>/build-clang.toml when present).",
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


def build_request(
    *,
    arch: str,
    version: str,
    install_folder: Path | None,
    build_only: bool,
    install_only: bool,
    stock: bool,
    test: bool,
    update_only: bool,
    package: str | None,
    root: Path | None,
    config: Path | None,
    emoji: bool,
) -> BuildRequest:
    """Construct a :class:`BuildRequest` from Typer parameters."""

    return BuildRequest(
        arch=arch,
        version=version,
        root=root if root is not None else Path.cwd(),
        install_folder=install_folder,
        package=package,
        build_only=build_only,
        install_only=install_only,
        update_only=update_only,
        stock=stock,
        test_mode=test,
        use_emoji=emoji,
        settings_file=config,
    )


__all__ = [
    "ARCH_OPTION",
    "BUILD_ONLY_OPTION",
    "CONFIG_OPTION",
    "EMOJI_OPTION",
    "INSTALL_FOLDER_OPTION",
    "INSTALL_ONLY_OPTION",
    "PACKAGE_OPTION",
    "ROOT_OPTION",
    "STOCK_OPTION",
    "TEST_OPTION",
    "UPDATE_ONLY_OPTION",
    "VERSION_OPTION",
    "build_request",
]

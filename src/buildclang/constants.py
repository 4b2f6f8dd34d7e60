# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across buildclang modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class TargetArch(StrEnum):
    """Architecture selectors accepted by ``--arch``."""

    ARM = "arm"
    ARM64 = "arm64"
    I686 = "i686"
    POWERPC = "powerpc"
    ARM_ALL = "ARM"
    ALL = "all"


TARGET_BACKENDS: Final[dict[TargetArch, tuple[str, ...]]] = {
    TargetArch.ARM: ("ARM",),
    TargetArch.ARM64: ("AArch64",),
    TargetArch.I686: ("X86",),
    TargetArch.POWERPC: ("PowerPC",),
    TargetArch.ARM_ALL: ("ARM", "AArch64"),
    TargetArch.ALL: ("PowerPC", "X86", "ARM", "AArch64"),
}

SUPPORTED_VERSIONS: Final[tuple[int, ...]] = (7, 8, 9)
LATEST_VERSION: Final[int] = max(SUPPORTED_VERSIONS)
PATCHED_VERSION: Final[int] = min(SUPPORTED_VERSIONS)
ROLLING_BRANCH: Final[str] = "master"
RELEASE_BRANCH_TEMPLATE: Final[str] = "release/{version}.x"

COMPRESSORS: Final[dict[str, str]] = {
    "gz": "pigz",
    "xz": "pxz",
}

# (family, C compiler, C++ compiler), in order of preference.
HOST_COMPILER_FAMILIES: Final[tuple[tuple[str, str, str], ...]] = (
    ("clang", "clang", "clang++"),
    ("gcc", "gcc", "g++"),
)

# (LLVM_USE_LINKER value, executable probed on PATH), in order of preference.
HOST_LINKERS: Final[tuple[tuple[str, str], ...]] = (
    ("lld", "ld.lld"),
    ("gold", "ld.gold"),
)

SOURCES_DIR_NAME: Final[str] = "src"
BUILD_DIR_NAME: Final[str] = "build"
TOOLCHAINS_DIR_NAME: Final[str] = "toolchains"
PATCHES_DIR_NAME: Final[str] = "patches"
LLVM_TREE_NAME: Final[str] = "llvm-project"
BINUTILS_TREE_NAME: Final[str] = "binutils"
LLVM_BUILD_NAME: Final[str] = "llvm"
OLD_INSTALL_SUFFIX: Final[str] = "-old"
TEST_INSTALL_SUFFIX: Final[str] = "-test"
PATCH_FILE_NAME: Final[str] = f"llvm-{PATCHED_VERSION}.x-sanitizers.patch"
SETTINGS_FILE_NAME: Final[str] = "build-clang.toml"
REVISION_LENGTH: Final[int] = 12

DEFAULT_LLVM_URL: Final[str] = "https://github.com/llvm/llvm-project"
DEFAULT_BINUTILS_URL: Final[str] = "git://sourceware.org/git/binutils-gdb.git"
DEFAULT_BINUTILS_BRANCH: Final[str] = "master"
DEFAULT_CFLAGS: Final[str] = "-O2 -march=native -mtune=native"
DEFAULT_PROJECTS: Final[tuple[str, ...]] = ("clang", "compiler-rt", "lld", "polly")
DEFAULT_PACKAGE_NAME: Final[str] = "clang"

DISABLED_FEATURES: Final[tuple[str, ...]] = (
    "LLVM_ENABLE_BINDINGS",
    "LLVM_ENABLE_OCAMLDOC",
    "LLVM_BUILD_DOCS",
    "LLVM_INCLUDE_DOCS",
    "LLVM_INCLUDE_EXAMPLES",
    "LLVM_INCLUDE_TESTS",
    "LLVM_ENABLE_WARNINGS",
)

__all__ = [
    "BINUTILS_TREE_NAME",
    "BUILD_DIR_NAME",
    "COMPRESSORS",
    "DEFAULT_BINUTILS_BRANCH",
    "DEFAULT_BINUTILS_URL",
    "DEFAULT_CFLAGS",
    "DEFAULT_LLVM_URL",
    "DEFAULT_PACKAGE_NAME",
    "DEFAULT_PROJECTS",
    "DISABLED_FEATURES",
    "HOST_COMPILER_FAMILIES",
    "HOST_LINKERS",
    "LATEST_VERSION",
    "LLVM_BUILD_NAME",
    "LLVM_TREE_NAME",
    "OLD_INSTALL_SUFFIX",
    "PATCHED_VERSION",
    "PATCHES_DIR_NAME",
    "PATCH_FILE_NAME",
    "RELEASE_BRANCH_TEMPLATE",
    "REVISION_LENGTH",
    "ROLLING_BRANCH",
    "SETTINGS_FILE_NAME",
    "SOURCES_DIR_NAME",
    "SUPPORTED_VERSIONS",
    "TARGET_BACKENDS",
    "TEST_INSTALL_SUFFIX",
    "TOOLCHAINS_DIR_NAME",
    "TargetArch",
]

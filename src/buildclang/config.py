# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolution of command-line input into an immutable build configuration."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    BINUTILS_TREE_NAME,
    BUILD_DIR_NAME,
    HOST_COMPILER_FAMILIES,
    HOST_LINKERS,
    LATEST_VERSION,
    LLVM_BUILD_NAME,
    LLVM_TREE_NAME,
    OLD_INSTALL_SUFFIX,
    PATCH_FILE_NAME,
    PATCHED_VERSION,
    PATCHES_DIR_NAME,
    RELEASE_BRANCH_TEMPLATE,
    ROLLING_BRANCH,
    SOURCES_DIR_NAME,
    SUPPORTED_VERSIONS,
    TARGET_BACKENDS,
    TEST_INSTALL_SUFFIX,
    TOOLCHAINS_DIR_NAME,
    TargetArch,
)
from .errors import ConfigError
from .settings import BuildSettings, load_settings

Which = Callable[[str], str | None]


class HostToolchain(BaseModel):
    """Host compilers (and optional linker) used to build the new toolchain."""

    model_config = ConfigDict(frozen=True)

    family: str
    cc: Path
    cxx: Path
    linker: str | None = None


class BuildConfig(BaseModel):
    """Fully resolved, read-only configuration shared by every pipeline stage."""

    model_config = ConfigDict(frozen=True)

    arch: TargetArch
    version: int
    targets: tuple[str, ...]
    host: HostToolchain
    root: Path
    install_dir: Path
    compression: str | None = None
    build_only: bool = False
    install_only: bool = False
    update_only: bool = False
    stock: bool = False
    test_mode: bool = False
    use_emoji: bool = True
    settings: BuildSettings = Field(default_factory=BuildSettings)

    @property
    def branch(self) -> str:
        """Return the LLVM branch tracked for the selected version."""

        return branch_for_version(self.version)

    @property
    def targets_arg(self) -> str:
        """Return the backend list joined for ``LLVM_TARGETS_TO_BUILD``."""

        return ";".join(self.targets)

    @property
    def sources_dir(self) -> Path:
        """Return ``<root>/src``, the parent of both source trees."""

        return self.root / SOURCES_DIR_NAME

    @property
    def llvm_dir(self) -> Path:
        """Return the LLVM monorepo checkout."""

        return self.sources_dir / LLVM_TREE_NAME

    @property
    def binutils_dir(self) -> Path:
        """Return the binutils checkout providing the gold plugin headers."""

        return self.sources_dir / BINUTILS_TREE_NAME

    @property
    def artifacts_dir(self) -> Path:
        """Return ``<root>/build``, which holds the build tree and archives."""

        return self.root / BUILD_DIR_NAME

    @property
    def build_dir(self) -> Path:
        """Return the CMake build tree, wiped at the start of every build."""

        return self.artifacts_dir / LLVM_BUILD_NAME

    @property
    def old_install_dir(self) -> Path:
        """Return the sibling that receives the previous installation."""

        return self.install_dir.with_name(f"{self.install_dir.name}{OLD_INSTALL_SUFFIX}")

    @property
    def patch_file(self) -> Path:
        """Return the local patch applied to the LLVM tree."""

        return self.root / PATCHES_DIR_NAME / PATCH_FILE_NAME

    @property
    def apply_patch(self) -> bool:
        """Return ``True`` when the local patch must be applied to the LLVM tree."""

        return should_apply_patch(self.version, stock=self.stock)


@dataclass(slots=True)
class BuildRequest:
    """Raw, unvalidated values collected from the command line."""

    arch: str
    version: str
    root: Path
    install_folder: Path | None = None
    package: str | None = None
    build_only: bool = False
    install_only: bool = False
    update_only: bool = False
    stock: bool = False
    test_mode: bool = False
    use_emoji: bool = True
    settings_file: Path | None = None


def resolve_arch(token: str) -> TargetArch:
    """Return the architecture selector matching *token*.

    Raises:
        ConfigError: If *token* is not one of the supported selectors.
    """

    try:
        return TargetArch(token)
    except ValueError as exc:
        valid = ", ".join(member.value for member in TargetArch)
        raise ConfigError(f"Invalid architecture '{token}'. Valid values: {valid}") from exc


def resolve_targets(arch: TargetArch) -> tuple[str, ...]:
    """Return the LLVM backend names built for *arch*."""

    return TARGET_BACKENDS[arch]


def resolve_version(token: str) -> int:
    """Return the supported toolchain version named by *token*.

    Raises:
        ConfigError: If *token* is not a supported major version.
    """

    tokens = {str(version): version for version in SUPPORTED_VERSIONS}
    if token not in tokens:
        raise ConfigError(f"Invalid version '{token}'. Valid values: {', '.join(tokens)}")
    return tokens[token]


def branch_for_version(version: int) -> str:
    """Return the LLVM branch tracked for *version*.

    The latest version follows the rolling branch; older versions track their
    release branch.
    """

    if version == LATEST_VERSION:
        return ROLLING_BRANCH
    return RELEASE_BRANCH_TEMPLATE.format(version=version)


def should_apply_patch(version: int, *, stock: bool) -> bool:
    """Return ``True`` for the patched version unless a stock build was requested.

    Args:
        version: Resolved toolchain major version.
        stock: ``True`` when ``--stock`` was given.
    """

    return not stock and version == PATCHED_VERSION


def default_install_dir(root: Path, version: int, *, test_mode: bool) -> Path:
    """Return ``<root>/toolchains/clang-<version>.x`` (``-test`` suffixed in test mode)."""

    name = f"clang-{version}.x"
    if test_mode:
        name = f"{name}{TEST_INSTALL_SUFFIX}"
    return root / TOOLCHAINS_DIR_NAME / name


def resolve_host_toolchain(which: Which | None = None) -> HostToolchain:
    """Locate a host C/C++ compiler pair on ``PATH``.

    Clang is preferred and GCC is the fallback. A linker is recorded when one
    of the supported alternatives is available.

    Raises:
        ConfigError: If no complete compiler pair is found.
    """

    which = which or shutil.which
    linker = next((name for name, executable in HOST_LINKERS if which(executable)), None)
    for family, cc_name, cxx_name in HOST_COMPILER_FAMILIES:
        cc = which(cc_name)
        cxx = which(cxx_name)
        if cc and cxx:
            return HostToolchain(family=family, cc=Path(cc), cxx=Path(cxx), linker=linker)
    searched = ", ".join(f"{cc_name}/{cxx_name}" for _, cc_name, cxx_name in HOST_COMPILER_FAMILIES)
    raise ConfigError(f"No host compiler found on PATH (looked for {searched})")


def _check_exclusive_modes(request: BuildRequest) -> None:
    if request.install_only and (request.build_only or request.update_only):
        raise ConfigError("--install-only cannot be combined with --build-only or --update-only")


def resolve_config(request: BuildRequest, *, which: Which | None = None) -> BuildConfig:
    """Validate *request* and derive every value the pipeline needs.

    Apart from reading the optional settings file, the only I/O performed is
    probing ``PATH`` for executables.

    Raises:
        ConfigError: If any value cannot be resolved.
    """

    arch = resolve_arch(request.arch)
    version = resolve_version(request.version)
    _check_exclusive_modes(request)
    root = request.root.expanduser().resolve()
    settings = load_settings(root, request.settings_file)
    host = resolve_host_toolchain(which)
    if request.install_folder is not None:
        install_dir = request.install_folder.expanduser().resolve()
    else:
        install_dir = default_install_dir(root, version, test_mode=request.test_mode)
    return BuildConfig(
        arch=arch,
        version=version,
        targets=resolve_targets(arch),
        host=host,
        root=root,
        install_dir=install_dir,
        compression=request.package,
        build_only=request.build_only,
        install_only=request.install_only,
        update_only=request.update_only,
        stock=request.stock,
        test_mode=request.test_mode,
        use_emoji=request.use_emoji,
        settings=settings,
    )


__all__ = [
    "BuildConfig",
    "BuildRequest",
    "HostToolchain",
    "Which",
    "branch_for_version",
    "default_install_dir",
    "resolve_arch",
    "resolve_config",
    "resolve_host_toolchain",
    "resolve_targets",
    "resolve_version",
    "should_apply_patch",
]

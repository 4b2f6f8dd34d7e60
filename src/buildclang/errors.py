# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the build pipeline stages."""

from __future__ import annotations


class BuildClangError(Exception):
    """Base class for every error raised by a pipeline stage."""


class ConfigError(BuildClangError):
    """Raised when command-line or settings input cannot be resolved."""


class SyncError(BuildClangError):
    """Raised when cloning, updating or patching a source tree fails."""


class BuildError(BuildClangError):
    """Raised when the configure or compile step exits with a non-zero status."""

    def __init__(self, message: str, *, elapsed: str | None = None) -> None:
        if elapsed is not None:
            message = f"{message} (elapsed: {elapsed})"
        super().__init__(message)
        self.elapsed = elapsed


class InstallError(BuildClangError):
    """Raised when rotating the previous toolchain or installing the new one fails."""


class PackagingError(BuildClangError):
    """Raised when the installed toolchain cannot be archived.

    Packaging is the final optional stage, so the orchestrator reports this
    error and carries on instead of failing the run.
    """


__all__ = [
    "BuildClangError",
    "BuildError",
    "ConfigError",
    "InstallError",
    "PackagingError",
    "SyncError",
]

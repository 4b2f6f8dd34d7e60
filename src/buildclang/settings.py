# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Optional TOML settings that override repository and compiler defaults."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_BINUTILS_BRANCH,
    DEFAULT_BINUTILS_URL,
    DEFAULT_CFLAGS,
    DEFAULT_LLVM_URL,
    DEFAULT_PACKAGE_NAME,
    DEFAULT_PROJECTS,
    SETTINGS_FILE_NAME,
)
from .errors import ConfigError


class BuildSettings(BaseModel):
    """Values that rarely change between runs and therefore live in a file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    llvm_url: str = DEFAULT_LLVM_URL
    binutils_url: str = DEFAULT_BINUTILS_URL
    binutils_branch: str = DEFAULT_BINUTILS_BRANCH
    cflags: str = DEFAULT_CFLAGS
    projects: tuple[str, ...] = Field(default=DEFAULT_PROJECTS)
    package_name: str = DEFAULT_PACKAGE_NAME

    @field_validator("projects", mode="before")
    @classmethod
    def _coerce_projects(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return tuple(part for part in value.split(";") if part)
        if isinstance(value, (list, tuple)):
            return tuple(str(entry) for entry in value)
        raise ValueError("projects must be a list of strings or a ';' separated string")

    @field_validator("projects")
    @classmethod
    def _require_projects(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one LLVM project must be enabled")
        return value


def settings_path_for(root: Path, explicit: Path | None = None) -> Path | None:
    """Return the settings file to read for *root*, if any.

    An explicit path must exist. Without one, ``<root>/build-clang.toml`` is
    used when present.

    Raises:
        ConfigError: If *explicit* does not point at an existing file.
    """

    if explicit is not None:
        candidate = explicit.expanduser()
        if not candidate.is_file():
            raise ConfigError(f"Settings file not found: {candidate}")
        return candidate
    implicit = root / SETTINGS_FILE_NAME
    return implicit if implicit.is_file() else None


def load_settings(root: Path, explicit: Path | None = None) -> BuildSettings:
    """Load and validate the settings that apply to *root*.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """

    path = settings_path_for(root, explicit)
    if path is None:
        return BuildSettings()
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read settings from {path}: {exc}") from exc
    try:
        return BuildSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc


__all__ = ["BuildSettings", "load_settings", "settings_path_for"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Source tree synchronisation for the LLVM and binutils repositories."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .config import BuildConfig
from .constants import BINUTILS_TREE_NAME, LLVM_TREE_NAME, REVISION_LENGTH
from .errors import SyncError
from .logging import info, ok, section
from .process_utils import (
    CommandRunner,
    SubprocessExecutionError,
    default_runner,
    format_command,
    run_checked,
)


class RepositorySpec(BaseModel):
    """Git repository to keep in sync: remote URL, local checkout and tracked branch."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    path: Path
    branch: str


@dataclass(frozen=True, slots=True)
class RevisionRecord:
    """Commit of the LLVM tree captured once the sync finished."""

    sha: str

    @property
    def short(self) -> str:
        """Return the abbreviated hash used in archive names."""

        return self.sha[:REVISION_LENGTH]


def repositories_for(config: BuildConfig) -> tuple[RepositorySpec, RepositorySpec]:
    """Return the LLVM and binutils repository specs for *config*, in sync order."""

    settings = config.settings
    return (
        RepositorySpec(
            name=LLVM_TREE_NAME,
            url=settings.llvm_url,
            path=config.llvm_dir,
            branch=config.branch,
        ),
        RepositorySpec(
            name=BINUTILS_TREE_NAME,
            url=settings.binutils_url,
            path=config.binutils_dir,
            branch=settings.binutils_branch,
        ),
    )


class SourceSync:
    """Bring both source trees to the tracked branch and patch LLVM when required."""

    def __init__(self, config: BuildConfig, *, runner: CommandRunner | None = None) -> None:
        self._config = config
        self._runner = runner or default_runner
        self._use_emoji = config.use_emoji

    def run(self) -> RevisionRecord:
        """Sync both repositories and return the resolved LLVM revision.

        Raises:
            SyncError: If any git operation or the patch application fails.
        """

        section("Syncing source trees")
        llvm, binutils = repositories_for(self._config)
        self.sync_repository(llvm)
        revision = self.read_revision(llvm.path)
        if self._config.apply_patch:
            self.apply_patch(llvm.path, self._config.patch_file)
        self.sync_repository(binutils)
        ok(f"{llvm.name} at {revision.short} ({llvm.branch})", use_emoji=self._use_emoji)
        return revision

    def sync_repository(self, repo: RepositorySpec) -> None:
        """Update an existing clone of *repo* or create a shallow one.

        Raises:
            SyncError: If reset, checkout, pull or clone fails, or the parent
                directory of a new clone cannot be created.
        """

        if repo.path.exists():
            info(f"Updating {repo.name} ({repo.branch})", use_emoji=self._use_emoji)
            self._git(repo, ("git", "reset", "--hard"), cwd=repo.path)
            self._git(repo, ("git", "checkout", repo.branch), cwd=repo.path)
            self._git(repo, ("git", "pull", "--rebase", "origin", repo.branch), cwd=repo.path)
            return

        info(f"Cloning {repo.name} ({repo.branch})", use_emoji=self._use_emoji)
        try:
            repo.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SyncError(f"{repo.name}: unable to create {repo.path.parent}: {exc}") from exc
        self._git(
            repo,
            (
                "git",
                "clone",
                "--single-branch",
                "--depth",
                "1",
                "-b",
                repo.branch,
                repo.url,
                str(repo.path),
            ),
            cwd=repo.path.parent,
        )

    def read_revision(self, path: Path) -> RevisionRecord:
        """Return the commit currently checked out at *path*.

        Raises:
            SyncError: If the revision cannot be read.
        """

        args = ("git", "rev-parse", "HEAD")
        try:
            completed = run_checked(self._runner, args, path, capture=True)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise SyncError(f"Unable to read the revision of {path}: {exc}") from exc
        sha = (completed.stdout or "").strip()
        if not sha:
            raise SyncError(f"'{format_command(args)}' returned no revision for {path}")
        return RevisionRecord(sha=sha)

    def apply_patch(self, path: Path, patch: Path) -> None:
        """Apply *patch* to the tree at *path* as a three-way merge.

        Raises:
            SyncError: If the patch is missing or does not apply.
        """

        if not patch.is_file():
            raise SyncError(f"Patch file not found: {patch}")
        info(f"Applying {patch.name}", use_emoji=self._use_emoji)
        args = ("git", "apply", "--3way", str(patch))
        try:
            run_checked(self._runner, args, path)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise SyncError(f"Failed to apply {patch.name}: {exc}") from exc

    def _git(self, repo: RepositorySpec, args: Sequence[str], *, cwd: Path) -> None:
        try:
            run_checked(self._runner, args, cwd)
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise SyncError(f"{repo.name}: '{format_command(args)}' failed: {exc}") from exc


def read_existing_revision(config: BuildConfig, *, runner: CommandRunner | None = None) -> RevisionRecord | None:
    """Return the LLVM revision left by a previous sync, or ``None`` when unavailable."""

    if not config.llvm_dir.exists():
        return None
    try:
        return SourceSync(config, runner=runner).read_revision(config.llvm_dir)
    except SyncError:
        return None


__all__ = [
    "RepositorySpec",
    "RevisionRecord",
    "SourceSync",
    "read_existing_revision",
    "repositories_for",
]

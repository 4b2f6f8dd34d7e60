# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Stage sequencing for a toolchain build run."""

from __future__ import annotations

import os
import signal
import sys
import time
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import FrameType

from .build import BuildOutcome, BuildRunner, Clock, format_duration
from .config import BuildConfig
from .errors import BuildClangError, PackagingError
from .install import Installer
from .logging import fail, info, ok, warn
from .package import Packager
from .process_utils import CommandRunner, default_runner
from .sync import RevisionRecord, SourceSync, read_existing_revision

INTERRUPTED_EXIT_CODE = 130


class Stage(StrEnum):
    """Pipeline stages in execution order."""

    SYNC = "sync"
    BUILD = "build"
    INSTALL = "install"
    PACKAGE = "package"


@dataclass(slots=True)
class PipelineResult:
    """What a run produced and the last stage it completed."""

    revision: RevisionRecord | None = None
    outcome: BuildOutcome | None = None
    installed: Path | None = None
    package: Path | None = None
    last_stage: Stage | None = None


class Orchestrator:
    """Run sync, build, install and package in order for one configuration."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        runner: CommandRunner | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._config = config
        self._runner = runner or default_runner
        self._clock = clock

    def run(self) -> PipelineResult:
        """Execute the pipeline, stopping early for the short-circuit modes.

        Raises:
            BuildClangError: Any fatal stage error, unchanged.
        """

        config = self._config
        started_at = self._clock()
        result = PipelineResult()

        if config.install_only:
            info(f"Reusing build output in {config.build_dir}", use_emoji=config.use_emoji)
            result.revision = read_existing_revision(config, runner=self._runner)
        else:
            result.revision = SourceSync(config, runner=self._runner).run()
            result.last_stage = Stage.SYNC
            if config.update_only:
                return result
            result.outcome = BuildRunner(
                config,
                started_at=started_at,
                runner=self._runner,
                clock=self._clock,
            ).run()
            result.last_stage = Stage.BUILD
            if config.build_only:
                return result

        result.installed = Installer(config, runner=self._runner).run()
        result.last_stage = Stage.INSTALL

        try:
            result.package = Packager(config, runner=self._runner).run(result.revision)
        except PackagingError as exc:
            warn(f"Packaging skipped: {exc}", use_emoji=config.use_emoji)
        else:
            if result.package is not None:
                result.last_stage = Stage.PACKAGE
        return result


def run_pipeline(
    config: BuildConfig,
    *,
    runner: CommandRunner | None = None,
    clock: Clock = time.monotonic,
) -> int:
    """Run the pipeline for *config* and return the process exit status.

    This is the only place where stage errors become user-facing messages.
    """

    started_at = clock()
    try:
        result = Orchestrator(config, runner=runner, clock=clock).run()
    except BuildClangError as exc:
        fail(str(exc), use_emoji=config.use_emoji)
        return 1
    elapsed = format_duration(clock() - started_at)
    ok(f"Finished after the {result.last_stage} stage in {elapsed}", use_emoji=config.use_emoji)
    return 0


def install_interrupt_handler(*, use_emoji: bool = True) -> None:
    """Terminate immediately on SIGINT.

    Child processes share the process group and receive the same signal, so
    nothing is cleaned up here.
    """

    def _handle(_signum: int, _frame: FrameType | None) -> None:
        warn("Interrupted, exiting", use_emoji=use_emoji)
        sys.stdout.flush()
        os._exit(INTERRUPTED_EXIT_CODE)

    signal.signal(signal.SIGINT, _handle)


__all__ = [
    "Orchestrator",
    "PipelineResult",
    "Stage",
    "install_interrupt_handler",
    "run_pipeline",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point for the toolchain build pipeline."""

from __future__ import annotations

import typer

from ..config import resolve_config
from ..errors import ConfigError
from ..logging import fail
from ..orchestrator import install_interrupt_handler, run_pipeline
from .options import (
    ARCH_OPTION,
    BUILD_ONLY_OPTION,
    CONFIG_OPTION,
    EMOJI_OPTION,
    INSTALL_FOLDER_OPTION,
    INSTALL_ONLY_OPTION,
    PACKAGE_OPTION,
    ROOT_OPTION,
    STOCK_OPTION,
    TEST_OPTION,
    UPDATE_ONLY_OPTION,
    VERSION_OPTION,
    build_request,
)

app = typer.Typer(
    name="build-clang",
    help="Fetch, patch, build, install and package a Clang toolchain.",
    add_completion=False,
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def main(
    arch: ARCH_OPTION,
    version: VERSION_OPTION,
    install_folder: INSTALL_FOLDER_OPTION = None,
    build_only: BUILD_ONLY_OPTION = False,
    install_only: INSTALL_ONLY_OPTION = False,
    stock: STOCK_OPTION = False,
    test: TEST_OPTION = False,
    update_only: UPDATE_ONLY_OPTION = False,
    package: PACKAGE_OPTION = None,
    root: ROOT_OPTION = None,
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Build a Clang toolchain for the selected architectures and version."""

    request = build_request(
        arch=arch,
        version=version,
        install_folder=install_folder,
        build_only=build_only,
        install_only=install_only,
        stock=stock,
        test=test,
        update_only=update_only,
        package=package,
        root=root,
        config=config,
        emoji=emoji,
    )
    try:
        resolved = resolve_config(request)
    except ConfigError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=emoji)
        raise typer.Exit(code=1) from exc

    install_interrupt_handler(use_emoji=emoji)
    raise typer.Exit(code=run_pipeline(resolved))


def run() -> None:
    """Console-script entry point."""

    app(prog_name="build-clang")


__all__ = ["app", "main", "run"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that adds a single package behind the safety buffer."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....context import RunContext
from ....install import Installer
from ....prompts import Prompter
from ....registry import PackageResolver
from ....security import SecurityValidator
from ....workflow import AddResult, AddWorkflowOrchestrator, PackageSpec, parse_package_spec
from ..shared import (
    DAYS_OPTION,
    EMOJI_OPTION,
    NPM_FALLBACK_OPTION,
    ROOT_OPTION,
    VERBOSE_OPTION,
    build_overrides,
    build_run_context,
)

PACKAGE_ARGUMENT = Annotated[
    str,
    typer.Argument(
        metavar="PACKAGE[@VERSION]",
        help="Package to add, optionally pinned, e.g. lodash or @types/node@20.1.0.",
        show_default=False,
    ),
]
SAVE_DEV_OPTION = Annotated[
    bool,
    typer.Option("--save-dev", "-D", help="Add the package to devDependencies."),
]


def add_command(
    package: PACKAGE_ARGUMENT,
    save_dev: SAVE_DEV_OPTION = False,
    root: ROOT_OPTION = Path("."),
    days: DAYS_OPTION = None,
    allow_npm_install: NPM_FALLBACK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Add a package at the newest version older than the safety buffer."""

    try:
        spec = parse_package_spec(package, save_dev=save_dev)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="PACKAGE") from exc

    context = build_run_context(
        root.resolve(),
        build_overrides(days=days, allow_npm_install=allow_npm_install),
        use_emoji=emoji,
        verbose=verbose,
    )
    result = _run_add(context, spec)
    raise typer.Exit(code=result.exit_code)


def _run_add(context: RunContext, spec: PackageSpec) -> AddResult:
    prompter = Prompter()
    resolver = PackageResolver(
        context.cutoff,
        context.config.registry,
        safety_buffer_days=context.safety_buffer_days,
    )
    orchestrator = AddWorkflowOrchestrator(
        context,
        resolver=resolver,
        prompter=prompter,
        security=SecurityValidator(context.root, prompter, use_emoji=context.use_emoji),
        installer=Installer(context, prompter),
    )
    return orchestrator.execute(spec)


__all__ = ["add_command"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that installs every dependency from ``package.json`` behind the safety buffer."""

from __future__ import annotations

from pathlib import Path

import typer

from ....context import RunContext
from ....install import Installer
from ....logging import info
from ....models import RunResult
from ....prompts import Prompter
from ....workflow import BootstrapWorkflowOrchestrator
from ..shared import (
    DAYS_OPTION,
    EMOJI_OPTION,
    NPM_FALLBACK_OPTION,
    ROOT_OPTION,
    VERBOSE_OPTION,
    build_overrides,
    build_run_context,
)


def install_command(
    root: ROOT_OPTION = Path("."),
    days: DAYS_OPTION = None,
    allow_npm_install: NPM_FALLBACK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Fresh install from package.json using only versions older than the safety buffer."""

    context = build_run_context(
        root.resolve(),
        build_overrides(days=days, allow_npm_install=allow_npm_install),
        use_emoji=emoji,
        verbose=verbose,
    )
    info(
        f"Safety buffer: {context.safety_buffer_days} days (cutoff {context.cutoff_iso})",
        use_emoji=context.use_emoji,
    )
    result = _run_bootstrap(context)
    raise typer.Exit(code=result.exit_code)


def _run_bootstrap(context: RunContext) -> RunResult:
    installer = Installer(context, Prompter())
    return BootstrapWorkflowOrchestrator(context, installer).execute()


__all__ = ["install_command"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that runs the safety-buffered update workflow."""

from __future__ import annotations

from pathlib import Path

import typer

from ....errors import EXIT_CODE_ERROR, DepGuardError
from ....logging import fail, info
from ....quality import validate_scripts
from ....workflow import WorkflowOrchestrator, build_services
from ..shared import DAYS_OPTION, EMOJI_OPTION, NPM_FALLBACK_OPTION, ROOT_OPTION, VERBOSE_OPTION, build_run_context
from .models import (
    BUILD_OPTION,
    LINT_OPTION,
    SHOW_OPTION,
    TEST_OPTION,
    TYPECHECK_OPTION,
    UpdateOptions,
    build_update_options,
)


def update_command(
    root: ROOT_OPTION = Path("."),
    days: DAYS_OPTION = None,
    lint: LINT_OPTION = None,
    typecheck: TYPECHECK_OPTION = None,
    test: TEST_OPTION = None,
    build: BUILD_OPTION = None,
    show: SHOW_OPTION = False,
    allow_npm_install: NPM_FALLBACK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Update npm dependencies to versions older than the safety buffer."""

    options = build_update_options(
        root=root,
        days=days,
        lint=lint,
        typecheck=typecheck,
        test=test,
        build=build,
        show=show,
        allow_npm_install=allow_npm_install,
        emoji=emoji,
        verbose=verbose,
    )
    _run_update(options)


def _run_update(options: UpdateOptions) -> None:
    """Run the update workflow and exit with its status code.

    Raises:
        typer.Exit: Always, carrying the workflow's exit code.
    """

    context = build_run_context(
        options.root,
        options.overrides(),
        use_emoji=options.use_emoji,
        verbose=options.verbose,
    )
    info(
        f"Safety buffer: {context.safety_buffer_days} days (cutoff {context.cutoff_iso})",
        use_emoji=options.use_emoji,
    )
    if not options.show:
        validate_scripts(context.manifest, context.config.scripts, use_emoji=options.use_emoji)

    try:
        result = WorkflowOrchestrator(context, build_services(context), show=options.show).execute()
    except DepGuardError as exc:
        fail(str(exc), use_emoji=options.use_emoji)
        raise typer.Exit(code=EXIT_CODE_ERROR) from exc
    raise typer.Exit(code=result.exit_code)


__all__ = ["update_command"]

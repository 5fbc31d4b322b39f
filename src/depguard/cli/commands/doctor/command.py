# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Report whether the external tools depguard drives are installed."""

from __future__ import annotations

from pathlib import Path

import typer

from ....doctor import check_prerequisites, report_missing, report_ready, required_tools
from ....errors import EXIT_CODE_ERROR
from ....logging import configure_diagnostics, info, section
from ..shared import EMOJI_OPTION, NPM_FALLBACK_OPTION, ROOT_OPTION, VERBOSE_OPTION, build_overrides, load_configuration


def doctor_command(
    root: ROOT_OPTION = Path("."),
    allow_npm_install: NPM_FALLBACK_OPTION = False,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Check that npm, ncu, npq and scfw are available on PATH."""

    configure_diagnostics(verbose=verbose)
    config = load_configuration(
        root.resolve(),
        build_overrides(days=None, allow_npm_install=allow_npm_install),
        use_emoji=emoji,
    )
    section("Prerequisites")
    for tool in required_tools(use_npm_fallback=config.use_npm_fallback):
        info(f"{tool.executable}: {tool.purpose}", use_emoji=False)

    missing = check_prerequisites(use_npm_fallback=config.use_npm_fallback)
    if missing:
        report_missing(missing, use_emoji=emoji)
        raise typer.Exit(code=EXIT_CODE_ERROR)
    report_ready(use_emoji=emoji)


__all__ = ["doctor_command"]

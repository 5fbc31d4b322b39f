# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Options and start-up helpers shared by the depguard commands."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

import typer

from ...config import DepGuardConfig, load_config
from ...context import RunContext
from ...doctor import check_prerequisites, report_missing
from ...errors import EXIT_CODE_ERROR, ConfigError, ManifestError
from ...logging import configure_diagnostics, fail
from ...manifest import ManifestReader

ROOT_OPTION = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Project directory containing package.json.",
        show_default=False,
    ),
]
DAYS_OPTION = Annotated[
    int | None,
    typer.Option(
        "--days",
        "-d",
        min=0,
        help="Safety buffer in days; versions newer than this are not installed.",
        show_default=False,
    ),
]
NPM_FALLBACK_OPTION = Annotated[
    bool,
    typer.Option(
        "--allow-npm-install",
        help="Install with plain npm when scfw is not available.",
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Emit diagnostic logging."),
]


def build_overrides(
    *,
    days: int | None,
    allow_npm_install: bool,
    scripts: Mapping[str, str | None] | None = None,
) -> dict[str, Any]:
    """Translate CLI flags into a configuration fragment; unset flags stay ``None``."""

    return {
        "safety_buffer_days": days,
        "use_npm_fallback": True if allow_npm_install else None,
        "scripts": dict(scripts or {}),
    }


def load_configuration(root: Path, overrides: Mapping[str, Any], *, use_emoji: bool) -> DepGuardConfig:
    """Load configuration for ``root`` or exit with status 1.

    Raises:
        typer.Exit: When configuration resolution fails.
    """

    try:
        return load_config(root, overrides)
    except ConfigError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_CODE_ERROR) from exc


def ensure_prerequisites(config: DepGuardConfig, *, use_emoji: bool) -> None:
    """Exit with status 1 when a required executable is missing."""

    missing = check_prerequisites(use_npm_fallback=config.use_npm_fallback)
    if missing:
        report_missing(missing, use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_CODE_ERROR)


def build_run_context(
    root: Path,
    overrides: Mapping[str, Any],
    *,
    use_emoji: bool,
    verbose: bool,
) -> RunContext:
    """Configure diagnostics, load configuration and ``package.json`` and check tools.

    Raises:
        typer.Exit: When any start-up check fails.
    """

    configure_diagnostics(verbose=verbose)
    config = load_configuration(root, overrides, use_emoji=use_emoji)
    ensure_prerequisites(config, use_emoji=use_emoji)
    try:
        manifest = ManifestReader.load(root)
    except ManifestError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_CODE_ERROR) from exc
    return RunContext.build(root, config, manifest=manifest, use_emoji=use_emoji)


__all__ = [
    "DAYS_OPTION",
    "EMOJI_OPTION",
    "NPM_FALLBACK_OPTION",
    "ROOT_OPTION",
    "VERBOSE_OPTION",
    "build_overrides",
    "build_run_context",
    "ensure_prerequisites",
    "load_configuration",
]

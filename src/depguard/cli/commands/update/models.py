# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the dependency update CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..shared import build_overrides


def _script_option(name: str, check: str) -> Any:
    return typer.Option(
        f"--{name}",
        metavar="SCRIPT",
        help=f"package.json script that runs the {check}.",
        show_default=False,
    )


LINT_OPTION = Annotated[str | None, _script_option("lint", "linter")]
TYPECHECK_OPTION = Annotated[str | None, _script_option("typecheck", "type checks")]
TEST_OPTION = Annotated[str | None, _script_option("test", "tests")]
BUILD_OPTION = Annotated[str | None, _script_option("build", "build")]
SHOW_OPTION = Annotated[
    bool,
    typer.Option("--show", help="List safe updates without installing anything."),
]


@dataclass(slots=True)
class UpdateOptions:
    """Normalised CLI inputs for the update workflow."""

    root: Path
    days: int | None
    scripts: dict[str, str | None]
    show: bool
    allow_npm_install: bool
    use_emoji: bool
    verbose: bool

    def overrides(self) -> dict[str, Any]:
        return build_overrides(days=self.days, allow_npm_install=self.allow_npm_install, scripts=self.scripts)


def build_update_options(
    *,
    root: Path,
    days: int | None,
    lint: str | None,
    typecheck: str | None,
    test: str | None,
    build: str | None,
    show: bool,
    allow_npm_install: bool,
    emoji: bool,
    verbose: bool,
) -> UpdateOptions:
    """Construct ``UpdateOptions`` from Typer parameters.

    Returns:
        UpdateOptions: Structured CLI options for dependency updates.
    """

    return UpdateOptions(
        root=root.resolve(),
        days=days,
        scripts={"lint": lint, "typecheck": typecheck, "test": test, "build": build},
        show=show,
        allow_npm_install=allow_npm_install,
        use_emoji=emoji,
        verbose=verbose,
    )


__all__ = [
    "BUILD_OPTION",
    "LINT_OPTION",
    "SHOW_OPTION",
    "TEST_OPTION",
    "TYPECHECK_OPTION",
    "UpdateOptions",
    "build_update_options",
]

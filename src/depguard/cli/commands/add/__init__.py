# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Add CLI command package."""

from __future__ import annotations

from typer import Typer

from .command import add_command

__all__ = ["register"]


def register(app: Typer) -> None:
    """Attach the add command to ``app``.

    Args:
        app: Typer application receiving the add command.
    """

    app.command("add")(add_command)

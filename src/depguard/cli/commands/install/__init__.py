# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Install CLI command package."""

from __future__ import annotations

from typer import Typer

from .command import install_command

__all__ = ["register"]


def register(app: Typer) -> None:
    """Attach the install command to ``app``.

    Args:
        app: Typer application receiving the install command.
    """

    app.command("install")(install_command)

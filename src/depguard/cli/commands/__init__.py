# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import add, doctor, install, update

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in CLI commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    update.register(app)
    add.register(app)
    install.register(app)
    doctor.register(app)

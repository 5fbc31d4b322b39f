# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Prerequisite checks for the external tools depguard drives."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Final

from pydantic import BaseModel, ConfigDict

from .logging import fail, info, ok, section
from .process_utils import executable_available


class Prerequisite(BaseModel):
    model_config = ConfigDict(frozen=True)

    executable: str
    purpose: str
    install_hint: str


NPM: Final = Prerequisite(executable="npm", purpose="package manager", install_hint="Install Node.js from nodejs.org")
NCU: Final = Prerequisite(
    executable="ncu",
    purpose="update discovery",
    install_hint="npm install -g npm-check-updates",
)
NPQ: Final = Prerequisite(executable="npq", purpose="security checks", install_hint="npm install -g npq")
SCFW: Final = Prerequisite(
    executable="scfw",
    purpose="supply chain firewall",
    install_hint="pipx install scfw (or: pip install scfw)",
)


def required_tools(*, use_npm_fallback: bool) -> list[Prerequisite]:
    """Return the executables a run needs; ``scfw`` is optional with the npm fallback."""

    tools = [NPM, NCU, NPQ]
    if not use_npm_fallback:
        tools.append(SCFW)
    return tools


def check_prerequisites(
    *,
    use_npm_fallback: bool,
    available: Callable[[str], bool] = executable_available,
) -> list[Prerequisite]:
    """Return the required tools that are not on ``PATH``."""

    return [tool for tool in required_tools(use_npm_fallback=use_npm_fallback) if not available(tool.executable)]


def report_missing(missing: Sequence[Prerequisite], *, use_emoji: bool) -> None:
    section("Missing required tools")
    for tool in missing:
        fail(f"{tool.executable} not found ({tool.purpose})", use_emoji=use_emoji)
        info(f"  {tool.install_hint}", use_emoji=False)


def report_ready(*, use_emoji: bool) -> None:
    ok("All required tools are available", use_emoji=use_emoji)


__all__ = [
    "Prerequisite",
    "check_prerequisites",
    "report_missing",
    "report_ready",
    "required_tools",
]

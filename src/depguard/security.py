# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-package ``npq`` security checks followed by operator confirmation."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .logging import info, ok, section, skip, warn
from .models import SelectionItem
from .process_utils import CommandRunner, default_runner
from .prompts import Prompter


def npq_command(package_spec: str) -> list[str]:
    return ["npq", "install", package_spec, "--dry-run"]


class SecurityValidator:
    """Run ``npq`` for each selection and keep the packages the operator approves."""

    def __init__(
        self,
        root: Path,
        prompter: Prompter,
        *,
        runner: CommandRunner | None = None,
        use_emoji: bool = True,
    ) -> None:
        self._root = root
        self._prompter = prompter
        self._runner = runner or default_runner
        self._use_emoji = use_emoji

    def run_security_check(self, package_spec: str) -> bool:
        info(f"Running npq security check for {package_spec}", use_emoji=self._use_emoji)
        passed = self._runner(npq_command(package_spec), self._root).returncode == 0
        if passed:
            ok("NPQ security check passed", use_emoji=self._use_emoji)
        else:
            warn(f"NPQ security check failed for {package_spec}", use_emoji=self._use_emoji)
        return passed

    def validate_and_confirm(self, item: SelectionItem) -> bool:
        """Check ``item`` and ask whether to install it; a failed check can still be approved."""

        section(f"Processing {item.spec}")
        passed = self.run_security_check(item.spec)
        status = "[green](NPQ: passed)[/green]" if passed else "[red](NPQ: failed)[/red]"
        confirmed = self._prompter.confirm(f"Install [bold]{item.spec}[/bold]? {status}", default=False)
        if not confirmed:
            skip(f"Skipping {item.spec}", use_emoji=self._use_emoji)
        return confirmed

    def process_selection(self, selected: Iterable[SelectionItem]) -> list[SelectionItem]:
        return [item for item in selected if self.validate_and_confirm(item)]


__all__ = ["SecurityValidator", "npq_command"]

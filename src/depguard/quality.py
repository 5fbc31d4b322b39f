# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run the project's lint, typecheck, test and build scripts after an update."""

from __future__ import annotations

from typing import Final

from .config import ScriptNames
from .context import RunContext
from .logging import fail, info, ok, section, skip, warn
from .manifest import ManifestReader
from .models import ServiceResult
from .process_utils import CommandRunner, default_runner
from .prompts import Prompter

QUALITY_CHECKS: Final[tuple[str, ...]] = ("lint", "typecheck", "test")

CHECK_TITLES: Final[dict[str, str]] = {
    "lint": "linter",
    "typecheck": "type checks",
    "test": "tests",
    "build": "build",
}


def validate_scripts(manifest: ManifestReader, scripts: ScriptNames, *, use_emoji: bool = True) -> dict[str, bool]:
    """Warn once about configured scripts that ``package.json`` does not define.

    Returns:
        dict[str, bool]: Availability of each configured script keyed by check name.
    """

    available = {check: manifest.has_script(name) for check, name in scripts.items()}
    missing = [f'{check}: "{name}"' for check, name in scripts.items() if not available[check]]
    if missing:
        warn("The following scripts were not found in package.json:", use_emoji=use_emoji)
        for entry in missing:
            info(f"  - {entry}", use_emoji=False)
        info(
            "These quality checks will be skipped. Use --lint, --typecheck, --test, --build "
            "to specify custom script names.",
            use_emoji=use_emoji,
        )
    return available


class QualityRunner:
    """Run each configured ``npm run`` script after asking the operator."""

    def __init__(
        self,
        context: RunContext,
        prompter: Prompter,
        *,
        runner: CommandRunner | None = None,
    ) -> None:
        self._context = context
        self._prompter = prompter
        self._runner = runner or default_runner
        self._use_emoji = context.use_emoji

    def _script_for(self, check: str) -> str:
        return dict(self._context.config.scripts.items())[check]

    def run_check(self, check: str) -> ServiceResult:
        """Run the script configured for ``check``.

        Returns:
            ServiceResult: ``SKIPPED`` when the script is missing or declined.
        """

        title = CHECK_TITLES[check]
        script = self._script_for(check)
        if not self._context.manifest.has_script(script):
            skip(f'Skipping {title} (script "{script}" not found)', use_emoji=self._use_emoji)
            return ServiceResult.SKIPPED

        section(f"Running {title}")
        if not self._prompter.confirm(f"Do you want to run {title} (npm run {script})?", default=False):
            skip(f"Skipping {title}", use_emoji=self._use_emoji)
            return ServiceResult.SKIPPED

        completed = self._runner(["npm", "run", script], self._context.root)
        if completed.returncode == 0:
            ok(f"{title.capitalize()} passed", use_emoji=self._use_emoji)
            return ServiceResult.SUCCEEDED
        fail(f"{title.capitalize()} failed", use_emoji=self._use_emoji)
        return ServiceResult.FAILED

    def run_all(self) -> dict[str, ServiceResult]:
        results = {check: self.run_check(check) for check in QUALITY_CHECKS}
        failures = [CHECK_TITLES[check] for check, result in results.items() if result is ServiceResult.FAILED]
        if failures:
            warn(f"Quality checks completed with failures: {', '.join(failures)}", use_emoji=self._use_emoji)
        else:
            ok("Quality checks complete!", use_emoji=self._use_emoji)
        return results

    def run_build(self) -> ServiceResult:
        return self.run_check("build")


__all__ = ["CHECK_TITLES", "QUALITY_CHECKS", "QualityRunner", "validate_scripts"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Install selected packages and reinstall the lockfile."""

from __future__ import annotations

from collections.abc import Sequence

from .context import RunContext
from .logging import fail, info, ok, section, skip
from .models import SelectionItem, ServiceResult
from .process_utils import CommandRunner, default_runner
from .prompts import Prompter

REINSTALL_COMMAND: tuple[str, ...] = ("npm", "ci", "--ignore-scripts")


def build_install_command(
    specs: Sequence[str],
    cutoff_iso: str,
    *,
    use_npm_fallback: bool = False,
    save_dev: bool = False,
) -> list[str]:
    """Return the install command line for ``specs``.

    Installs go through ``scfw`` unless the npm fallback is enabled. ``--before``
    pins transitive resolution to the same cutoff as the safety buffer.
    """

    prefix = ["npm"] if use_npm_fallback else ["scfw", "run", "npm"]
    args = [*prefix, "install", *specs, "--save-exact", "--ignore-scripts", "--before", cutoff_iso]
    if save_dev:
        args.append("--save-dev")
    return args


def build_bootstrap_command(cutoff_iso: str, *, use_npm_fallback: bool = False) -> list[str]:
    """Return the fresh-install command that resolves everything in ``package.json``."""

    prefix = ["npm"] if use_npm_fallback else ["scfw", "run", "npm"]
    return [*prefix, "install", "--ignore-scripts", "--before", cutoff_iso]


class Installer:
    """Run installs for confirmed packages followed by a clean ``npm ci``."""

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

    def install_packages(self, packages: Sequence[SelectionItem], *, save_dev: bool = False) -> ServiceResult:
        """Install ``packages`` with exact versions.

        Returns:
            ServiceResult: ``SKIPPED`` when there is nothing to install or the
            operator declines, otherwise the outcome of the install command.
        """

        if not packages:
            return ServiceResult.SKIPPED
        specs = [item.spec for item in packages]
        section("Installing packages")
        for spec in specs:
            info(f"  {spec}", use_emoji=False)
        if not self._prompter.confirm(f"Install {len(specs)} package(s)?", default=True):
            skip("Skipping installation", use_emoji=self._use_emoji)
            return ServiceResult.SKIPPED

        command = build_install_command(
            specs,
            self._context.cutoff_iso,
            use_npm_fallback=self._context.config.use_npm_fallback,
            save_dev=save_dev,
        )
        completed = self._runner(command, self._context.root)
        if completed.returncode == 0:
            ok(f"Installed {', '.join(specs)}", use_emoji=self._use_emoji)
            return ServiceResult.SUCCEEDED
        fail(f"Installation failed (exit code {completed.returncode})", use_emoji=self._use_emoji)
        return ServiceResult.FAILED

    def reinstall(self) -> ServiceResult:
        section("Reinstalling dependencies")
        if not self._prompter.confirm("Do you want to reinstall dependencies with npm ci?", default=False):
            skip("Skipping npm ci", use_emoji=self._use_emoji)
            return ServiceResult.SKIPPED
        completed = self._runner(REINSTALL_COMMAND, self._context.root)
        if completed.returncode == 0:
            ok("Dependencies reinstalled successfully", use_emoji=self._use_emoji)
            return ServiceResult.SUCCEEDED
        fail("Failed to reinstall dependencies", use_emoji=self._use_emoji)
        return ServiceResult.FAILED

    def bootstrap(self) -> ServiceResult:
        """Install everything declared in ``package.json`` behind the cutoff.

        Returns:
            ServiceResult: ``SKIPPED`` when the operator declines, otherwise the
            outcome of the install command.
        """

        use_npm_fallback = self._context.config.use_npm_fallback
        method = "npm install" if use_npm_fallback else "scfw run npm install"
        section("Fresh install from package.json")
        info(f"This will run '{method} --ignore-scripts --before <date>' to:", use_emoji=self._use_emoji)
        info("  • Install all dependencies from package.json", use_emoji=False)
        info("  • Regenerate package-lock.json", use_emoji=False)
        info(
            f"  • Only install versions published before {self._context.cutoff:%Y-%m-%d} "
            f"({self._context.safety_buffer_days} day safety buffer)",
            use_emoji=False,
        )
        if not self._prompter.confirm("Do you want to proceed with fresh install?", default=True):
            skip("Skipping fresh install", use_emoji=self._use_emoji)
            return ServiceResult.SKIPPED

        info(f"Installing dependencies via {'npm' if use_npm_fallback else 'scfw'}...", use_emoji=self._use_emoji)
        command = build_bootstrap_command(self._context.cutoff_iso, use_npm_fallback=use_npm_fallback)
        completed = self._runner(command, self._context.root)
        if completed.returncode == 0:
            ok("Dependencies installed successfully", use_emoji=self._use_emoji)
            return ServiceResult.SUCCEEDED
        fail(f"Failed to install dependencies (exit code {completed.returncode})", use_emoji=self._use_emoji)
        return ServiceResult.FAILED


__all__ = ["REINSTALL_COMMAND", "Installer", "build_bootstrap_command", "build_install_command"]

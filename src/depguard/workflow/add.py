# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Add a single new dependency behind the same safety buffer as updates."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..constants import PACKAGE_NAME_PATTERN, SCOPED_PACKAGE_PATTERN
from ..context import RunContext
from ..errors import (
    EXIT_CODE_CANCELLED,
    EXIT_CODE_ERROR,
    EXIT_CODE_SUCCESS,
    DepGuardError,
    InstallationFailureError,
    RegistryError,
    UserCancellationError,
)
from ..logging import fail, info, ok, summary_table, warn
from ..manifest import DependencyLocation
from ..models import SelectionItem, ServiceResult
from ..prompts import Prompter
from ..registry import PackageResolver, VersionResolution
from ..versions import clean_version, is_semver
from .services import InstallService, SecurityService
from .steps import OPERATION_INSTALL, OPERATION_REINSTALL


class PackageSpec(BaseModel):
    """Package requested on the command line, optionally pinned to a version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None
    save_dev: bool = False

    @property
    def target_location(self) -> DependencyLocation:
        return DependencyLocation.DEV_DEPENDENCIES if self.save_dev else DependencyLocation.DEPENDENCIES


def parse_package_spec(text: str, *, save_dev: bool = False) -> PackageSpec:
    """Parse ``name``, ``name@1.2.3``, ``@scope/name`` or ``@scope/name@1.2.3``.

    Raises:
        ValueError: When the name or version is malformed.
    """

    raw = text.strip()
    scoped = raw.startswith("@")
    body = raw[1:] if scoped else raw
    name_part, sep, version = body.partition("@")
    name = f"@{name_part}" if scoped else name_part
    pattern = SCOPED_PACKAGE_PATTERN if scoped else PACKAGE_NAME_PATTERN
    if not pattern.match(name):
        raise ValueError(f"Invalid package name: {name or raw!r}")
    if sep and not version:
        raise ValueError(f"Missing version after '@' in {raw!r}")
    if version and not is_semver(version):
        raise ValueError(f"Invalid version {version!r}; expected MAJOR.MINOR.PATCH")
    return PackageSpec(name=name, version=version or None, save_dev=save_dev)


class AddedPackage(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    location: DependencyLocation
    age_days: int
    was_specified: bool


class AddResult(BaseModel):
    success: bool
    exit_code: int
    error_message: str | None = None
    package: AddedPackage | None = None


class AddDeclinedError(DepGuardError):
    """Raised inside the add workflow when the operator stops without an error."""


class AddWorkflowOrchestrator:
    """Resolve, check, validate and install one package.

    Declines end with exit code 0, failures with 1 and cancellation with 130.
    """

    def __init__(
        self,
        context: RunContext,
        *,
        resolver: PackageResolver,
        prompter: Prompter,
        security: SecurityService,
        installer: InstallService,
    ) -> None:
        self._context = context
        self._resolver = resolver
        self._prompter = prompter
        self._security = security
        self._installer = installer
        self._use_emoji = context.use_emoji

    def execute(self, spec: PackageSpec) -> AddResult:
        info(f"Adding package: {spec.name}", use_emoji=self._use_emoji)
        try:
            resolved = self._resolve(spec)
            self._check_existing(spec, resolved)
            item = SelectionItem(name=resolved.package_name, version=resolved.version)
            if not self._security.validate_and_confirm(item):
                raise AddDeclinedError("Security validation failed or user cancelled")
            self._install(item, save_dev=spec.save_dev)
        except UserCancellationError:
            warn("Operation cancelled by user", use_emoji=self._use_emoji)
            return AddResult(success=False, exit_code=EXIT_CODE_CANCELLED, error_message="User cancelled")
        except AddDeclinedError as exc:
            info(str(exc), use_emoji=self._use_emoji)
            return AddResult(success=False, exit_code=EXIT_CODE_SUCCESS, error_message=str(exc))
        except (RegistryError, InstallationFailureError) as exc:
            fail(str(exc), use_emoji=self._use_emoji)
            return AddResult(success=False, exit_code=EXIT_CODE_ERROR, error_message=str(exc))

        added = AddedPackage(
            name=resolved.package_name,
            version=resolved.version,
            location=spec.target_location,
            age_days=resolved.age_days,
            was_specified=spec.version is not None and resolved.version == spec.version,
        )
        self._show_summary(added)
        return AddResult(success=True, exit_code=EXIT_CODE_SUCCESS, package=added)

    def _resolve(self, spec: PackageSpec) -> VersionResolution:
        if spec.version is None:
            return self._resolve_latest(spec.name)

        requested = self._resolver.validate_version(spec.name, spec.version)
        if not requested.too_new:
            ok(f"Validated {requested.spec} ({requested.age_days} days old)", use_emoji=self._use_emoji)
            return requested

        days = self._context.safety_buffer_days
        warn(
            f"Version {spec.version} of {spec.name} was published only {requested.age_days} days ago",
            use_emoji=self._use_emoji,
        )
        info(f"Safety buffer requires versions to be at least {days} days old", use_emoji=self._use_emoji)
        action = self._prompter.choose(
            "What would you like to do?",
            {
                "latest": f"Use the latest version that is at least {days} days old",
                "continue": "Install the requested version despite being too new",
                "cancel": "Don't install this package",
            },
            default="latest",
        )
        if action == "cancel":
            raise AddDeclinedError("Installation cancelled by user")
        if action == "continue":
            ok(f"Using {requested.spec}", use_emoji=self._use_emoji)
            return requested
        return self._resolve_latest(spec.name)

    def _resolve_latest(self, name: str) -> VersionResolution:
        resolved = self._resolver.resolve_latest_safe_version(name)
        ok(f"Resolved {resolved.spec} ({resolved.age_days} days old)", use_emoji=self._use_emoji)
        return resolved

    def _check_existing(self, spec: PackageSpec, resolved: VersionResolution) -> None:
        manifest = self._context.manifest
        location = manifest.location_of(spec.name)
        if location is None:
            info(f"Package {spec.name} not found in package.json", use_emoji=self._use_emoji)
            return

        current = manifest.get_package_version(spec.name) or ""
        target = spec.target_location
        info(f"Package {spec.name} already exists:", use_emoji=self._use_emoji)
        info(f"  Current: {current} in {location.value}", use_emoji=False)
        info(f"  New:     {resolved.version}", use_emoji=False)
        info(f"  Target:  {target.value}", use_emoji=False)

        same_version = clean_version(current) == resolved.version
        if same_version and location is target:
            raise AddDeclinedError(f"Package {resolved.spec} is already installed in {target.value}")

        if same_version:
            update_text = f"Move to {target.value}"
        elif location is not target:
            update_text = f"Update to {resolved.version} and move to {target.value}"
        else:
            update_text = f"Update to {resolved.version}"
        action = self._prompter.choose(
            "What would you like to do?",
            {
                "update": update_text,
                "keep": f"Keep {current} in {location.value}",
                "cancel": "Don't modify this package",
            },
            default="update",
        )
        if action == "cancel":
            raise AddDeclinedError("Installation cancelled by user")
        if action == "keep":
            raise AddDeclinedError(f"Keeping {spec.name}@{current}")
        ok(f"Will update {spec.name} to {resolved.version}", use_emoji=self._use_emoji)

    def _install(self, item: SelectionItem, *, save_dev: bool) -> None:
        result = self._installer.install_packages([item], save_dev=save_dev)
        if result is ServiceResult.SKIPPED:
            raise AddDeclinedError(f"Installation of {item.spec} declined")
        if result is ServiceResult.FAILED:
            raise InstallationFailureError(OPERATION_INSTALL, f"Installation failed for {item.spec}")
        if self._installer.reinstall() is ServiceResult.FAILED:
            raise InstallationFailureError(
                OPERATION_REINSTALL,
                "Failed to reinstall dependencies after adding package",
            )

    def _show_summary(self, added: AddedPackage) -> None:
        ok(f"Successfully added {added.name}@{added.version}!", use_emoji=self._use_emoji)
        summary_table(
            "PACKAGE ADDED",
            {
                "Package": added.name,
                "Version": added.version,
                "Installed to": added.location.value,
                "Age": f"{added.age_days} days",
            },
            use_emoji=self._use_emoji,
        )


__all__ = [
    "AddDeclinedError",
    "AddResult",
    "AddWorkflowOrchestrator",
    "AddedPackage",
    "PackageSpec",
    "parse_package_spec",
]

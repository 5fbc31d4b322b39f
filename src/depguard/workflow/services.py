# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collaborator protocols used by workflow steps and their default wiring."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..choices import PromptChoice
from ..context import RunContext
from ..discovery import UpdateDiscovery
from ..install import Installer
from ..manifest import ManifestReader
from ..models import SafetyDecision, SelectionItem, ServiceResult, UpdateCandidate
from ..prompts import Prompter, RichPicker
from ..quality import QualityRunner
from ..registry import HttpSession, RegistryGateway
from ..safety import SafetyBufferFilter
from ..security import SecurityValidator


class DiscoveryService(Protocol):
    def candidates(self, manifest: ManifestReader) -> list[UpdateCandidate]: ...


class SafetyService(Protocol):
    def apply(self, candidates: Iterable[UpdateCandidate]) -> list[SafetyDecision]: ...


class PickerService(Protocol):
    def select(self, choices: Sequence[PromptChoice]) -> list[SelectionItem]: ...


class SecurityService(Protocol):
    def validate_and_confirm(self, item: SelectionItem) -> bool: ...

    def process_selection(self, selected: Iterable[SelectionItem]) -> list[SelectionItem]: ...


class InstallService(Protocol):
    def install_packages(self, packages: Sequence[SelectionItem], *, save_dev: bool = False) -> ServiceResult: ...

    def reinstall(self) -> ServiceResult: ...


class BootstrapService(Protocol):
    def bootstrap(self) -> ServiceResult: ...


class QualityService(Protocol):
    def run_all(self) -> dict[str, ServiceResult]: ...

    def run_build(self) -> ServiceResult: ...


@dataclass(slots=True)
class WorkflowServices:
    """External collaborators the update pipeline drives."""

    discovery: DiscoveryService
    safety: SafetyService
    picker: PickerService
    security: SecurityService
    installer: InstallService
    quality: QualityService


def build_services(
    context: RunContext,
    *,
    prompter: Prompter | None = None,
    session: HttpSession | None = None,
) -> WorkflowServices:
    """Wire the production collaborators for ``context``."""

    active_prompter = prompter or Prompter()
    gateway = RegistryGateway(context.config.registry, session=session)
    return WorkflowServices(
        discovery=UpdateDiscovery(context.root, use_emoji=context.use_emoji),
        safety=SafetyBufferFilter(
            gateway,
            context.cutoff,
            days=context.safety_buffer_days,
            use_emoji=context.use_emoji,
        ),
        picker=RichPicker(active_prompter, page_size=context.config.prompt_page_size),
        security=SecurityValidator(context.root, active_prompter, use_emoji=context.use_emoji),
        installer=Installer(context, active_prompter),
        quality=QualityRunner(context, active_prompter),
    )


__all__ = [
    "BootstrapService",
    "DiscoveryService",
    "InstallService",
    "PickerService",
    "QualityService",
    "SafetyService",
    "SecurityService",
    "WorkflowServices",
    "build_services",
]

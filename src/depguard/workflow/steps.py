# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""The ordered steps of the update pipeline.

Each step consumes the previous step's output and returns a
:class:`~depguard.models.StepOutcome`. Steps never handle cancellation;
:class:`~depguard.errors.UserCancellationError` propagates to the orchestrator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

from ..choices import PromptChoice, build_choices
from ..context import RunContext
from ..logging import info, ok, warn
from ..models import (
    ExitReason,
    GroupedUpdates,
    RunStatistics,
    SafetyDecision,
    SelectionItem,
    ServiceResult,
    StepOutcome,
    UpdateCandidate,
)
from ..versions import group_by_bump
from .services import WorkflowServices

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

OPERATION_INSTALL = "install"
OPERATION_REINSTALL = "reinstall"


@dataclass(slots=True)
class StepContext:
    """Shared state handed to every step; ``stats`` is owned by the orchestrator."""

    run: RunContext
    services: WorkflowServices
    stats: RunStatistics

    @property
    def use_emoji(self) -> bool:
        return self.run.use_emoji


@dataclass(frozen=True, slots=True)
class OrganizedUpdates:
    grouped: GroupedUpdates
    choices: list[PromptChoice]


class WorkflowStep(ABC, Generic[InputT, OutputT]):
    """A single named stage of the pipeline."""

    name: ClassVar[str]
    label: ClassVar[str]

    @abstractmethod
    def execute(self, data: InputT, context: StepContext) -> StepOutcome[OutputT]:
        """Run the step against ``data``."""


class CheckUpdatesStep(WorkflowStep[None, list[UpdateCandidate]]):
    name = "CheckUpdates"
    label = "Checking for updates"

    def execute(self, data: None, context: StepContext) -> StepOutcome[list[UpdateCandidate]]:
        candidates = context.services.discovery.candidates(context.run.manifest)
        if not candidates:
            ok("All dependencies are up to date", use_emoji=context.use_emoji)
            return StepOutcome.exit_with(ExitReason.NO_UPDATES_AVAILABLE)
        context.stats.candidates_found = len(candidates)
        info(f"Found {len(candidates)} potential update(s)", use_emoji=context.use_emoji)
        return StepOutcome.continue_with(candidates)


class SafetyBufferStep(WorkflowStep[list[UpdateCandidate], list[SafetyDecision]]):
    name = "SafetyBuffer"
    label = "Applying safety buffer"

    def execute(self, data: list[UpdateCandidate], context: StepContext) -> StepOutcome[list[SafetyDecision]]:
        eligible = [decision for decision in context.services.safety.apply(data) if decision.eligible]
        if not eligible:
            warn(
                f"No updates are at least {context.run.safety_buffer_days} days old",
                use_emoji=context.use_emoji,
            )
            return StepOutcome.exit_with(ExitReason.ALL_UPDATES_FILTERED)
        context.stats.candidates_after_filter = len(eligible)
        ok(f"{len(eligible)} update(s) passed the safety buffer", use_emoji=context.use_emoji)
        return StepOutcome.continue_with(eligible)


class OrganizeStep(WorkflowStep[list[SafetyDecision], OrganizedUpdates]):
    name = "Organize"
    label = "Organizing updates"

    def execute(self, data: list[SafetyDecision], context: StepContext) -> StepOutcome[OrganizedUpdates]:
        grouped = group_by_bump(data)
        info(
            f"Patch: {len(grouped.patch)}, Minor: {len(grouped.minor)}, Major: {len(grouped.major)}",
            use_emoji=context.use_emoji,
        )
        return StepOutcome.continue_with(OrganizedUpdates(grouped=grouped, choices=build_choices(grouped)))


class SelectStep(WorkflowStep[OrganizedUpdates, list[SelectionItem]]):
    name = "Select"
    label = "Selecting packages"

    def execute(self, data: OrganizedUpdates, context: StepContext) -> StepOutcome[list[SelectionItem]]:
        selected = context.services.picker.select(data.choices)
        if not selected:
            warn("No packages selected", use_emoji=context.use_emoji)
            return StepOutcome.exit_with(ExitReason.NO_PACKAGES_SELECTED)
        context.stats.selected = len(selected)
        ok(f"Selected {len(selected)} package(s) for update", use_emoji=context.use_emoji)
        return StepOutcome.continue_with(selected)


class SecurityValidationStep(WorkflowStep[list[SelectionItem], list[SelectionItem]]):
    name = "SecurityValidation"
    label = "Validating security"

    def execute(self, data: list[SelectionItem], context: StepContext) -> StepOutcome[list[SelectionItem]]:
        confirmed = context.services.security.process_selection(data)
        if not confirmed:
            warn("No packages confirmed for installation", use_emoji=context.use_emoji)
            return StepOutcome.exit_with(ExitReason.NO_PACKAGES_CONFIRMED)
        return StepOutcome.continue_with(confirmed)


class InstallStep(WorkflowStep[list[SelectionItem], list[SelectionItem]]):
    name = "Install"
    label = "Installing packages"

    def execute(self, data: list[SelectionItem], context: StepContext) -> StepOutcome[list[SelectionItem]]:
        result = context.services.installer.install_packages(data)
        if result is ServiceResult.FAILED:
            return StepOutcome.exit_with(ExitReason.INSTALL_FAILED, failed_operation=OPERATION_INSTALL)
        if result is ServiceResult.SKIPPED:
            warn("Installation declined", use_emoji=context.use_emoji)
            return StepOutcome.exit_with(ExitReason.NO_PACKAGES_CONFIRMED)
        context.stats.installed = len(data)
        return StepOutcome.continue_with(data)


class ReinstallStep(WorkflowStep[list[SelectionItem], list[SelectionItem]]):
    name = "Reinstall"
    label = "Reinstalling dependencies"

    def execute(self, data: list[SelectionItem], context: StepContext) -> StepOutcome[list[SelectionItem]]:
        if context.services.installer.reinstall() is ServiceResult.FAILED:
            return StepOutcome.exit_with(ExitReason.INSTALL_FAILED, failed_operation=OPERATION_REINSTALL)
        return StepOutcome.continue_with(data)


class QualityChecksStep(WorkflowStep[list[SelectionItem], list[SelectionItem]]):
    name = "QualityChecks"
    label = "Running quality checks"

    def execute(self, data: list[SelectionItem], context: StepContext) -> StepOutcome[list[SelectionItem]]:
        for check, result in context.services.quality.run_all().items():
            if result is ServiceResult.FAILED:
                context.stats.record_failed_check(check)
        return StepOutcome.continue_with(data)


class BuildVerificationStep(WorkflowStep[list[SelectionItem], list[SelectionItem]]):
    name = "BuildVerification"
    label = "Verifying build"

    def execute(self, data: list[SelectionItem], context: StepContext) -> StepOutcome[list[SelectionItem]]:
        if context.services.quality.run_build() is ServiceResult.FAILED:
            context.stats.record_failed_check("build")
        return StepOutcome.continue_with(data)


def default_steps() -> list[WorkflowStep]:
    return [
        CheckUpdatesStep(),
        SafetyBufferStep(),
        OrganizeStep(),
        SelectStep(),
        SecurityValidationStep(),
        InstallStep(),
        ReinstallStep(),
        QualityChecksStep(),
        BuildVerificationStep(),
    ]


__all__ = [
    "OPERATION_INSTALL",
    "OPERATION_REINSTALL",
    "BuildVerificationStep",
    "CheckUpdatesStep",
    "InstallStep",
    "OrganizeStep",
    "OrganizedUpdates",
    "QualityChecksStep",
    "ReinstallStep",
    "SafetyBufferStep",
    "SecurityValidationStep",
    "SelectStep",
    "StepContext",
    "WorkflowStep",
    "default_steps",
]

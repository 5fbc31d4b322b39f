# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data models shared by the update and add workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import EXIT_CODE_CANCELLED, EXIT_CODE_ERROR, EXIT_CODE_SUCCESS

T = TypeVar("T")


class UpdateCandidate(BaseModel):
    """Package for which the update tool reports a newer version."""

    model_config = ConfigDict(frozen=True)

    name: str
    installed_range: str
    suggested_version: str


class SafetyReason(str, Enum):
    SAFE = "safe"
    TOO_NEW = "too-new"
    REGISTRY_UNREACHABLE = "registry-unreachable"
    MATCHES_INSTALLED = "matches-installed"


class SafetyDecision(BaseModel):
    """Outcome of applying the safety buffer to a single candidate."""

    model_config = ConfigDict(frozen=True)

    name: str
    installed_range: str
    suggested_version: str
    chosen_version: str | None
    reason: SafetyReason

    @model_validator(mode="after")
    def _check_chosen_version(self) -> SafetyDecision:
        excluded = self.reason in {SafetyReason.TOO_NEW, SafetyReason.MATCHES_INSTALLED}
        if excluded != (self.chosen_version is None):
            raise ValueError(f"chosen_version is inconsistent with reason {self.reason.value}")
        return self

    @property
    def eligible(self) -> bool:
        return self.chosen_version is not None


class VersionBump(str, Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def rank(self) -> int:
        """Display priority; larger means riskier."""

        return _BUMP_RANK[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_BUMP_RANK = {VersionBump.PATCH: 0, VersionBump.MINOR: 1, VersionBump.MAJOR: 2}


class PackageUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    current_version: str
    new_version: str


class GroupedUpdates(BaseModel):
    """Eligible updates partitioned by bump kind, each list in input order."""

    model_config = ConfigDict(validate_assignment=True)

    major: list[PackageUpdate] = Field(default_factory=list)
    minor: list[PackageUpdate] = Field(default_factory=list)
    patch: list[PackageUpdate] = Field(default_factory=list)

    def group(self, bump: VersionBump) -> list[PackageUpdate]:
        return getattr(self, bump.value)

    def flatten(self) -> list[PackageUpdate]:
        """Return updates in patch, minor, major order."""

        return [*self.patch, *self.minor, *self.major]

    @property
    def total(self) -> int:
        return len(self.major) + len(self.minor) + len(self.patch)


class SelectionItem(BaseModel):
    """A package and version chosen by the operator."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @property
    def spec(self) -> str:
        return f"{self.name}@{self.version}"


class ServiceResult(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def from_success(cls, success: bool) -> ServiceResult:
        return cls.SUCCEEDED if success else cls.FAILED


class ExitReason(str, Enum):
    NO_UPDATES_AVAILABLE = "no_updates_available"
    ALL_UPDATES_FILTERED = "all_updates_filtered"
    NO_PACKAGES_SELECTED = "no_packages_selected"
    NO_PACKAGES_CONFIRMED = "no_packages_confirmed"
    INSTALL_FAILED = "install_failed"
    COMPLETED = "completed"
    USER_CANCELLED = "user_cancelled"


@dataclass(frozen=True, slots=True)
class StepOutcome(Generic[T]):
    """Result of a workflow step; ``proceed=False`` ends the run."""

    proceed: bool
    data: T | None = None
    exit_reason: ExitReason | None = None
    failed_operation: str | None = None

    @classmethod
    def continue_with(cls, data: T) -> StepOutcome[T]:
        return cls(proceed=True, data=data)

    @classmethod
    def exit_with(cls, reason: ExitReason, *, failed_operation: str | None = None) -> StepOutcome[T]:
        return cls(proceed=False, exit_reason=reason, failed_operation=failed_operation)


class RunStatistics(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    candidates_found: int = 0
    candidates_after_filter: int = 0
    selected: int = 0
    installed: int = 0
    skipped: int = 0
    duration_ms: int = 0
    failed_checks: list[str] = Field(default_factory=list)

    def record_failed_check(self, name: str) -> None:
        self.failed_checks = [*self.failed_checks, name]


class RunResult(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    success: bool
    exit_code: int
    reason: ExitReason
    stats: RunStatistics = Field(default_factory=RunStatistics)
    failed_operation: str | None = None

    @classmethod
    def early_exit(cls, reason: ExitReason, stats: RunStatistics) -> RunResult:
        return cls(success=True, exit_code=EXIT_CODE_SUCCESS, reason=reason, stats=stats)

    @classmethod
    def completed(cls, stats: RunStatistics) -> RunResult:
        return cls(success=True, exit_code=EXIT_CODE_SUCCESS, reason=ExitReason.COMPLETED, stats=stats)

    @classmethod
    def failure(
        cls,
        reason: ExitReason,
        stats: RunStatistics,
        *,
        failed_operation: str | None = None,
    ) -> RunResult:
        return cls(
            success=False,
            exit_code=EXIT_CODE_ERROR,
            reason=reason,
            stats=stats,
            failed_operation=failed_operation,
        )

    @classmethod
    def cancelled(cls, stats: RunStatistics) -> RunResult:
        return cls(
            success=False,
            exit_code=EXIT_CODE_CANCELLED,
            reason=ExitReason.USER_CANCELLED,
            stats=stats,
        )


__all__ = [
    "ExitReason",
    "GroupedUpdates",
    "PackageUpdate",
    "RunResult",
    "RunStatistics",
    "SafetyDecision",
    "SafetyReason",
    "SelectionItem",
    "ServiceResult",
    "StepOutcome",
    "UpdateCandidate",
    "VersionBump",
]

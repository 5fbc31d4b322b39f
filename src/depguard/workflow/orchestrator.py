# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Drive the update pipeline and fold its outcome into a :class:`RunResult`."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from ..choices import GROUP_ORDER, format_version_change
from ..context import RunContext
from ..errors import UserCancellationError
from ..logging import fail, info, section, step, summary_table, warn
from ..models import GroupedUpdates, RunResult, RunStatistics, StepOutcome
from ..versions import max_name_length
from .services import WorkflowServices
from .steps import OrganizedUpdates, OrganizeStep, StepContext, WorkflowStep, default_steps

_LOGGER = logging.getLogger(__name__)


class WorkflowOrchestrator:
    """Run the update steps in order and map the terminal state to a result.

    This is the only place that converts :class:`UserCancellationError` into a
    result; every other exception propagates to the caller.
    """

    def __init__(
        self,
        context: RunContext,
        services: WorkflowServices,
        *,
        show: bool = False,
        steps: Sequence[WorkflowStep] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._context = context
        self._services = services
        self._show = show
        self._steps = list(steps) if steps is not None else default_steps()
        self._clock = clock

    def execute(self) -> RunResult:
        started = self._clock()
        stats = RunStatistics()
        try:
            return self._run_steps(stats, started)
        except UserCancellationError:
            warn("Operation cancelled by user", use_emoji=self._context.use_emoji)
            self._finish(stats, started)
            return RunResult.cancelled(stats)

    def _run_steps(self, stats: RunStatistics, started: float) -> RunResult:
        step_context = StepContext(run=self._context, services=self._services, stats=stats)
        data: Any = None
        total = len(self._steps)
        for number, current in enumerate(self._steps, start=1):
            step(number, total, current.label)
            _LOGGER.debug("entering step %s", current.name)
            outcome: StepOutcome[Any] = current.execute(data, step_context)
            if not outcome.proceed:
                return self._early_result(outcome, stats, started)
            data = outcome.data
            if self._show and isinstance(current, OrganizeStep):
                return self._show_result(data, stats, started)
        return self._completed_result(stats, started)

    def _finish(self, stats: RunStatistics, started: float) -> None:
        stats.skipped = max(stats.selected - stats.installed, 0)
        stats.duration_ms = int((self._clock() - started) * 1000)

    def _early_result(self, outcome: StepOutcome[Any], stats: RunStatistics, started: float) -> RunResult:
        self._finish(stats, started)
        reason = outcome.exit_reason
        if reason is None:
            raise RuntimeError("step stopped the workflow without an exit reason")
        if outcome.failed_operation is not None:
            fail(f"{outcome.failed_operation} failed; update process aborted", use_emoji=self._context.use_emoji)
            return RunResult.failure(reason, stats, failed_operation=outcome.failed_operation)
        return RunResult.early_exit(reason, stats)

    def _completed_result(self, stats: RunStatistics, started: float) -> RunResult:
        self._finish(stats, started)
        rows: dict[str, object] = {
            "Packages updated": stats.installed,
            "Packages skipped": stats.skipped,
        }
        if stats.failed_checks:
            rows["Failed checks"] = ", ".join(stats.failed_checks)
        rows["Time taken"] = f"{stats.duration_ms / 1000:.1f}s"
        summary_table("UPDATE COMPLETE", rows, use_emoji=self._context.use_emoji)
        return RunResult.completed(stats)

    def _show_result(self, organized: OrganizedUpdates, stats: RunStatistics, started: float) -> RunResult:
        self._finish(stats, started)
        self._display_updates(organized.grouped)
        return RunResult.completed(stats)

    def _display_updates(self, grouped: GroupedUpdates) -> None:
        use_emoji = self._context.use_emoji
        section("Available Updates")
        width = max_name_length(grouped)
        for bump in GROUP_ORDER:
            updates = grouped.group(bump)
            if not updates:
                continue
            info(f"{bump.label} Updates ({len(updates)})", use_emoji=use_emoji)
            for update in updates:
                padding = " " * (width - len(update.name) + 2)
                change = format_version_change(update.current_version, update.new_version, bump)
                info(f"  {update.name}{padding}{change}", use_emoji=False)
        summary_table(
            "UPDATE SUMMARY",
            {
                "Total updates available": grouped.total,
                "Patch updates": len(grouped.patch),
                "Minor updates": len(grouped.minor),
                "Major updates": len(grouped.major),
                "Safety buffer applied": f"{self._context.safety_buffer_days} days",
            },
            use_emoji=use_emoji,
        )
        info("Run 'depguard update' without --show to install these updates", use_emoji=use_emoji)


__all__ = ["WorkflowOrchestrator"]

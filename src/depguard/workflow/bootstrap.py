# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fresh install of every dependency in ``package.json`` behind the safety buffer."""

from __future__ import annotations

import time
from collections.abc import Callable

from ..context import RunContext
from ..errors import UserCancellationError
from ..logging import fail, ok, warn
from ..models import ExitReason, RunResult, RunStatistics, ServiceResult
from .services import BootstrapService
from .steps import OPERATION_INSTALL


class BootstrapWorkflowOrchestrator:
    """Confirm and run a fresh install; no discovery, selection or quality checks.

    A declined install ends with exit code 0, a failed one with 1 and
    cancellation with 130.
    """

    def __init__(
        self,
        context: RunContext,
        installer: BootstrapService,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._context = context
        self._installer = installer
        self._clock = clock

    def execute(self) -> RunResult:
        started = self._clock()
        stats = RunStatistics()
        use_emoji = self._context.use_emoji
        try:
            outcome = self._installer.bootstrap()
        except UserCancellationError:
            warn("Operation cancelled by user", use_emoji=use_emoji)
            stats.duration_ms = self._elapsed_ms(started)
            return RunResult.cancelled(stats)

        stats.duration_ms = self._elapsed_ms(started)
        if outcome is ServiceResult.SKIPPED:
            return RunResult.early_exit(ExitReason.NO_PACKAGES_SELECTED, stats)
        if outcome is ServiceResult.FAILED:
            fail("Install process aborted", use_emoji=use_emoji)
            return RunResult.failure(ExitReason.INSTALL_FAILED, stats, failed_operation=OPERATION_INSTALL)
        ok("Fresh install complete!", use_emoji=use_emoji)
        return RunResult.completed(stats)

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)


__all__ = ["BootstrapWorkflowOrchestrator"]

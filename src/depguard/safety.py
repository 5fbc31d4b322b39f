# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Safety buffer: keep only versions that have been public long enough."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from rich.console import Console

from .logging import info, ok, progress_bar, skip
from .models import SafetyDecision, SafetyReason, UpdateCandidate
from .registry import UNAVAILABLE, MetadataLookup, RegistryGateway
from .versions import clean_version

_LOGGER = logging.getLogger(__name__)


def select_safe_version(
    candidate: UpdateCandidate,
    metadata: MetadataLookup,
    cutoff: datetime,
    installed_version: str,
) -> SafetyDecision:
    """Decide which version of ``candidate`` may be installed.

    Args:
        candidate: Update reported by the discovery tool.
        metadata: Registry metadata, or :data:`UNAVAILABLE` when the lookup failed.
        cutoff: Latest acceptable publish instant.
        installed_version: Version or range currently declared in ``package.json``.

    Returns:
        SafetyDecision: Chosen version and the reason for it. ``chosen_version``
        is ``None`` when the package should be dropped from this run.
    """

    if metadata is UNAVAILABLE:
        selected = candidate.suggested_version
        reason = SafetyReason.REGISTRY_UNREACHABLE
    else:
        latest = metadata.latest_stable_before(cutoff)
        if latest is None:
            return _decision(candidate, None, SafetyReason.TOO_NEW)
        selected = latest
        reason = SafetyReason.SAFE

    if clean_version(selected) == clean_version(installed_version):
        return _decision(candidate, None, SafetyReason.MATCHES_INSTALLED)
    return _decision(candidate, selected, reason)


def _decision(candidate: UpdateCandidate, chosen: str | None, reason: SafetyReason) -> SafetyDecision:
    return SafetyDecision(
        name=candidate.name,
        installed_range=candidate.installed_range,
        suggested_version=candidate.suggested_version,
        chosen_version=chosen,
        reason=reason,
    )


class SafetyBufferFilter:
    """Apply :func:`select_safe_version` to each candidate, one request at a time."""

    def __init__(
        self,
        gateway: RegistryGateway,
        cutoff: datetime,
        *,
        days: int,
        use_emoji: bool = True,
        console: Console | None = None,
    ) -> None:
        self._gateway = gateway
        self._cutoff = cutoff
        self._days = days
        self._use_emoji = use_emoji
        self._console = console

    def apply(self, candidates: Iterable[UpdateCandidate]) -> list[SafetyDecision]:
        pending: Sequence[UpdateCandidate] = list(candidates)
        total = len(pending)
        decisions: list[SafetyDecision] = []
        with progress_bar(use_emoji=self._use_emoji, console=self._console) as progress:
            task_id = progress.add_task("Checking registry", total=total)
            for index, candidate in enumerate(pending, start=1):
                _LOGGER.debug("checking %s (%d/%d)", candidate.name, index, total)
                progress.update(task_id, description=f"Checking {candidate.name} ({index}/{total})", refresh=True)
                metadata = self._gateway.fetch_version_metadata(candidate.name)
                decision = select_safe_version(candidate, metadata, self._cutoff, candidate.installed_range)
                self._report(decision)
                decisions.append(decision)
                progress.advance(task_id)
            progress.update(task_id, description=f"Checked {total} package(s)")
        return decisions

    def _report(self, decision: SafetyDecision) -> None:
        name = decision.name
        if decision.reason is SafetyReason.TOO_NEW:
            skip(f"{name} (no version old enough found)", use_emoji=self._use_emoji)
        elif decision.reason is SafetyReason.MATCHES_INSTALLED:
            skip(f"{name} (safe version matches current)", use_emoji=self._use_emoji)
        elif decision.reason is SafetyReason.REGISTRY_UNREACHABLE:
            info(
                f"{name}: {decision.chosen_version} (registry unavailable, using suggested version)",
                use_emoji=self._use_emoji,
            )
        elif decision.chosen_version != decision.suggested_version:
            info(
                f"{name}: {decision.chosen_version} "
                f"(newer {decision.suggested_version} not yet {self._days} days old)",
                use_emoji=self._use_emoji,
            )
        else:
            ok(f"{name}: {decision.chosen_version}", use_emoji=self._use_emoji)


__all__ = ["SafetyBufferFilter", "select_safe_version"]

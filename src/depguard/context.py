# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable per-run context shared by every workflow collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

from .config import DepGuardConfig
from .manifest import ManifestReader


@dataclass(frozen=True, slots=True)
class RunContext:
    """Configuration, manifest and safety cutoff for a single run.

    ``cutoff`` is computed once when the context is built so every decision
    in the run compares against the same instant.
    """

    root: Path
    config: DepGuardConfig
    manifest: ManifestReader
    cutoff: datetime
    use_emoji: bool = True

    @classmethod
    def build(
        cls,
        root: Path,
        config: DepGuardConfig,
        *,
        manifest: ManifestReader | None = None,
        now: datetime | None = None,
        use_emoji: bool = True,
    ) -> RunContext:
        current = now or datetime.now(UTC)
        return cls(
            root=root,
            config=config,
            manifest=manifest or ManifestReader.load(root),
            cutoff=current - timedelta(days=config.safety_buffer_days),
            use_emoji=use_emoji,
        )

    @property
    def safety_buffer_days(self) -> int:
        return self.config.safety_buffer_days

    @property
    def cutoff_iso(self) -> str:
        """Cutoff in the ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form accepted by ``npm --before``."""

        return self.cutoff.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["RunContext"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Discover available updates with ``npm-check-updates``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import DiscoveryError
from .logging import status
from .manifest import ManifestReader
from .models import UpdateCandidate
from .process_utils import CommandRunner, capturing_runner

NCU_COMMAND: tuple[str, ...] = ("ncu", "--jsonUpgraded")

_LOGGER = logging.getLogger(__name__)


class UpdateDiscovery:
    """Ask ``ncu`` which dependencies have newer versions without touching ``package.json``."""

    def __init__(self, root: Path, *, runner: CommandRunner | None = None, use_emoji: bool = True) -> None:
        self._root = root
        self._runner = runner or capturing_runner
        self._use_emoji = use_emoji

    def load_updates(self) -> dict[str, str]:
        """Return a mapping of package name to suggested version.

        Raises:
            DiscoveryError: When ``ncu`` fails or prints something other than a JSON object.
        """

        with status("Checking for updates with npm-check-updates...", use_emoji=self._use_emoji):
            completed = self._runner(NCU_COMMAND, self._root)
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip() or f"exit code {completed.returncode}"
            raise DiscoveryError(f"npm-check-updates failed: {detail}")
        output = (completed.stdout or "").strip()
        if not output:
            return {}
        try:
            payload = json.loads(output)
        except json.JSONDecodeError as exc:
            raise DiscoveryError(f"npm-check-updates returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise DiscoveryError("npm-check-updates returned an unexpected document")
        _LOGGER.debug("ncu reported %d upgrades", len(payload))
        return {str(name): str(version) for name, version in payload.items()}

    def candidates(self, manifest: ManifestReader) -> list[UpdateCandidate]:
        """Pair each discovered update with the range declared in ``manifest``."""

        declared = manifest.all_dependencies
        return [
            UpdateCandidate(name=name, installed_range=declared.get(name, ""), suggested_version=version)
            for name, version in self.load_updates().items()
        ]


__all__ = ["NCU_COMMAND", "UpdateDiscovery"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read-only access to the project's ``package.json``."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from .constants import PACKAGE_JSON
from .errors import ManifestError


class DependencyLocation(str, Enum):
    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"


class ManifestReader:
    """Parsed ``package.json`` loaded once at construction."""

    def __init__(self, data: Mapping[str, Any], *, path: Path | None = None) -> None:
        self._data = dict(data)
        self.path = path

    @classmethod
    def load(cls, root: Path) -> ManifestReader:
        """Read ``package.json`` from ``root``.

        Raises:
            ManifestError: When the file is missing, unreadable or not a JSON object.
        """

        path = root / PACKAGE_JSON
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ManifestError(f"No {PACKAGE_JSON} found in {root}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise ManifestError(f"Unable to read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a JSON object")
        return cls(data, path=path)

    def _section(self, key: str) -> dict[str, str]:
        value = self._data.get(key)
        if not isinstance(value, Mapping):
            return {}
        return {str(name): str(spec) for name, spec in value.items()}

    @property
    def scripts(self) -> dict[str, str]:
        return self._section("scripts")

    @property
    def dependencies(self) -> dict[str, str]:
        return self._section(DependencyLocation.DEPENDENCIES.value)

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self._section(DependencyLocation.DEV_DEPENDENCIES.value)

    @property
    def all_dependencies(self) -> dict[str, str]:
        """Runtime and dev dependencies; runtime entries win on duplicate names."""

        return {**self.dev_dependencies, **self.dependencies}

    def has_script(self, name: str) -> bool:
        return bool(self.scripts.get(name))

    def has_package(self, name: str) -> bool:
        return self.location_of(name) is not None

    def get_package_version(self, name: str) -> str | None:
        """Return the declared range for ``name``, preferring ``dependencies``."""

        return self.all_dependencies.get(name)

    def location_of(self, name: str) -> DependencyLocation | None:
        if self.dependencies.get(name):
            return DependencyLocation.DEPENDENCIES
        if self.dev_dependencies.get(name):
            return DependencyLocation.DEV_DEPENDENCIES
        return None


__all__ = ["DependencyLocation", "ManifestReader"]

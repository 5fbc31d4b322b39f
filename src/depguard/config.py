# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration models and layered loading for depguard."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    DEFAULT_BUILD_SCRIPT,
    DEFAULT_LINT_SCRIPT,
    DEFAULT_TEST_SCRIPT,
    DEFAULT_TYPECHECK_SCRIPT,
    DEPGUARD_CONFIG_FILE,
    NPM_REGISTRY_URL,
    PROMPT_PAGE_SIZE,
    PYPROJECT_MANIFEST,
    REGISTRY_MAX_RETRIES,
    REGISTRY_TIMEOUT_SECONDS,
    SAFETY_BUFFER_DAYS,
)
from .errors import ConfigError

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "depguard"

_LOGGER = logging.getLogger(__name__)


class ScriptNames(BaseModel):
    """``package.json`` script names used for the quality stages."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lint: str = DEFAULT_LINT_SCRIPT
    typecheck: str = DEFAULT_TYPECHECK_SCRIPT
    test: str = DEFAULT_TEST_SCRIPT
    build: str = DEFAULT_BUILD_SCRIPT

    def items(self) -> list[tuple[str, str]]:
        return [
            ("lint", self.lint),
            ("typecheck", self.typecheck),
            ("test", self.test),
            ("build", self.build),
        ]


class RegistryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str = NPM_REGISTRY_URL
    timeout_seconds: float = Field(default=REGISTRY_TIMEOUT_SECONDS, gt=0)
    max_retries: int = Field(default=REGISTRY_MAX_RETRIES, ge=1)


class DepGuardConfig(BaseModel):
    """Effective configuration for a depguard run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    safety_buffer_days: int = Field(default=SAFETY_BUFFER_DAYS, ge=0)
    scripts: ScriptNames = Field(default_factory=ScriptNames)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    use_npm_fallback: bool = False
    prompt_page_size: int = Field(default=PROMPT_PAGE_SIZE, ge=1)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="python")


class ConfigSource(Protocol):
    """Provide a configuration fragment loaded from some medium."""

    name: str

    def load(self) -> Mapping[str, Any]: ...


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return DepGuardConfig().to_dict()


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def _read(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc

    def load(self) -> Mapping[str, Any]:
        return self._read()


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.depguard]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        tool_section = self._read().get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {self.name} must be a table")
        return section


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def default_sources(root: Path) -> list[ConfigSource]:
    """Return sources in increasing precedence for a project rooted at ``root``."""

    return [
        DefaultConfigSource(),
        PyProjectConfigSource(root / PYPROJECT_MANIFEST),
        TomlConfigSource(root / DEPGUARD_CONFIG_FILE),
    ]


def load_config(
    root: Path,
    overrides: Mapping[str, Any] | None = None,
    *,
    sources: Sequence[ConfigSource] | None = None,
) -> DepGuardConfig:
    """Merge configuration layers for ``root`` and validate the result.

    Args:
        root: Project directory containing ``package.json``.
        overrides: Values supplied on the command line; ``None`` entries are ignored.
        sources: Optional explicit source list replacing the default layering.

    Returns:
        DepGuardConfig: Validated configuration.

    Raises:
        ConfigError: When a source is malformed or the merged data is invalid.
    """

    merged: dict[str, Any] = {}
    for source in sources if sources is not None else default_sources(root):
        fragment = source.load()
        if fragment:
            _LOGGER.debug("applying configuration from %s", source.name)
        merged = deep_merge(merged, fragment)
    if overrides:
        merged = deep_merge(merged, _prune_none(overrides))
    try:
        return DepGuardConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid depguard configuration: {exc}") from exc


def _prune_none(data: Mapping[str, Any]) -> dict[str, Any]:
    pruned: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            nested = _prune_none(value)
            if nested:
                pruned[key] = nested
        elif value is not None:
            pruned[key] = value
    return pruned


__all__ = [
    "ConfigSource",
    "DefaultConfigSource",
    "DepGuardConfig",
    "PyProjectConfigSource",
    "RegistryConfig",
    "ScriptNames",
    "TomlConfigSource",
    "deep_merge",
    "default_sources",
    "load_config",
]

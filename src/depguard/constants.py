# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across depguard modules."""

from __future__ import annotations

import re
from typing import Final

# Minimum age, in days, before a published version may be installed.
SAFETY_BUFFER_DAYS: Final[int] = 7

NPM_REGISTRY_URL: Final[str] = "https://registry.npmjs.org"
REGISTRY_TIMEOUT_SECONDS: Final[float] = 10.0
REGISTRY_MAX_RETRIES: Final[int] = 3

PROMPT_PAGE_SIZE: Final[int] = 40

PACKAGE_JSON: Final[str] = "package.json"
PYPROJECT_MANIFEST: Final[str] = "pyproject.toml"
DEPGUARD_CONFIG_FILE: Final[str] = ".depguard.toml"

DEFAULT_LINT_SCRIPT: Final[str] = "lint"
DEFAULT_TYPECHECK_SCRIPT: Final[str] = "typecheck"
DEFAULT_TEST_SCRIPT: Final[str] = "test"
DEFAULT_BUILD_SCRIPT: Final[str] = "build"

STABLE_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+\.\d+\.\d+\Z")
SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+\.\d+\.\d+(-[\w.]+)?\Z")
RANGE_PREFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[\^~]")
PACKAGE_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9._-]+\Z")
SCOPED_PACKAGE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^@[a-z0-9._-]+/[a-z0-9._-]+\Z")

SECONDS_PER_DAY: Final[int] = 24 * 60 * 60

NPM_PACKAGE_URL: Final[str] = "https://www.npmjs.com/package"

__all__ = [
    "DEFAULT_BUILD_SCRIPT",
    "DEFAULT_LINT_SCRIPT",
    "DEFAULT_TEST_SCRIPT",
    "DEFAULT_TYPECHECK_SCRIPT",
    "DEPGUARD_CONFIG_FILE",
    "NPM_PACKAGE_URL",
    "NPM_REGISTRY_URL",
    "PACKAGE_JSON",
    "PACKAGE_NAME_PATTERN",
    "PROMPT_PAGE_SIZE",
    "PYPROJECT_MANIFEST",
    "RANGE_PREFIX_PATTERN",
    "REGISTRY_MAX_RETRIES",
    "REGISTRY_TIMEOUT_SECONDS",
    "SAFETY_BUFFER_DAYS",
    "SCOPED_PACKAGE_PATTERN",
    "SECONDS_PER_DAY",
    "SEMVER_PATTERN",
    "STABLE_VERSION_PATTERN",
]

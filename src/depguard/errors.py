# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy and exit-code conventions shared by depguard."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final

import click

EXIT_CODE_SUCCESS: Final[int] = 0
EXIT_CODE_ERROR: Final[int] = 1
# Conventional exit status for SIGINT (128 + 2).
EXIT_CODE_CANCELLED: Final[int] = 130


class DepGuardError(RuntimeError):
    """Base class for all depguard failures."""


class ConfigError(DepGuardError):
    """Raised when configuration files contain invalid data."""


class ManifestError(DepGuardError):
    """Raised when ``package.json`` cannot be read or parsed."""


class DiscoveryError(DepGuardError):
    """Raised when update discovery produces unusable output."""


class UserCancellationError(DepGuardError):
    """Raised when the operator aborts an interactive prompt."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__("Operation cancelled by user")
        self.__cause__ = cause


class InstallationFailureError(DepGuardError):
    """Raised when an install command exits unsuccessfully."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or f"{operation} failed")
        self.operation = operation


class RegistryError(DepGuardError):
    """Base class for package registry failures."""

    def __init__(self, package_name: str, message: str) -> None:
        super().__init__(message)
        self.package_name = package_name


class RegistryFetchError(RegistryError):
    """Raised when the registry request fails or returns a non-success status."""

    def __init__(self, package_name: str, status_code: int | None = None) -> None:
        if status_code:
            message = f"Failed to fetch {package_name} from npm registry (HTTP {status_code})"
        else:
            message = f"Failed to fetch {package_name} from npm registry"
        super().__init__(package_name, message)
        self.status_code = status_code


class RegistryParseError(RegistryError):
    """Raised when the registry response lacks the expected structure."""

    def __init__(self, package_name: str) -> None:
        super().__init__(package_name, f"Failed to parse registry response for {package_name}")


class VersionNotFoundError(RegistryError):
    """Raised when a requested version is not published in the registry."""

    def __init__(self, package_name: str, version: str) -> None:
        super().__init__(package_name, f"Version {version} not found for package {package_name}")
        self.version = version


class NoSafeVersionError(RegistryError):
    """Raised when no version of a package is older than the safety buffer."""

    def __init__(self, package_name: str, days: int) -> None:
        super().__init__(
            package_name,
            f"No version of {package_name} published at least {days} days ago",
        )
        self.days = days


@contextmanager
def cancellation_guard() -> Iterator[None]:
    """Translate prompt interruptions into :class:`UserCancellationError`.

    Rich and Click prompts surface Ctrl+C as ``KeyboardInterrupt`` and a
    closed stdin as ``EOFError``; Click additionally wraps both in
    :class:`click.Abort`.

    Yields:
        None: Control returns to the guarded block.

    Raises:
        UserCancellationError: When the guarded prompt is interrupted.
    """

    try:
        yield
    except (KeyboardInterrupt, EOFError, click.Abort) as exc:
        raise UserCancellationError(exc) from exc


__all__ = [
    "EXIT_CODE_CANCELLED",
    "EXIT_CODE_ERROR",
    "EXIT_CODE_SUCCESS",
    "ConfigError",
    "DepGuardError",
    "DiscoveryError",
    "InstallationFailureError",
    "ManifestError",
    "NoSafeVersionError",
    "RegistryError",
    "RegistryFetchError",
    "RegistryParseError",
    "UserCancellationError",
    "VersionNotFoundError",
    "cancellation_guard",
]

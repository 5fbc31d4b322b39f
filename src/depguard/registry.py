# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""npm registry access: fail-open metadata lookups and a retrying resolver."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Final, Literal, Protocol
from urllib.parse import quote

import requests
from pydantic import BaseModel, ConfigDict, Field

from .config import RegistryConfig
from .constants import SECONDS_PER_DAY
from .errors import (
    NoSafeVersionError,
    RegistryError,
    RegistryFetchError,
    RegistryParseError,
    VersionNotFoundError,
)
from .versions import is_stable, parse_semver

HTTP_NOT_FOUND: Final[int] = 404
BACKOFF_BASE_SECONDS: Final[float] = 1.0

_LOGGER = logging.getLogger(__name__)


class _Unavailable(Enum):
    UNAVAILABLE = "unavailable"

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE: Final = _Unavailable.UNAVAILABLE
"""Sentinel returned when registry metadata could not be obtained."""


class HttpResponse(Protocol):
    status_code: int

    def json(self) -> Any: ...


class HttpSession(Protocol):
    """Subset of :class:`requests.Session` used by the registry clients."""

    def get(self, url: str, *, timeout: float) -> HttpResponse: ...


class VersionMetadata(BaseModel):
    """Published versions of a package and their publish timestamps."""

    model_config = ConfigDict(frozen=True)

    versions: tuple[str, ...]
    published_at: dict[str, datetime] = Field(default_factory=dict)

    def latest_stable_before(self, cutoff: datetime) -> str | None:
        """Return the most recently published stable version at or before ``cutoff``.

        Ties on the publish instant go to the highest version triple, then the
        version string.
        """

        eligible = [
            version
            for version in self.versions
            if is_stable(version) and version in self.published_at and self.published_at[version] <= cutoff
        ]
        if not eligible:
            return None
        return max(
            eligible,
            key=lambda version: (self.published_at[version], parse_semver(version) or (0, 0, 0), version),
        )


MetadataLookup = VersionMetadata | Literal[_Unavailable.UNAVAILABLE]


def encode_package_name(name: str) -> str:
    """URL-encode ``name`` keeping the leading ``@`` of scoped packages."""

    encoded = quote(name, safe="")
    if encoded.startswith("%40"):
        return "@" + encoded[3:]
    return encoded


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_metadata(package_name: str, payload: object) -> VersionMetadata:
    """Build :class:`VersionMetadata` from a registry document.

    Raises:
        RegistryParseError: When ``versions`` or ``time`` is missing or malformed.
    """

    if not isinstance(payload, Mapping):
        raise RegistryParseError(package_name)
    versions = payload.get("versions")
    times = payload.get("time")
    if not isinstance(versions, Mapping) or not isinstance(times, Mapping):
        raise RegistryParseError(package_name)
    published_at: dict[str, datetime] = {}
    for version in versions:
        stamp = _parse_timestamp(times.get(version))
        if stamp is not None:
            published_at[str(version)] = stamp
    return VersionMetadata(versions=tuple(str(version) for version in versions), published_at=published_at)


def fetch_metadata(
    session: HttpSession,
    base_url: str,
    package_name: str,
    *,
    timeout: float,
) -> VersionMetadata:
    """Issue a single registry request for ``package_name``.

    Raises:
        RegistryFetchError: On transport failure or a non-2xx status.
        RegistryParseError: When the body is not the expected JSON document.
    """

    url = f"{base_url.rstrip('/')}/{encode_package_name(package_name)}"
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise RegistryFetchError(package_name) from exc
    if not 200 <= response.status_code < 300:
        raise RegistryFetchError(package_name, response.status_code)
    try:
        payload = response.json()
    except ValueError as exc:
        raise RegistryParseError(package_name) from exc
    return parse_metadata(package_name, payload)


class RegistryGateway:
    """Fail-open metadata source used by the safety buffer.

    Any failure yields :data:`UNAVAILABLE` so a flaky registry never blocks a
    run; the caller then trusts the suggested version.
    """

    def __init__(self, config: RegistryConfig | None = None, *, session: HttpSession | None = None) -> None:
        self._config = config or RegistryConfig()
        self._session: HttpSession = session or requests.Session()

    def fetch_version_metadata(self, package_name: str) -> MetadataLookup:
        try:
            return fetch_metadata(
                self._session,
                self._config.url,
                package_name,
                timeout=self._config.timeout_seconds,
            )
        except RegistryError as exc:
            _LOGGER.debug("registry lookup failed for %s: %s", package_name, exc, exc_info=exc.__cause__ is not None)
            return UNAVAILABLE


class VersionResolution(BaseModel):
    """A concrete version together with its age relative to the cutoff."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    version: str
    too_new: bool
    age_days: int

    @property
    def spec(self) -> str:
        return f"{self.package_name}@{self.version}"


class PackageResolver:
    """Strict registry client for the add workflow; failures raise."""

    def __init__(
        self,
        cutoff: datetime,
        config: RegistryConfig | None = None,
        *,
        session: HttpSession | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
        safety_buffer_days: int = 0,
    ) -> None:
        self._cutoff = cutoff
        self._config = config or RegistryConfig()
        self._session: HttpSession = session or requests.Session()
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(UTC))
        self._days = safety_buffer_days

    def fetch_with_retries(self, package_name: str) -> VersionMetadata:
        """Fetch metadata, retrying transient failures with exponential backoff.

        HTTP 404 and malformed documents are not retried.
        """

        attempts = self._config.max_retries
        for attempt in range(1, attempts + 1):
            try:
                return fetch_metadata(
                    self._session,
                    self._config.url,
                    package_name,
                    timeout=self._config.timeout_seconds,
                )
            except RegistryParseError:
                raise
            except RegistryFetchError as exc:
                if exc.status_code == HTTP_NOT_FOUND or attempt == attempts:
                    raise
                delay = BACKOFF_BASE_SECONDS * 2 ** (attempt - 1)
                _LOGGER.debug("retrying %s in %.0fs after: %s", package_name, delay, exc)
                self._sleep(delay)
        raise RegistryFetchError(package_name)

    def _age_days(self, published: datetime) -> int:
        return math.floor((self._clock() - published).total_seconds() / SECONDS_PER_DAY)

    def resolve_latest_safe_version(self, package_name: str) -> VersionResolution:
        """Return the newest stable version published before the cutoff.

        Raises:
            NoSafeVersionError: When every stable version is newer than the cutoff.
        """

        metadata = self.fetch_with_retries(package_name)
        version = metadata.latest_stable_before(self._cutoff)
        if version is None:
            raise NoSafeVersionError(package_name, self._days)
        return VersionResolution(
            package_name=package_name,
            version=version,
            too_new=False,
            age_days=self._age_days(metadata.published_at[version]),
        )

    def validate_version(self, package_name: str, version: str) -> VersionResolution:
        """Check that ``version`` exists and report whether it is too new.

        Raises:
            VersionNotFoundError: When the registry has no publish time for ``version``.
        """

        metadata = self.fetch_with_retries(package_name)
        published = metadata.published_at.get(version)
        if published is None:
            raise VersionNotFoundError(package_name, version)
        return VersionResolution(
            package_name=package_name,
            version=version,
            too_new=published > self._cutoff,
            age_days=self._age_days(published),
        )


__all__ = [
    "UNAVAILABLE",
    "HttpSession",
    "MetadataLookup",
    "PackageResolver",
    "RegistryGateway",
    "VersionMetadata",
    "VersionResolution",
    "encode_package_name",
    "fetch_metadata",
    "parse_metadata",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for registry access, fail-open lookups and the retrying resolver."""

from __future__ import annotations

from datetime import timedelta

import pytest
import requests

from depguard.config import RegistryConfig
from depguard.errors import NoSafeVersionError, RegistryFetchError, RegistryParseError, VersionNotFoundError
from depguard.registry import (
    UNAVAILABLE,
    PackageResolver,
    RegistryGateway,
    VersionMetadata,
    encode_package_name,
    parse_metadata,
)

BASE = "https://registry.npmjs.org"


def test_encode_package_name_keeps_scope_marker() -> None:
    assert encode_package_name("@types/node") == "@types%2Fnode"
    assert encode_package_name("lodash") == "lodash"


def test_parse_metadata_drops_unparsable_timestamps() -> None:
    payload = {
        "versions": {"1.0.0": {}, "1.1.0": {}},
        "time": {"1.0.0": "2024-01-02T03:04:05.678Z", "1.1.0": "not a date"},
    }

    metadata = parse_metadata("demo", payload)

    assert metadata.versions == ("1.0.0", "1.1.0")
    assert list(metadata.published_at) == ["1.0.0"]
    assert metadata.published_at["1.0.0"].tzinfo is not None


@pytest.mark.parametrize("payload", [[], {"versions": {}}, {"time": {}}, {"versions": [], "time": {}}])
def test_parse_metadata_rejects_missing_sections(payload: object) -> None:
    with pytest.raises(RegistryParseError):
        parse_metadata("demo", payload)


def test_gateway_returns_metadata_for_scoped_package(session_factory, response_factory, registry_doc, now) -> None:
    document = registry_doc({"20.1.0": now - timedelta(days=30)})
    session = session_factory({f"{BASE}/@types%2Fnode": [response_factory(200, document)]})

    metadata = RegistryGateway(RegistryConfig(timeout_seconds=4), session=session).fetch_version_metadata(
        "@types/node",
    )

    assert isinstance(metadata, VersionMetadata)
    assert metadata.versions == ("20.1.0",)
    assert session.calls == [(f"{BASE}/@types%2Fnode", 4)]


@pytest.mark.parametrize(
    "outcome",
    [
        requests.ConnectionError("offline"),
        requests.Timeout("slow"),
    ],
)
def test_gateway_fails_open_on_transport_errors(session_factory, outcome: Exception) -> None:
    session = session_factory({f"{BASE}/lodash": [outcome]})

    assert RegistryGateway(session=session).fetch_version_metadata("lodash") is UNAVAILABLE


def test_gateway_fails_open_on_http_and_parse_errors(session_factory, response_factory) -> None:
    session = session_factory(
        {
            f"{BASE}/broken": [response_factory(500, {})],
            f"{BASE}/garbled": [response_factory(200, error=ValueError("bad json"))],
            f"{BASE}/partial": [response_factory(200, {"versions": {"1.0.0": {}}})],
        },
    )
    gateway = RegistryGateway(session=session)

    assert gateway.fetch_version_metadata("broken") is UNAVAILABLE
    assert gateway.fetch_version_metadata("garbled") is UNAVAILABLE
    assert gateway.fetch_version_metadata("partial") is UNAVAILABLE


def _resolver(session, now, *, sleeps: list[float] | None = None, days: int = 7) -> PackageResolver:
    return PackageResolver(
        now - timedelta(days=days),
        RegistryConfig(),
        session=session,
        sleep=(sleeps.append if sleeps is not None else lambda _delay: None),
        clock=lambda: now,
        safety_buffer_days=days,
    )


def test_resolver_retries_with_exponential_backoff(session_factory, response_factory, registry_doc, now) -> None:
    document = registry_doc({"1.0.0": now - timedelta(days=45), "1.1.0": now - timedelta(days=2)})
    session = session_factory(
        {
            f"{BASE}/left-pad": [
                response_factory(503, {}),
                requests.ConnectionError("reset"),
                response_factory(200, document),
            ],
        },
    )
    sleeps: list[float] = []

    resolved = _resolver(session, now, sleeps=sleeps).resolve_latest_safe_version("left-pad")

    assert resolved.version == "1.0.0"
    assert resolved.age_days == 45
    assert not resolved.too_new
    assert resolved.spec == "left-pad@1.0.0"
    assert sleeps == [1.0, 2.0]
    assert len(session.calls) == 3


def test_resolver_gives_up_after_max_attempts(session_factory, response_factory, now) -> None:
    session = session_factory({f"{BASE}/flaky": [response_factory(502, {})]})
    sleeps: list[float] = []

    with pytest.raises(RegistryFetchError) as excinfo:
        _resolver(session, now, sleeps=sleeps).fetch_with_retries("flaky")

    assert excinfo.value.status_code == 502
    assert len(session.calls) == 3
    assert sleeps == [1.0, 2.0]


def test_resolver_does_not_retry_not_found_or_parse_errors(session_factory, response_factory, now) -> None:
    session = session_factory(
        {
            f"{BASE}/missing": [response_factory(404, {})],
            f"{BASE}/garbled": [response_factory(200, {"unexpected": True})],
        },
    )
    sleeps: list[float] = []
    resolver = _resolver(session, now, sleeps=sleeps)

    with pytest.raises(RegistryFetchError, match="HTTP 404"):
        resolver.fetch_with_retries("missing")
    with pytest.raises(RegistryParseError):
        resolver.fetch_with_retries("garbled")

    assert len(session.calls) == 2
    assert sleeps == []


def test_resolver_reports_no_safe_version(session_factory, response_factory, registry_doc, now) -> None:
    document = registry_doc({"0.1.0": now - timedelta(days=1), "0.2.0-beta": now - timedelta(days=90)})
    session = session_factory({f"{BASE}/fresh": [response_factory(200, document)]})

    with pytest.raises(NoSafeVersionError, match="at least 7 days"):
        _resolver(session, now).resolve_latest_safe_version("fresh")


def test_validate_version_flags_recent_and_missing_versions(
    session_factory,
    response_factory,
    registry_doc,
    now,
) -> None:
    document = registry_doc({"2.0.0": now - timedelta(days=3), "1.9.0": now - timedelta(days=40)})
    session = session_factory({f"{BASE}/pkg": [response_factory(200, document)]})
    resolver = _resolver(session, now)

    recent = resolver.validate_version("pkg", "2.0.0")
    older = resolver.validate_version("pkg", "1.9.0")

    assert recent.too_new and recent.age_days == 3
    assert not older.too_new and older.age_days == 40
    with pytest.raises(VersionNotFoundError):
        resolver.validate_version("pkg", "3.0.0")

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the safety buffer filter."""

from __future__ import annotations

import io
from datetime import UTC, datetime, timedelta

import pytest
from rich.console import Console

from depguard.models import SafetyDecision, SafetyReason, UpdateCandidate, VersionBump
from depguard.registry import UNAVAILABLE, VersionMetadata
from depguard.safety import SafetyBufferFilter, select_safe_version
from depguard.versions import classify_bump

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)
CUTOFF = NOW - timedelta(days=7)
LODASH = UpdateCandidate(name="lodash", installed_range="^4.17.0", suggested_version="5.0.0")


def _metadata(**ages: int) -> VersionMetadata:
    published = {
        version.removeprefix("v").replace("_", "."): NOW - timedelta(days=days) for version, days in ages.items()
    }
    return VersionMetadata(versions=tuple(published), published_at=published)


def test_version_published_yesterday_is_too_new() -> None:
    decision = select_safe_version(LODASH, _metadata(v5_0_0=1), CUTOFF, LODASH.installed_range)

    assert decision.chosen_version is None
    assert decision.reason is SafetyReason.TOO_NEW
    assert not decision.eligible


def test_older_stable_version_is_chosen_and_classified_minor() -> None:
    metadata = VersionMetadata(
        versions=("4.19.0", "5.0.0"),
        published_at={"4.19.0": NOW - timedelta(days=20), "5.0.0": NOW - timedelta(days=1)},
    )

    decision = select_safe_version(LODASH, metadata, CUTOFF, LODASH.installed_range)

    assert decision.chosen_version == "4.19.0"
    assert decision.reason is SafetyReason.SAFE
    assert classify_bump(decision.installed_range, decision.chosen_version) is VersionBump.MINOR


def test_unreachable_registry_falls_back_to_suggested_version() -> None:
    decision = select_safe_version(LODASH, UNAVAILABLE, CUTOFF, LODASH.installed_range)

    assert decision.chosen_version == "5.0.0"
    assert decision.reason is SafetyReason.REGISTRY_UNREACHABLE
    assert decision.eligible


def test_unreachable_registry_still_drops_installed_version() -> None:
    candidate = UpdateCandidate(name="react", installed_range="^18.2.0", suggested_version="18.2.0")

    decision = select_safe_version(candidate, UNAVAILABLE, CUTOFF, candidate.installed_range)

    assert decision.reason is SafetyReason.MATCHES_INSTALLED
    assert decision.chosen_version is None


def test_safe_version_matching_installed_is_excluded() -> None:
    metadata = VersionMetadata(
        versions=("4.17.0", "5.0.0"),
        published_at={"4.17.0": NOW - timedelta(days=400), "5.0.0": NOW - timedelta(days=2)},
    )

    decision = select_safe_version(LODASH, metadata, CUTOFF, "~4.17.0")

    assert decision.reason is SafetyReason.MATCHES_INSTALLED


def test_prereleases_and_versions_after_cutoff_are_never_chosen() -> None:
    metadata = VersionMetadata(
        versions=("4.18.0", "4.19.0-beta.1", "4.20.0", "4.21.0"),
        published_at={
            "4.18.0": NOW - timedelta(days=30),
            "4.19.0-beta.1": NOW - timedelta(days=10),
            "4.20.0": CUTOFF + timedelta(seconds=1),
            "4.21.0": NOW,
        },
    )

    decision = select_safe_version(LODASH, metadata, CUTOFF, LODASH.installed_range)

    assert decision.chosen_version == "4.18.0"
    assert metadata.published_at[decision.chosen_version] <= CUTOFF


def test_version_published_exactly_at_cutoff_is_eligible() -> None:
    metadata = VersionMetadata(versions=("4.18.0",), published_at={"4.18.0": CUTOFF})

    assert select_safe_version(LODASH, metadata, CUTOFF, LODASH.installed_range).chosen_version == "4.18.0"


def test_latest_publish_time_wins_over_highest_version() -> None:
    metadata = VersionMetadata(
        versions=("5.0.0", "4.17.30"),
        published_at={"5.0.0": NOW - timedelta(days=60), "4.17.30": NOW - timedelta(days=10)},
    )

    assert metadata.latest_stable_before(CUTOFF) == "4.17.30"


def test_publish_time_ties_break_on_highest_triple() -> None:
    stamp = NOW - timedelta(days=10)
    metadata = VersionMetadata(
        versions=("4.9.0", "4.10.0", "3.99.0"),
        published_at={"4.9.0": stamp, "4.10.0": stamp, "3.99.0": stamp},
    )

    assert metadata.latest_stable_before(CUTOFF) == "4.10.0"


def test_versions_without_timestamps_are_ignored() -> None:
    metadata = VersionMetadata(versions=("4.18.0", "4.19.0"), published_at={"4.18.0": NOW - timedelta(days=30)})

    assert metadata.latest_stable_before(CUTOFF) == "4.18.0"


class _Gateway:
    def __init__(self, lookups):
        self.lookups = lookups
        self.requested: list[str] = []

    def fetch_version_metadata(self, package_name: str):
        self.requested.append(package_name)
        return self.lookups[package_name]


def test_filter_applies_lookups_sequentially_in_input_order(capsys: pytest.CaptureFixture[str]) -> None:
    candidates = [
        UpdateCandidate(name="zeta", installed_range="^1.0.0", suggested_version="1.2.0"),
        UpdateCandidate(name="alpha", installed_range="^2.0.0", suggested_version="3.0.0"),
        UpdateCandidate(name="mid", installed_range="^1.0.0", suggested_version="1.0.1"),
    ]
    gateway = _Gateway(
        {
            "zeta": _metadata(v1_1_0=30, v1_2_0=2),
            "alpha": UNAVAILABLE,
            "mid": _metadata(v1_0_1=1),
        },
    )

    decisions = SafetyBufferFilter(gateway, CUTOFF, days=7, use_emoji=False).apply(candidates)

    assert gateway.requested == ["zeta", "alpha", "mid"]
    assert [(d.name, d.chosen_version, d.reason) for d in decisions] == [
        ("zeta", "1.1.0", SafetyReason.SAFE),
        ("alpha", "3.0.0", SafetyReason.REGISTRY_UNREACHABLE),
        ("mid", None, SafetyReason.TOO_NEW),
    ]
    output = capsys.readouterr().out
    assert "newer 1.2.0 not yet 7 days old" in output
    assert "registry unavailable" in output
    assert "no version old enough found" in output


def test_filter_shows_progress_while_checking_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TERM", "xterm-256color")
    console = Console(file=io.StringIO(), force_terminal=True, color_system=None, width=120)
    candidates = [
        LODASH,
        UpdateCandidate(name="react", installed_range="^18.2.0", suggested_version="18.3.1"),
    ]
    gateway = _Gateway({"lodash": _metadata(v4_17_21=300), "react": UNAVAILABLE})

    SafetyBufferFilter(gateway, CUTOFF, days=7, use_emoji=False, console=console).apply(candidates)

    output = console.file.getvalue()
    assert "Checking lodash (1/2)" in output
    assert "Checking react (2/2)" in output
    assert "Checked 2 package(s)" in output


def test_decision_rejects_inconsistent_chosen_version() -> None:
    with pytest.raises(ValueError):
        SafetyDecision(
            name="x",
            installed_range="^1.0.0",
            suggested_version="1.0.1",
            chosen_version="1.0.1",
            reason=SafetyReason.TOO_NEW,
        )

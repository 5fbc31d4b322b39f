# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Semantic version helpers: cleaning, stability checks and bump grouping.

npm versions do not follow PEP 440, so parsing is limited to the plain
``MAJOR.MINOR.PATCH`` triple that the safety buffer accepts.
"""

from __future__ import annotations

from collections.abc import Iterable

from .constants import RANGE_PREFIX_PATTERN, SEMVER_PATTERN, STABLE_VERSION_PATTERN
from .models import GroupedUpdates, PackageUpdate, SafetyDecision, VersionBump

SemverTriple = tuple[int, int, int]


def clean_version(version: str) -> str:
    """Strip one leading ``^`` or ``~`` range operator from ``version``."""

    return RANGE_PREFIX_PATTERN.sub("", version, count=1)


def is_stable(version: str) -> bool:
    """Return ``True`` for plain ``MAJOR.MINOR.PATCH`` releases without tags."""

    return STABLE_VERSION_PATTERN.match(version) is not None


def is_semver(version: str) -> bool:
    """Return ``True`` when ``version`` is a triple with an optional pre-release tag."""

    return SEMVER_PATTERN.match(version) is not None


def parse_semver(version: str) -> SemverTriple | None:
    """Parse the numeric triple of ``version``.

    The range prefix is stripped first. Pre-release and build suffixes make
    the value unparsable.

    Args:
        version: Version or range string such as ``^1.2.3``.

    Returns:
        SemverTriple | None: Parsed ``(major, minor, patch)``, or ``None`` when the
        value is not an exact stable triple.
    """

    cleaned = clean_version(version.strip())
    if not is_stable(cleaned):
        return None
    major, minor, patch = (int(part) for part in cleaned.split("."))
    return major, minor, patch


def classify_bump(installed: str, new: str) -> VersionBump:
    """Classify the change from ``installed`` to ``new``.

    Unparsable input on either side, and identical versions, classify as
    :attr:`VersionBump.PATCH`.
    """

    current = parse_semver(installed)
    target = parse_semver(new)
    if current is None or target is None:
        return VersionBump.PATCH
    if target[0] != current[0]:
        return VersionBump.MAJOR
    if target[1] != current[1]:
        return VersionBump.MINOR
    return VersionBump.PATCH


def _append(grouped: GroupedUpdates, update: PackageUpdate) -> None:
    bump = classify_bump(update.current_version, update.new_version)
    grouped.group(bump).append(update)


def group_by_bump(decisions: Iterable[SafetyDecision]) -> GroupedUpdates:
    """Partition eligible decisions by bump kind, preserving input order."""

    grouped = GroupedUpdates()
    for decision in decisions:
        if decision.chosen_version is None:
            continue
        _append(
            grouped,
            PackageUpdate(
                name=decision.name,
                current_version=decision.installed_range,
                new_version=decision.chosen_version,
            ),
        )
    return grouped


def regroup(grouped: GroupedUpdates) -> GroupedUpdates:
    """Re-classify every update in ``grouped``; applying it twice changes nothing."""

    result = GroupedUpdates()
    for update in grouped.flatten():
        _append(result, update)
    return result


def max_name_length(grouped: GroupedUpdates) -> int:
    return max((len(update.name) for update in grouped.flatten()), default=0)


__all__ = [
    "SemverTriple",
    "classify_bump",
    "clean_version",
    "group_by_bump",
    "is_semver",
    "is_stable",
    "max_name_length",
    "parse_semver",
    "regroup",
]

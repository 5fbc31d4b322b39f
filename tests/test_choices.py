# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the grouped picker choices."""

from __future__ import annotations

from depguard.choices import build_choices, format_version_change, package_url
from depguard.models import GroupedUpdates, PackageUpdate, SelectionItem, VersionBump


def _grouped() -> GroupedUpdates:
    return GroupedUpdates(
        major=[PackageUpdate(name="react", current_version="^17.0.2", new_version="18.2.0")],
        patch=[
            PackageUpdate(name="lodash", current_version="^4.17.20", new_version="4.17.21"),
            PackageUpdate(name="@types/node", current_version="~20.1.0", new_version="20.1.4"),
        ],
    )


def test_build_choices_orders_groups_and_skips_empty_ones() -> None:
    choices = build_choices(_grouped())

    headers = [choice.label for choice in choices if choice.is_header]
    assert headers == [
        "Patch (2) - Backwards-compatible bug fixes",
        "Major (1) - Potentially breaking API changes",
    ]
    assert [choice.value for choice in choices if choice.selectable] == [
        SelectionItem(name="lodash", version="4.17.21"),
        SelectionItem(name="@types/node", version="20.1.4"),
        SelectionItem(name="react", version="18.2.0"),
    ]
    assert not any(choice.checked for choice in choices)


def test_choice_rows_align_names_and_link_to_npm() -> None:
    choices = build_choices(_grouped())
    lodash = next(choice for choice in choices if choice.value and choice.value.name == "lodash")

    assert lodash.label == "lodash" + " " * 7 + "4.17.20 → 4.17.21"
    assert "[link=https://www.npmjs.com/package/lodash]" in lodash.markup
    assert lodash.bump is VersionBump.PATCH


def test_build_choices_is_pure() -> None:
    grouped = _grouped()

    assert build_choices(grouped) == build_choices(grouped)
    assert build_choices(GroupedUpdates()) == []


def test_format_version_change_highlights_changed_components() -> None:
    assert format_version_change("^1.2.3", "1.2.4", VersionBump.PATCH) == "1.2.3 → 1.2.4"
    assert format_version_change("^1.2.3", "1.3.0", VersionBump.MINOR, markup=True) == "1.2.3 → 1.[blue]3.0[/blue]"
    assert format_version_change("^1.2.3", "2.0.0", VersionBump.MAJOR, markup=True) == "1.2.3 → [red]2.0.0[/red]"
    assert format_version_change("latest", "2.0.0", VersionBump.PATCH, markup=True) == "latest → 2.0.0"
    assert package_url("@scope/pkg") == "https://www.npmjs.com/package/@scope/pkg"

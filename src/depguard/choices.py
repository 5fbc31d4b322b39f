# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build the grouped choice list offered to the operator."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict

from .constants import NPM_PACKAGE_URL
from .models import GroupedUpdates, SelectionItem, VersionBump
from .versions import clean_version, max_name_length, parse_semver

BUMP_STYLES: Final[dict[VersionBump, str]] = {
    VersionBump.PATCH: "green",
    VersionBump.MINOR: "blue",
    VersionBump.MAJOR: "red",
}

BUMP_DESCRIPTIONS: Final[dict[VersionBump, str]] = {
    VersionBump.PATCH: "Backwards-compatible bug fixes",
    VersionBump.MINOR: "Backwards-compatible features",
    VersionBump.MAJOR: "Potentially breaking API changes",
}

# Lowest risk first.
GROUP_ORDER: Final[tuple[VersionBump, ...]] = tuple(sorted(VersionBump, key=lambda bump: bump.rank))


class PromptChoice(BaseModel):
    """A row of the picker; header rows have no value and are never selectable."""

    model_config = ConfigDict(frozen=True)

    label: str
    bump: VersionBump
    value: SelectionItem | None = None
    markup: str = ""
    checked: bool = False

    @property
    def is_header(self) -> bool:
        return self.value is None

    @property
    def selectable(self) -> bool:
        return self.value is not None


def format_version_change(current: str, new: str, bump: VersionBump, *, markup: bool = False) -> str:
    """Render ``current → new`` with the changed components highlighted.

    Args:
        current: Installed version or range.
        new: Target version.
        bump: Classification used to pick the highlighted components.
        markup: Emit Rich markup instead of plain text.

    Returns:
        str: Version change description.
    """

    clean_current = clean_version(current)
    clean_new = clean_version(new)
    if not markup or parse_semver(clean_current) is None or parse_semver(clean_new) is None:
        return f"{clean_current} → {clean_new}"

    style = BUMP_STYLES[bump]
    major, minor, patch = clean_new.split(".")
    if bump is VersionBump.MAJOR:
        highlighted = f"[{style}]{clean_new}[/{style}]"
    elif bump is VersionBump.MINOR:
        highlighted = f"{major}.[{style}]{minor}.{patch}[/{style}]"
    else:
        highlighted = f"{major}.{minor}.[{style}]{patch}[/{style}]"
    return f"{clean_current} → {highlighted}"


def package_url(name: str) -> str:
    return f"{NPM_PACKAGE_URL}/{name}"


def build_choices(grouped: GroupedUpdates) -> list[PromptChoice]:
    """Emit patch, minor then major rows, each non-empty group behind a header.

    Pure: the result depends only on ``grouped``.
    """

    width = max_name_length(grouped)
    choices: list[PromptChoice] = []
    for bump in GROUP_ORDER:
        updates = grouped.group(bump)
        if not updates:
            continue
        style = BUMP_STYLES[bump]
        header = f"{bump.label} ({len(updates)})"
        choices.append(
            PromptChoice(
                label=f"{header} - {BUMP_DESCRIPTIONS[bump]}",
                bump=bump,
                markup=f"[bold {style}]{header}[/bold {style}][dim] - {BUMP_DESCRIPTIONS[bump]}[/dim]",
            ),
        )
        for update in updates:
            padding = " " * (width - len(update.name) + 2)
            plain = format_version_change(update.current_version, update.new_version, bump)
            rich_change = format_version_change(update.current_version, update.new_version, bump, markup=True)
            url = package_url(update.name)
            choices.append(
                PromptChoice(
                    label=f"{update.name}{padding}{plain}",
                    bump=bump,
                    value=SelectionItem(name=update.name, version=update.new_version),
                    markup=f"{update.name}{padding}{rich_change}  [dim][link={url}]{url}[/link][/dim]",
                ),
            )
    return choices


__all__ = [
    "BUMP_DESCRIPTIONS",
    "BUMP_STYLES",
    "PromptChoice",
    "build_choices",
    "format_version_change",
    "package_url",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Interactive prompts rendered with Rich.

Every prompt runs inside :func:`~depguard.errors.cancellation_guard` so an
interrupted prompt surfaces as :class:`~depguard.errors.UserCancellationError`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TextIO

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .choices import PromptChoice
from .console import detect_tty, get_console_manager
from .constants import PROMPT_PAGE_SIZE
from .errors import cancellation_guard
from .models import SelectionItem

ALL_TOKENS = frozenset({"a", "all", "*"})


class SelectionSyntaxError(ValueError):
    """Raised when the operator's selection cannot be parsed."""


class Prompter:
    """Thin wrapper over Rich prompts bound to one console and input stream."""

    def __init__(self, console: Console | None = None, *, stream: TextIO | None = None) -> None:
        self.console = console or get_console_manager().get(color=detect_tty(), emoji=True)
        self._stream = stream

    def confirm(self, message: str, *, default: bool = False) -> bool:
        with cancellation_guard():
            return Confirm.ask(message, console=self.console, default=default, stream=self._stream)

    def ask(self, message: str, *, default: str = "") -> str:
        with cancellation_guard():
            return Prompt.ask(
                message,
                console=self.console,
                default=default,
                show_default=bool(default),
                stream=self._stream,
            )

    def choose(self, message: str, options: Mapping[str, str], *, default: str) -> str:
        """Ask the operator to pick one key of ``options``.

        Args:
            message: Question shown to the operator.
            options: Mapping of answer keys to descriptions.
            default: Key returned when the operator just presses Enter.

        Returns:
            str: Selected key.
        """

        for key, description in options.items():
            self.console.print(f"  [bold]{key}[/bold]  {description}")
        with cancellation_guard():
            return Prompt.ask(
                message,
                console=self.console,
                choices=list(options),
                default=default,
                stream=self._stream,
            )


def parse_selection(answer: str, count: int) -> list[int]:
    """Translate ``"1,3-5"`` style answers into zero-based row indexes.

    An empty answer selects nothing; ``all`` selects every row.

    Raises:
        SelectionSyntaxError: When a token is not a valid number or range.
    """

    text = answer.strip().lower()
    if not text:
        return []
    if text in ALL_TOKENS:
        return list(range(count))
    selected: list[int] = []
    for token in text.replace(",", " ").split():
        start_text, sep, end_text = token.partition("-")
        try:
            start = int(start_text)
            end = int(end_text) if sep else start
        except ValueError as exc:
            raise SelectionSyntaxError(f"'{token}' is not a number or range") from exc
        if start < 1 or end > count or start > end:
            raise SelectionSyntaxError(f"'{token}' is outside 1-{count}")
        for number in range(start, end + 1):
            if number - 1 not in selected:
                selected.append(number - 1)
    return sorted(selected)


class RichPicker:
    """Render grouped choices and return the rows the operator picks."""

    def __init__(self, prompter: Prompter | None = None, *, page_size: int = PROMPT_PAGE_SIZE) -> None:
        self._prompter = prompter or Prompter()
        self._page_size = page_size

    def _render(self, choices: Sequence[PromptChoice]) -> list[SelectionItem]:
        console = self._prompter.console
        total = sum(1 for choice in choices if choice.selectable)
        selectable: list[SelectionItem] = []
        for choice in choices:
            if choice.value is None:
                console.print()
                console.print(choice.markup or choice.label)
                continue
            selectable.append(choice.value)
            console.print(f"  [bold]{len(selectable):>3}[/bold]  {choice.markup or choice.label}")
            if len(selectable) % self._page_size == 0 and len(selectable) < total:
                self._prompter.ask("[dim]Press Enter for more[/dim]")
        return selectable

    def select(
        self,
        choices: Sequence[PromptChoice],
        *,
        message: str = "Select packages to update",
    ) -> list[SelectionItem]:
        """Show ``choices`` and return the selected items in display order.

        Nothing is selected unless the operator opts in.

        Raises:
            UserCancellationError: When the prompt is interrupted.
        """

        selectable = self._render(choices)
        if not selectable:
            return []
        hint = "numbers or ranges such as 1,3-5; 'all' for everything; Enter for none"
        while True:
            answer = self._prompter.ask(f"{message} [dim]({hint})[/dim]")
            try:
                indexes = parse_selection(answer, len(selectable))
            except SelectionSyntaxError as exc:
                self._prompter.console.print(f"[yellow]{exc}[/yellow]")
                continue
            return [selectable[index] for index in indexes]


__all__ = ["Prompter", "RichPicker", "SelectionSyntaxError", "parse_selection"]

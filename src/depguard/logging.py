# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.rule import Rule
from rich.status import Status
from rich.table import Table
from rich.text import Text

from .console import detect_tty, get_console_manager


def emoji(symbol: str, enable: bool) -> str:
    """Select an emoji symbol based on the caller's preference.

    Args:
        symbol: Emoji text to include in the output.
        enable: Flag indicating whether emoji output is desired.

    Returns:
        str: Emoji symbol when enabled, otherwise an empty string.
    """

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool | None = None) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
        use_color: Flag indicating whether ANSI colour support is desired.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=True)
    if color_enabled:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def step(number: int, total: int, label: str, *, use_color: bool | None = None) -> None:
    """Announce a numbered workflow step."""

    section(f"Step {number}/{total}: {label}", use_color=use_color)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("ℹ️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def skip(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a message for an operation the operator chose not to run."""

    prefix = emoji("⊘ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="dim", use_emoji=use_emoji, use_color=use_color)


def summary_table(
    title: str,
    rows: Mapping[str, object],
    *,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``rows`` as a two-column key/value table.

    Args:
        title: Caption rendered above the table.
        rows: Ordered mapping of labels to values.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("label", style="bold" if color_enabled else None)
    table.add_column("value")
    for label, value in rows.items():
        table.add_row(label, str(value))
    console.print()
    console.print(table)


def progress_bar(*, use_emoji: bool, console: Console | None = None, use_color: bool | None = None) -> Progress:
    """Return a spinner progress display bound to the shared console.

    Messages printed through the helpers in this module while the display is
    live share its console and are rendered above it.

    Args:
        use_emoji: Flag indicating whether emoji output is desired.
        console: Optional console replacing the shared one.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    target = console or get_console_manager().get(color=color_enabled, emoji=use_emoji)
    return Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(bar_width=None),
        TimeElapsedColumn(),
        console=target,
        redirect_stdout=False,
        redirect_stderr=False,
    )


def status(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> Status:
    """Return a transient spinner showing ``msg`` while a blocking call runs."""

    color_enabled = detect_tty() if use_color is None else use_color
    return get_console_manager().get(color=color_enabled, emoji=use_emoji).status(msg)


def configure_diagnostics(*, verbose: bool) -> None:
    """Route ``depguard`` diagnostic loggers to a Rich handler.

    Args:
        verbose: When ``True`` debug records are emitted, otherwise warnings only.
    """

    logger = logging.getLogger("depguard")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in [handler for handler in logger.handlers if isinstance(handler, RichHandler)]:
        logger.removeHandler(handler)
    console = get_console_manager().get(color=detect_tty(), emoji=False)
    logger.addHandler(RichHandler(console=console, show_path=False))


__all__ = [
    "configure_diagnostics",
    "emoji",
    "fail",
    "info",
    "ok",
    "progress_bar",
    "section",
    "skip",
    "status",
    "step",
    "summary_table",
    "warn",
]

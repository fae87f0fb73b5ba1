"""Keyboard help modal content and layout.

Rendering here is presentation-only and side-effect free: the modal is
returned as overlays that the frame writer paints on top of the base frame.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ui_theme import UITheme
from .ansi import display_width, fit_ansi_line

HELP_TITLE = "Keyboard Controls"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation",
        (
            ("↑/k", "Move up"),
            ("↓/j", "Move down"),
            ("PgUp", "Page up"),
            ("PgDn", "Page down"),
            ("Home/End", "First / last result"),
        ),
    ),
    (
        "Query Mode",
        (
            (":", "Enter query mode"),
            ("Enter", "Execute query"),
            ("Esc", "Exit query mode"),
            ("↑/↓", "Navigate query history"),
        ),
    ),
    (
        "Other Commands",
        (
            ("d", "Toggle detail view"),
            ("y", "Copy results to clipboard"),
            ("q/Esc", "Quit application"),
            ("?/F1", "Show this help"),
            ("Ctrl+L", "Clear query"),
        ),
    ),
    (
        "Tree View Mode",
        (
            ("t", "Toggle tree view"),
            ("↑/k", "Move up in tree"),
            ("↓/j", "Move down in tree"),
            ("Enter/Space", "Expand/collapse node"),
            ("Esc", "Exit tree view"),
        ),
    ),
)


@dataclass(frozen=True)
class Overlay:
    """Block of styled lines painted at a fixed screen position."""

    row: int
    col: int
    lines: tuple[str, ...]


def help_lines(theme: UITheme) -> list[str]:
    """Return the styled body lines of the help modal."""
    lines: list[str] = []
    for index, (heading, bindings) in enumerate(HELP_SECTIONS):
        if index:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        lines.append("")
        for key, description in bindings:
            lines.append(f"{theme.help_key}{key}{theme.reset} - {description}")
    lines.append("")
    lines.append(f"{theme.help_dim}Press any key to close{theme.reset}")
    return lines


def help_overlays(width: int, height: int, theme: UITheme) -> list[Overlay]:
    """Return the dimmed backdrop and the centered help modal."""
    backdrop = Overlay(
        row=0,
        col=0,
        lines=tuple(f"{theme.help_backdrop}{' ' * max(1, width)}{theme.reset}" for _ in range(height)),
    )

    modal_w = max(20, min(60, width))
    modal_h = max(15, min(40, height))
    modal_w = min(modal_w, max(1, width))
    modal_h = min(modal_h, max(1, height))
    inner_w = max(1, modal_w - 2)
    inner_h = max(0, modal_h - 2)
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)

    title = f" {HELP_TITLE} "
    title_w = display_width(title)
    left = max(0, (inner_w - title_w) // 2)
    right = max(0, inner_w - left - title_w)
    border = theme.help_modal_border
    top = (
        f"{border}╭{'─' * left}{theme.reset}{theme.help_modal_title}{title}{theme.reset}"
        f"{border}{'─' * right}╮{theme.reset}"
    )
    if title_w > inner_w:
        top = f"{border}╭{'─' * inner_w}╮{theme.reset}"

    body = help_lines(theme)
    rows = [top]
    for i in range(inner_h):
        text = f" {body[i]}" if i < len(body) else ""
        rows.append(f"{border}│{theme.reset}{fit_ansi_line(text, inner_w)}{theme.reset}{border}│{theme.reset}")
    rows.append(f"{border}╰{'─' * inner_w}╯{theme.reset}")
    return [backdrop, Overlay(row=y, col=x, lines=tuple(rows[:modal_h]))]


__all__ = ["HELP_SECTIONS", "HELP_TITLE", "Overlay", "help_lines", "help_overlays"]

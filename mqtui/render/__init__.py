"""Frame rendering for the query UI.

``build_frame`` is a pure function of app state and terminal size: it returns
the base rows, the overlays painted above them (error popup, help modal) and
the terminal cursor position. ``render_frame`` writes a built frame to the
terminal in one ``os.write``.
"""

from __future__ import annotations

import os
import sys
import textwrap
from dataclasses import dataclass, fields

from ..app import App
from ..config import DEFAULT_STYLE
from ..document import Node, to_markdown
from ..tree_view import NODE_STYLE_KEYS, TreeView
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import display_width, fit_ansi_line, sanitize_terminal_text
from .help import Overlay, help_overlays
from .highlight import highlight_markdown

HEADER_ROWS = 3
STATUS_ROWS = 1
LIST_PERCENT = 40

MODE_LABELS: dict[str, str] = {
    "normal": "NORMAL",
    "query": "QUERY",
    "help": "HELP",
    "tree": "TREE VIEW",
}
TITLE_HINT = "Press 't' for tree view, '?' for help"
EMPTY_QUERY_HINT = "Enter a query to filter results"
NO_RESULTS_HINT = "No results found"
NO_TREE_HINT = "Document tree unavailable"

_NODE_DEFAULTS = {field.name: field.default for field in fields(Node)}


@dataclass(frozen=True)
class Frame:
    """Composed screen: base rows, overlays and optional cursor ``(row, col)``."""

    lines: list[str]
    overlays: list[Overlay]
    cursor: tuple[int, int] | None = None


def _box(
    title: str,
    body: list[str],
    width: int,
    height: int,
    theme: UITheme,
    *,
    rounded: bool = False,
) -> list[str]:
    """Draw ``body`` inside a bordered box exactly ``width`` x ``height``."""
    if height <= 0 or width <= 0:
        return []
    if width < 2:
        return [" " * width for _ in range(height)]
    tl, tr, bl, br = ("╭", "╮", "╰", "╯") if rounded else ("┌", "┐", "└", "┘")
    inner_w = width - 2
    label = f" {title} " if title else ""
    if display_width(label) > inner_w:
        label = ""
    top = f"{theme.border}{tl}{theme.reset}{label}{theme.border}{'─' * (inner_w - display_width(label))}{tr}{theme.reset}"
    if height == 1:
        return [top]
    rows = [top]
    for i in range(height - 2):
        text = body[i] if i < len(body) else ""
        rows.append(f"{theme.border}│{theme.reset}{fit_ansi_line(text, inner_w)}{theme.reset}{theme.border}│{theme.reset}")
    rows.append(f"{theme.border}{bl}{'─' * inner_w}{br}{theme.reset}")
    return rows


def _center(text: str, width: int) -> str:
    pad = max(0, (width - display_width(text)) // 2)
    return " " * pad + text


def first_line(node: Node) -> str:
    """Return the first Markdown line of ``node`` as a list label."""
    markdown = to_markdown(node)
    return sanitize_terminal_text(markdown.split("\n", 1)[0])


def describe_node(node: Node, indent: int = 0) -> list[str]:
    """Return an indented structural dump of ``node`` and its descendants."""
    pad = "  " * indent
    attrs = [
        f"{name}={getattr(node, name)!r}"
        for name, default in _NODE_DEFAULTS.items()
        if name not in {"kind", "children"} and getattr(node, name) != default
    ]
    head = f"{pad}{node.kind}"
    if attrs:
        head += " " + " ".join(attrs)
    lines = [sanitize_terminal_text(head)]
    for child in node.children:
        lines.extend(describe_node(child, indent + 1))
    return lines


def _scroll_start(selected: int, count: int, visible: int) -> int:
    """Return the first visible row that keeps ``selected`` on screen."""
    if visible <= 0 or selected < visible:
        return 0
    return min(selected - visible + 1, max(0, count - visible))


def _title_bar(app: App, width: int, theme: UITheme) -> list[str]:
    title = f"mqtui - {app.filename}" if app.filename else "mqtui"
    text = (
        f"{theme.title}{sanitize_terminal_text(title)}{theme.reset} | "
        f"{theme.mode}{MODE_LABELS[app.mode]}{theme.reset} | "
        f"{theme.hint}{TITLE_HINT}{theme.reset}"
    )
    return _box("", [_center(text, width - 2)], width, HEADER_ROWS, theme, rounded=True)


def _query_box(app: App, width: int, theme: UITheme) -> tuple[list[str], tuple[int, int]]:
    query = sanitize_terminal_text(app.query)
    body = [f"{theme.query_text}{query}{theme.reset}"]
    prefix = sanitize_terminal_text(app.query[: app.cursor_position])
    cursor_col = min(width - 2, 1 + display_width(prefix))
    return _box("Query", body, width, HEADER_ROWS, theme), (1, max(0, cursor_col))


def _results_box(app: App, width: int, height: int, theme: UITheme) -> list[str]:
    if not app.results:
        hint = EMPTY_QUERY_HINT if not app.query else NO_RESULTS_HINT
        return _box("Results", [f"{theme.empty_hint}{hint}{theme.reset}"], width, height, theme)
    visible = max(0, height - 2)
    start = _scroll_start(app.selected_idx, len(app.results), visible)
    body: list[str] = []
    for offset, node in enumerate(app.results[start : start + visible]):
        label = first_line(node)
        if start + offset == app.selected_idx:
            label = f"{theme.reverse}{fit_ansi_line(label, width - 2)}{theme.reset}"
        body.append(label)
    return _box("Results", body, width, height, theme)


def _detail_box(app: App, width: int, height: int, theme: UITheme, style: str) -> list[str]:
    node = app.selected_result
    if node is None:
        return _box("Detail View", [], width, height, theme)
    body = [f"{theme.detail_label}Structure{theme.reset}"]
    body.extend(f" {line}" for line in describe_node(node))
    body.append("")
    body.append(f"{theme.detail_label}Markdown{theme.reset}")
    markdown = sanitize_terminal_text(to_markdown(node))
    highlighted = highlight_markdown(markdown, style, no_color=theme.name == "plain")
    body.extend(f" {line}" for line in highlighted.split("\n"))
    return _box("Detail View", body, width, height, theme)


def _tree_box(tree_view: TreeView | None, width: int, height: int, theme: UITheme) -> list[str]:
    if tree_view is None:
        return _box("Document Tree", [f"{theme.empty_hint}{NO_TREE_HINT}{theme.reset}"], width, height, theme)
    visible = max(0, height - 2)
    start = _scroll_start(tree_view.selected_index, len(tree_view.items), visible)
    body: list[str] = []
    for item in tree_view.items[start : start + visible]:
        line = sanitize_terminal_text(item.line)
        if item.index == tree_view.selected_index:
            body.append(f"{theme.reverse}{fit_ansi_line(line, width - 2)}{theme.reset}")
        else:
            color = getattr(theme, NODE_STYLE_KEYS[item.node.kind])
            body.append(f"{color}{line}{theme.reset}")
    return _box("Document Tree", body, width, height, theme)


def status_text(app: App) -> str:
    """Return the status line text: result count and last run time."""
    return (
        f"{len(app.results)} results | "
        f"Execution time: {app.last_exec_time * 1000:.2f}ms | Press q to quit"
    )


def _error_overlay(message: str, width: int, height: int, theme: UITheme) -> Overlay:
    popup_w = min(max(20, min(60, width)), max(1, width))
    inner_w = max(1, popup_w - 2)
    wrapped = textwrap.wrap(sanitize_terminal_text(message), inner_w) or [""]
    wrapped = wrapped[: max(1, min(4, height - 2))]
    popup_h = len(wrapped) + 2
    x = max(0, (width - popup_w) // 2)
    y = max(0, (height - popup_h) // 2)
    label = " Error "
    if display_width(label) > inner_w:
        label = ""
    rows = [f"{theme.error_border}┌{label}{'─' * (inner_w - display_width(label))}┐{theme.reset}"]
    for line in wrapped:
        rows.append(f"{theme.error_border}│{theme.reset}{theme.error}{fit_ansi_line(line, inner_w)}{theme.reset}{theme.error_border}│{theme.reset}")
    rows.append(f"{theme.error_border}└{'─' * inner_w}┘{theme.reset}")
    return Overlay(row=y, col=x, lines=tuple(rows))


def build_frame(
    app: App,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
    style: str = DEFAULT_STYLE,
) -> Frame:
    """Compose the full screen for the current app state."""
    width = max(1, width)
    height = max(1, height)
    cursor: tuple[int, int] | None = None

    if app.mode == "query":
        header, cursor = _query_box(app, width, theme)
    else:
        header = _title_bar(app, width, theme)

    content_h = max(0, height - HEADER_ROWS - STATUS_ROWS)
    if app.mode == "tree":
        content = _tree_box(app.tree_view, width, content_h, theme)
    elif app.show_detail and app.results:
        list_w = max(1, width * LIST_PERCENT // 100)
        detail_w = max(1, width - list_w)
        left = _results_box(app, list_w, content_h, theme)
        right = _detail_box(app, detail_w, content_h, theme, style)
        content = [a + b for a, b in zip(left, right)]
    else:
        content = _results_box(app, width, content_h, theme)

    status = f"{theme.status}{fit_ansi_line(status_text(app), width)}{theme.reset}"
    lines = (header + content + [status])[:height]
    while len(lines) < height:
        lines.append(" " * width)

    overlays: list[Overlay] = []
    if app.error_msg:
        overlays.append(_error_overlay(app.error_msg, width, height, theme))
    if app.mode == "help":
        overlays.extend(help_overlays(width, height, theme))
        cursor = None
    return Frame(lines=lines, overlays=overlays, cursor=cursor)


def frame_to_ansi(frame: Frame) -> str:
    """Serialize ``frame`` into one terminal write."""
    out: list[str] = ["\033[H"]
    for row, line in enumerate(frame.lines):
        out.append(f"\033[{row + 1};1H{line}\033[0m\033[K")
    for overlay in frame.overlays:
        for offset, line in enumerate(overlay.lines):
            out.append(f"\033[{overlay.row + offset + 1};{overlay.col + 1}H{line}\033[0m")
    if frame.cursor is not None:
        row, col = frame.cursor
        out.append(f"\033[{row + 1};{col + 1}H\033[?25h")
    else:
        out.append("\033[?25l")
    return "".join(out)


def render_frame(frame: Frame, fd: int | None = None) -> None:
    """Write ``frame`` to ``fd`` (stdout by default)."""
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, frame_to_ansi(frame).encode("utf-8", errors="replace"))


__all__ = [
    "EMPTY_QUERY_HINT",
    "Frame",
    "MODE_LABELS",
    "NO_RESULTS_HINT",
    "Overlay",
    "build_frame",
    "describe_node",
    "first_line",
    "frame_to_ansi",
    "render_frame",
    "status_text",
]

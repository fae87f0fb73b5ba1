"""Pygments highlighting of Markdown snippets for the detail pane."""

from __future__ import annotations

import logging

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import MarkdownLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..config import DEFAULT_STYLE

logger = logging.getLogger(__name__)

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_LEXER = MarkdownLexer()


def normalize_style(style: str | None) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    if not style:
        return DEFAULT_STYLE
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r", style)
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_markdown(source: str, style: str = DEFAULT_STYLE, *, no_color: bool = False) -> str:
    """Return ``source`` with ANSI colors, or unchanged when color is off."""
    if no_color or not source:
        return source
    rendered = highlight(source, _LEXER, _formatter_for_style(normalize_style(style)))
    # Pygments always terminates output with a newline.
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


__all__ = ["highlight_markdown", "normalize_style"]

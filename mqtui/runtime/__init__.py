"""Runtime wiring: terminal session, event source and the main loop."""

from __future__ import annotations

import logging
import sys

from ..app import App
from ..config import DEFAULT_STYLE, DEFAULT_TICK_MS
from ..render import build_frame, render_frame
from ..ui_theme import DEFAULT_THEME, UITheme
from .event_source import EventSource
from .loop import RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def run_app(
    app: App,
    *,
    theme: UITheme = DEFAULT_THEME,
    style: str = DEFAULT_STYLE,
    tick_ms: int = DEFAULT_TICK_MS,
) -> None:
    """Run ``app`` interactively on the attached terminal."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)

    def draw(current: App) -> None:
        columns, rows = terminal.size()
        render_frame(build_frame(current, columns, rows, theme, style), stdout_fd)

    events = EventSource(stdin_fd, tick_ms, start=False)

    def startup() -> None:
        app.exec_query()
        events.start()

    try:
        run_main_loop(
            app,
            terminal,
            events,
            draw,
            RuntimeLoopTiming(frame_seconds=max(1, tick_ms) / 1000.0),
            startup=startup,
        )
    finally:
        events.close()
    logger.debug("session ended")


__all__ = ["EventSource", "RuntimeLoopTiming", "TerminalController", "run_app", "run_main_loop"]

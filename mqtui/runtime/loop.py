"""Main interactive loop.

Draws when the frame is dirty, takes at most one event from the event source
and dispatches it, until the app asks to quit. The loop itself only wires
collaborators together; behavior lives in ``App``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..app import App
from .event_source import EventSource
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling loop behavior."""

    frame_seconds: float


def run_main_loop(
    app: App,
    terminal: TerminalController,
    events: EventSource,
    draw: Callable[[App], None],
    timing: RuntimeLoopTiming,
    startup: Callable[[], None] | None = None,
) -> None:
    """Run the TUI until ``app.should_quit`` is set.

    ``startup`` runs once the terminal is in raw mode, before the first draw.

    ``ChannelError`` from the event source propagates after the terminal is
    restored by the raw-mode context manager.
    """
    with terminal.raw_mode():
        if startup is not None:
            startup()
        while not app.should_quit:
            if app.dirty:
                draw(app)
                app.dirty = False
            key = events.next(timeout=timing.frame_seconds)
            if key is None:
                continue
            app.handle_event(key)
    logger.debug("main loop finished")


__all__ = ["RuntimeLoopTiming", "run_main_loop"]

"""Background terminal input poller.

A daemon thread polls the key reader for at most the remaining tick interval
and forwards key tokens into an unbounded queue. Terminal size changes are
forwarded as ``RESIZE`` tokens. The consumer drains the queue one token at a
time with :meth:`EventSource.next`.
"""

from __future__ import annotations

import logging
import shutil
import threading
import time
from collections.abc import Callable
from queue import Empty, Queue

from ..errors import ChannelError
from ..input import RESIZE
from ..input import read_key as default_read_key

logger = logging.getLogger(__name__)

DEFAULT_TICK_MS = 100

_DISCONNECTED = object()


def _terminal_size() -> tuple[int, int]:
    term_size = shutil.get_terminal_size((80, 24))
    return term_size.columns, term_size.lines


class EventSource:
    """Single-producer queue of key tokens fed by a background thread."""

    def __init__(
        self,
        stdin_fd: int,
        tick_ms: int = DEFAULT_TICK_MS,
        *,
        read_key: Callable[[int, int | None], str] = default_read_key,
        get_size: Callable[[], tuple[int, int]] = _terminal_size,
        start: bool = True,
    ) -> None:
        self.stdin_fd = stdin_fd
        self.tick_seconds = max(1, int(tick_ms)) / 1000.0
        self._read_key = read_key
        self._get_size = get_size
        self._queue: Queue[object] = Queue()
        self._stopped = threading.Event()
        self._disconnected = False
        self._thread = threading.Thread(
            target=self._worker,
            name="mqtui-event-source",
            daemon=True,
        )
        if start:
            self.start()

    def _worker(self) -> None:
        last_tick = time.monotonic()
        last_size = self._get_size()
        skip_next_lf = False
        while not self._stopped.is_set():
            remaining = self.tick_seconds - (time.monotonic() - last_tick)
            try:
                key = self._read_key(self.stdin_fd, max(0, int(remaining * 1000)))
            except Exception:
                logger.debug("key reader failed; disconnecting", exc_info=True)
                self._queue.put(_DISCONNECTED)
                return
            if self._stopped.is_set():
                break
            if key:
                if skip_next_lf and key == "ENTER_LF":
                    skip_next_lf = False
                    key = ""
                elif key == "ENTER_CR":
                    key = "ENTER"
                    skip_next_lf = True
                else:
                    if key == "ENTER_LF":
                        key = "ENTER"
                    skip_next_lf = False
            if key:
                self._queue.put(key)

            size = self._get_size()
            if size != last_size:
                last_size = size
                self._queue.put(RESIZE)

            if time.monotonic() - last_tick >= self.tick_seconds:
                last_tick = time.monotonic()
        logger.debug("event source stopped")

    def next(self, timeout: float | None = None) -> str | None:
        """Return the next token, or ``None`` when nothing arrived.

        Without ``timeout`` this never blocks; with one it waits at most that
        many seconds. Raises ``ChannelError`` once the producer disconnects.
        """
        if self._disconnected:
            raise ChannelError("Event channel disconnected")
        try:
            if timeout is None:
                item = self._queue.get_nowait()
            else:
                item = self._queue.get(timeout=max(0.0, timeout))
        except Empty:
            return None
        if item is _DISCONNECTED:
            self._disconnected = True
            raise ChannelError("Event channel disconnected")
        return item

    def start(self) -> None:
        """Start polling; a no-op after the first call."""
        if self._thread.ident is None:
            self._thread.start()

    def close(self) -> None:
        """Ask the poller thread to stop after its current read."""
        self._stopped.set()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def __enter__(self) -> EventSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["DEFAULT_TICK_MS", "EventSource", "RESIZE"]

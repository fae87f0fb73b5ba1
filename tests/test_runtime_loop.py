from __future__ import annotations

from contextlib import contextmanager
import unittest

from mqtui.app import App
from mqtui.errors import ChannelError
from mqtui.input import RESIZE
from mqtui.runtime import RuntimeLoopTiming, run_main_loop


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeEvents:
    def __init__(self, items: list[object]) -> None:
        self.items = list(items)
        self.timeouts: list[float | None] = []

    def next(self, timeout: float | None = None) -> str | None:
        self.timeouts.append(timeout)
        if not self.items:
            raise AssertionError("loop asked for more events than scripted")
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _timing() -> RuntimeLoopTiming:
    return RuntimeLoopTiming(frame_seconds=0.05)


class RuntimeLoopBehaviorTests(unittest.TestCase):
    def test_loop_draws_dispatches_and_quits(self) -> None:
        app = App("# A\n\n# B\n")
        app.exec_query()
        terminal = _FakeTerminal()
        events = _FakeEvents([None, "j", None, "q"])
        draws: list[int] = []

        run_main_loop(app, terminal, events, lambda current: draws.append(current.selected_idx), _timing())

        self.assertTrue(app.should_quit)
        self.assertEqual(draws, [0, 1])
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))
        self.assertEqual(events.timeouts, [0.05] * 4)

    def test_idle_iterations_do_not_redraw(self) -> None:
        app = App("")
        events = _FakeEvents([None, None, None, "q"])
        draws: list[App] = []

        run_main_loop(app, _FakeTerminal(), events, draws.append, _timing())

        self.assertEqual(len(draws), 1)

    def test_resize_forces_redraw(self) -> None:
        app = App("")
        events = _FakeEvents([RESIZE, "q"])
        draws: list[App] = []

        run_main_loop(app, _FakeTerminal(), events, draws.append, _timing())

        self.assertEqual(len(draws), 2)

    def test_startup_runs_inside_raw_mode_before_first_draw(self) -> None:
        app = App("# A\n")
        terminal = _FakeTerminal()
        calls: list[str] = []

        def startup() -> None:
            calls.append(f"startup entered={terminal.entered}")
            app.exec_query()

        run_main_loop(
            app,
            terminal,
            _FakeEvents(["q"]),
            lambda current: calls.append(f"draw results={len(current.results)}"),
            _timing(),
            startup=startup,
        )

        self.assertEqual(calls, ["startup entered=1", "draw results=1"])

    def test_channel_error_propagates_after_terminal_restore(self) -> None:
        app = App("")
        terminal = _FakeTerminal()
        events = _FakeEvents([ChannelError("Event channel disconnected")])

        with self.assertRaises(ChannelError):
            run_main_loop(app, terminal, events, lambda _app: None, _timing())

        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()

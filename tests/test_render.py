"""Frame composition tests.

Frames are built with the plain theme so assertions can match visible text
without escape sequences.
"""

from __future__ import annotations

import unittest

from mqtui.app import App
from mqtui.render import (
    EMPTY_QUERY_HINT,
    NO_RESULTS_HINT,
    build_frame,
    describe_node,
    first_line,
    frame_to_ansi,
    status_text,
)
from mqtui.render.ansi import display_width
from mqtui.render.help import HELP_TITLE
from mqtui.document import parse_markdown
from mqtui.ui_theme import PLAIN_THEME

DOC = "# Alpha\n\nbody text\n\n## Beta\n"


def _app(content: str = DOC) -> App:
    app = App(content, "notes.md")
    app.exec_query()
    return app


def _frame(app: App, width: int = 80, height: int = 24):
    return build_frame(app, width, height, PLAIN_THEME)


def _overlay_text(frame) -> str:
    return "\n".join(line for overlay in frame.overlays for line in overlay.lines)


class BuildFrameTests(unittest.TestCase):
    def test_frame_fills_terminal_exactly(self) -> None:
        frame = _frame(_app())
        self.assertEqual(len(frame.lines), 24)
        self.assertTrue(all(display_width(line) == 80 for line in frame.lines))

    def test_title_bar_shows_file_and_mode(self) -> None:
        frame = _frame(_app())
        self.assertIn("mqtui - notes.md", frame.lines[1])
        self.assertIn("NORMAL", frame.lines[1])
        self.assertIsNone(frame.cursor)

    def test_results_list_shows_first_markdown_line(self) -> None:
        frame = _frame(_app())
        body = "\n".join(frame.lines)
        self.assertIn("# Alpha", body)
        self.assertIn("body text", body)
        self.assertIn("## Beta", body)

    def test_status_line(self) -> None:
        app = _app()
        app.last_exec_time = 0.0015
        frame = _frame(app)
        self.assertTrue(frame.lines[-1].startswith("3 results | Execution time: 1.50ms | Press q to quit"))
        self.assertEqual(status_text(app), "3 results | Execution time: 1.50ms | Press q to quit")

    def test_empty_hints(self) -> None:
        empty = _app("")
        self.assertIn(EMPTY_QUERY_HINT, "\n".join(_frame(empty).lines))

        app = _app()
        app.set_query(".code")
        app.exec_query()
        self.assertIn(NO_RESULTS_HINT, "\n".join(_frame(app).lines))

    def test_query_mode_places_cursor_after_text_before_cursor(self) -> None:
        app = _app()
        app.handle_event(":")
        for key in ".h":
            app.handle_event(key)
        app.handle_event("LEFT")

        frame = _frame(app)

        self.assertIn("Query", frame.lines[0])
        self.assertIn(".h", frame.lines[1])
        self.assertEqual(frame.cursor, (1, 2))

    def test_detail_view_splits_screen(self) -> None:
        app = _app()
        app.handle_event("d")
        frame = _frame(app)
        self.assertIn("Results", frame.lines[3])
        self.assertIn("Detail View", frame.lines[3])
        self.assertIn("heading depth=1", "\n".join(frame.lines))

    def test_tree_mode_rows(self) -> None:
        app = _app()
        app.handle_event("t")
        frame = _frame(app)
        body = "\n".join(frame.lines)
        self.assertIn("TREE VIEW", frame.lines[1])
        self.assertIn("Document Tree", body)
        self.assertIn("▶ H1 Alpha", body)
        self.assertIn("▶ Paragraph", body)

    def test_help_overlay_hides_cursor(self) -> None:
        app = _app()
        app.handle_event(":")
        app.handle_event("ESC")
        app.handle_event("?")
        frame = _frame(app, height=40)
        self.assertIn(HELP_TITLE, _overlay_text(frame))
        self.assertIn("Press any key to close", _overlay_text(frame))
        self.assertIsNone(frame.cursor)

    def test_error_overlay(self) -> None:
        app = _app()
        app.error_msg = "Query error: unknown selector .x at column 1"
        frame = _frame(app)
        text = _overlay_text(frame)
        self.assertIn(" Error ", text)
        self.assertIn("unknown selector", text)

    def test_tiny_terminal_does_not_fail(self) -> None:
        frame = _frame(_app(), width=5, height=3)
        self.assertEqual(len(frame.lines), 3)

    def test_document_text_is_sanitized(self) -> None:
        app = _app("evil \x1b[2J text\n")
        body = "\n".join(_frame(app).lines)
        self.assertNotIn("\x1b[2J", body)


class FrameHelpersTests(unittest.TestCase):
    def test_first_line_of_multiline_node(self) -> None:
        (code,) = parse_markdown("```sh\nls\n```\n")
        self.assertEqual(first_line(code), "```sh")

    def test_describe_node_lists_non_default_fields(self) -> None:
        (heading,) = parse_markdown("## Two\n")
        self.assertEqual(describe_node(heading), ["heading depth=2", "  text value='Two'"])

    def test_frame_to_ansi_positions_rows_and_cursor(self) -> None:
        app = _app()
        app.handle_event(":")
        out = frame_to_ansi(_frame(app, width=40, height=10))
        self.assertIn("\033[1;1H", out)
        self.assertIn("\033[10;1H", out)
        self.assertTrue(out.endswith("\033[?25h"))


if __name__ == "__main__":
    unittest.main()

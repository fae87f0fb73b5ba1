"""Interaction engine: session state and the mode state machine.

``App`` owns every piece of mutable session state. Each input token goes
through :meth:`App.handle_event`, which clears the transient error, marks the
frame dirty and routes the token to the dispatch table of the active mode.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .clipboard import copy_text_to_clipboard
from .document import Node, parse_markdown, render_markdown, text_node
from .errors import ClipboardError, ParseError, QueryError
from .input import RESIZE, KeyComboBinding, KeyComboRegistry
from .query import evaluate, format_value
from .tree_view import TreeView

logger = logging.getLogger(__name__)

MODES = ("normal", "query", "help", "tree")
PAGE_STRIDE = 10

CLIPBOARD_UNAVAILABLE = "Error: Could not access clipboard"
CLIPBOARD_FAILED = "Error: Could not copy to clipboard"
TREE_PARSE_FAILED = "Failed to parse markdown for tree view"


def _is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class App:
    """One interactive session over a loaded Markdown document."""

    def __init__(
        self,
        content: str,
        filename: str | None = None,
        *,
        parse_document: Callable[[str], list[Node]] = parse_markdown,
        evaluate_query: Callable[[str, list[Node]], list[object]] = evaluate,
        copy_to_clipboard: Callable[[str], None] = copy_text_to_clipboard,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.content = content
        self.filename = filename
        self.mode = "normal"
        self.query = ""
        self.cursor_position = 0
        self.query_history: list[str] = []
        self.history_position: int | None = None
        self.results: list[Node] = []
        self.selected_idx = 0
        self.last_exec_time = 0.0
        self.error_msg: str | None = None
        self.tree_view: TreeView | None = None
        self.show_detail = False
        self.should_quit = False
        self.dirty = True

        self._parse_document = parse_document
        self._evaluate_query = evaluate_query
        self._copy_to_clipboard = copy_to_clipboard
        self._clock = clock
        self._registries: dict[str, KeyComboRegistry] = {
            "normal": self._normal_registry(),
            "query": self._query_registry(),
            "tree": self._tree_registry(),
        }

    @classmethod
    def with_file(cls, content: str, filename: str, **kwargs) -> App:
        """Build an app whose title shows ``filename``."""
        return cls(content, filename, **kwargs)

    # Dispatch tables

    def _normal_registry(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("q", "ESC"), self.quit),
            KeyComboBinding(("d",), self.toggle_detail),
            KeyComboBinding((":",), self.enter_query_mode),
            KeyComboBinding(("?", "F1"), self.enter_help_mode),
            KeyComboBinding(("t",), self.enter_tree_mode),
            KeyComboBinding(("DOWN", "j"), self.select_next),
            KeyComboBinding(("UP", "k"), self.select_previous),
            KeyComboBinding(("PAGE_DOWN",), self.page_down),
            KeyComboBinding(("PAGE_UP",), self.page_up),
            KeyComboBinding(("HOME",), self.select_first),
            KeyComboBinding(("END",), self.select_last),
            KeyComboBinding(("CTRL_L",), self.clear_query),
            KeyComboBinding(("y",), self.copy_results),
        )

    def _query_registry(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC",), self.cancel_query),
            KeyComboBinding(("ENTER",), self.submit_query),
            KeyComboBinding(("BACKSPACE",), self.delete_before_cursor),
            KeyComboBinding(("DELETE",), self.delete_at_cursor),
            KeyComboBinding(("LEFT",), self.cursor_left),
            KeyComboBinding(("RIGHT",), self.cursor_right),
            KeyComboBinding(("HOME",), self.cursor_home),
            KeyComboBinding(("END",), self.cursor_end),
            KeyComboBinding(("UP",), self.history_previous),
            KeyComboBinding(("DOWN",), self.history_next),
        )

    def _tree_registry(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC", "t"), self.leave_tree_mode),
            KeyComboBinding(("q",), self.quit),
            KeyComboBinding(("DOWN", "j"), self.tree_move_down),
            KeyComboBinding(("UP", "k"), self.tree_move_up),
            KeyComboBinding(("ENTER", " "), self.tree_toggle_expand),
            KeyComboBinding(("?", "F1"), self.enter_help_mode),
        )

    def handle_event(self, key: str) -> None:
        """Apply one input token to the session."""
        self.error_msg = None
        self.dirty = True
        if key == RESIZE:
            return
        if self.mode == "help":
            self.mode = "normal"
            return
        if self._registries[self.mode].dispatch(key):
            return
        if self.mode == "query" and _is_text_key(key):
            self.insert_char(key)

    # Mode transitions

    def quit(self) -> None:
        self.should_quit = True

    def enter_query_mode(self) -> None:
        self.mode = "query"
        self.cursor_position = len(self.query)

    def enter_help_mode(self) -> None:
        self.mode = "help"

    def enter_tree_mode(self) -> None:
        self.mode = "tree"
        self.init_tree_view()

    def leave_tree_mode(self) -> None:
        self.mode = "normal"

    def init_tree_view(self) -> None:
        """Parse ``content`` afresh and build a new tree, dropping expansion state."""
        try:
            nodes = self._parse_document(self.content)
        except ParseError:
            logger.debug("tree view parse failed", exc_info=True)
            self.tree_view = None
            self.error_msg = TREE_PARSE_FAILED
            return
        self.tree_view = TreeView(nodes)

    # Normal mode

    def toggle_detail(self) -> None:
        self.show_detail = not self.show_detail

    def select_next(self) -> None:
        if self.results:
            self.selected_idx = (self.selected_idx + 1) % len(self.results)

    def select_previous(self) -> None:
        if self.results:
            self.selected_idx = self.selected_idx - 1 if self.selected_idx > 0 else len(self.results) - 1

    def page_down(self) -> None:
        if self.results:
            self.selected_idx = min(self.selected_idx + PAGE_STRIDE, len(self.results) - 1)

    def page_up(self) -> None:
        if self.results:
            self.selected_idx = max(self.selected_idx - PAGE_STRIDE, 0)

    def select_first(self) -> None:
        if self.results:
            self.selected_idx = 0

    def select_last(self) -> None:
        if self.results:
            self.selected_idx = len(self.results) - 1

    def clear_query(self) -> None:
        self.query = ""
        self.cursor_position = 0
        self.exec_query()

    def copy_results(self) -> None:
        """Copy the Markdown of every result to the system clipboard."""
        if not self.results:
            return
        try:
            self._copy_to_clipboard(render_markdown(self.results))
        except ClipboardError as exc:
            logger.warning("clipboard copy failed: %s", exc)
            self.error_msg = CLIPBOARD_UNAVAILABLE if exc.unavailable else CLIPBOARD_FAILED

    # Query mode

    def cancel_query(self) -> None:
        self.mode = "normal"
        self.history_position = None

    def submit_query(self) -> None:
        self.mode = "normal"
        if self.query and (not self.query_history or self.query_history[-1] != self.query):
            self.query_history.append(self.query)
        self.history_position = None
        self.exec_query()

    def insert_char(self, ch: str) -> None:
        self.query = self.query[: self.cursor_position] + ch + self.query[self.cursor_position :]
        self.cursor_position += 1
        self.exec_query()

    def delete_before_cursor(self) -> None:
        if self.cursor_position > 0:
            self.query = self.query[: self.cursor_position - 1] + self.query[self.cursor_position :]
            self.cursor_position -= 1
            self.exec_query()

    def delete_at_cursor(self) -> None:
        if self.cursor_position < len(self.query):
            self.query = self.query[: self.cursor_position] + self.query[self.cursor_position + 1 :]
            self.exec_query()

    def cursor_left(self) -> None:
        if self.cursor_position > 0:
            self.cursor_position -= 1

    def cursor_right(self) -> None:
        if self.cursor_position < len(self.query):
            self.cursor_position += 1

    def cursor_home(self) -> None:
        self.cursor_position = 0

    def cursor_end(self) -> None:
        self.cursor_position = len(self.query)

    def history_previous(self) -> None:
        """Load the previous history entry without re-evaluating."""
        if not self.query_history:
            return
        if self.history_position is None:
            self.history_position = len(self.query_history) - 1
            self.query = self.query_history[self.history_position]
        elif self.history_position > 0:
            self.history_position -= 1
            self.query = self.query_history[self.history_position]
        self.cursor_position = len(self.query)

    def history_next(self) -> None:
        """Load the next history entry; stepping past the end clears the query."""
        if self.history_position is None:
            return
        if self.history_position < len(self.query_history) - 1:
            self.history_position += 1
            self.query = self.query_history[self.history_position]
        else:
            self.history_position = None
            self.query = ""
        self.cursor_position = len(self.query)

    # Tree mode

    def tree_move_down(self) -> None:
        if self.tree_view is not None:
            self.tree_view.move_down()

    def tree_move_up(self) -> None:
        if self.tree_view is not None:
            self.tree_view.move_up()

    def tree_toggle_expand(self) -> None:
        if self.tree_view is not None:
            self.tree_view.toggle_expand()

    # Evaluation

    def exec_query(self) -> None:
        """Re-parse the document and re-run the current query.

        A parse failure clears ``results``; a query failure keeps the previous
        ones. The selection is clamped afterwards either way.
        """
        start = self._clock()
        try:
            nodes = self._parse_document(self.content)
        except ParseError as exc:
            self.error_msg = f"Markdown parse error: {exc}"
            self.results = []
            logger.debug("markdown parse failed: %s", exc)
        else:
            if not self.query:
                self.results = list(nodes)
            else:
                try:
                    values = self._evaluate_query(self.query, nodes)
                except QueryError as exc:
                    self.error_msg = f"Query error: {exc}"
                    logger.debug("query %r failed: %s", self.query, exc)
                else:
                    self.results = [
                        value if isinstance(value, Node) else text_node(format_value(value))
                        for value in values
                    ]

        if self.selected_idx >= len(self.results):
            self.selected_idx = len(self.results) - 1 if self.results else 0
        self.last_exec_time = self._clock() - start
        logger.debug(
            "query %r: %d results in %.2fms",
            self.query,
            len(self.results),
            self.last_exec_time * 1000,
        )

    @property
    def selected_result(self) -> Node | None:
        if 0 <= self.selected_idx < len(self.results):
            return self.results[self.selected_idx]
        return None

    def set_query(self, query: str) -> None:
        """Replace the query text and move the cursor to its end."""
        self.query = query
        self.cursor_position = len(query)

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown mode: {mode!r}")
        self.mode = mode


__all__ = ["App", "MODES", "PAGE_STRIDE", "RESIZE"]

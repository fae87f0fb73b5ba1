"""Flattened, expandable tree projection of a document.

Rows are produced by a pre-order walk of the source forest. The walk counter
is both a row's identity (the key into the expansion map) and its index in
``items``; children of collapsed nodes are skipped and consume no identity.
Identities therefore shift when an earlier node is expanded or collapsed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .document.nodes import Node, node_children, to_text

logger = logging.getLogger(__name__)

TEXT_LABEL_LIMIT = 50
TEXT_LABEL_KEEP = 47


def _inline_label(node: Node) -> str:
    return "".join(to_text(child).strip() for child in node.children)


def _text_label(node: Node) -> str:
    text = node.value.strip()
    if len(text) > TEXT_LABEL_LIMIT:
        return f"Text: {text[:TEXT_LABEL_KEEP]}..."
    return f"Text: {text}"


def _list_label(node: Node) -> str:
    prefix = "Ordered" if node.ordered else "Unordered"
    return f"{prefix} List ({len(node.children)} items)"


def _list_item_label(node: Node) -> str:
    if node.checked is None:
        return "List Item"
    return "List Item [x]" if node.checked else "List Item [ ]"


_LABELS: dict[str, Callable[[Node], str]] = {
    "heading": lambda node: f"H{node.depth} {_inline_label(node)}",
    "paragraph": lambda node: "Paragraph",
    "list": _list_label,
    "list_item": _list_item_label,
    "blockquote": lambda node: "Blockquote",
    "strong": lambda node: "Strong",
    "emphasis": lambda node: "Emphasis",
    "delete": lambda node: "Strikethrough",
    "link": lambda node: f"Link: {_inline_label(node)}",
    "table": lambda node: f"Table ({len(node.children)} rows)",
    "table_row": lambda node: "Table Header" if node.header else "Table Row",
    "table_cell": lambda node: "Table Cell",
    "footnote": lambda node: f"Footnote: {node.ident}",
    "text": _text_label,
    "code": lambda node: f"Code Block ({node.lang or 'text'})",
    "code_inline": lambda node: f"Inline Code: {node.value.strip()}",
    "html": lambda node: f"HTML: {node.value.strip()}",
    "image": lambda node: f"Image: {node.value}",
    "hr": lambda node: "Horizontal Rule",
    "break": lambda node: "Line Break",
    "math": lambda node: f"Math: {node.value.strip()}",
    "math_inline": lambda node: f"Inline Math: {node.value.strip()}",
    "yaml": lambda node: f"YAML: {node.value.strip()}",
    "footnote_ref": lambda node: f"Footnote Ref: {node.ident}",
}

# Theme attribute used to color each kind of row.
NODE_STYLE_KEYS: dict[str, str] = {
    "heading": "node_heading",
    "paragraph": "node_other",
    "list": "node_list",
    "list_item": "node_other",
    "blockquote": "node_blockquote",
    "strong": "node_strong",
    "emphasis": "node_emphasis",
    "delete": "node_other",
    "link": "node_link",
    "table": "node_other",
    "table_row": "node_other",
    "table_cell": "node_other",
    "footnote": "node_other",
    "text": "node_other",
    "code": "node_code",
    "code_inline": "node_code",
    "html": "node_other",
    "image": "node_image",
    "hr": "node_rule",
    "break": "node_other",
    "math": "node_math",
    "math_inline": "node_math",
    "yaml": "node_other",
    "footnote_ref": "node_other",
}


def display_text(node: Node) -> str:
    """Return the one-line label shown for ``node`` in the tree."""
    return _LABELS[node.kind](node)


def expand_glyph(has_children: bool, is_expanded: bool) -> str:
    """Return the two-column expand marker for a row."""
    if not has_children:
        return "  "
    return "▼ " if is_expanded else "▶ "


@dataclass
class TreeItem:
    """One visible row of the tree."""

    node: Node
    display_text: str
    depth: int
    is_expanded: bool
    has_children: bool
    index: int

    @property
    def line(self) -> str:
        return "  " * self.depth + expand_glyph(self.has_children, self.is_expanded) + self.display_text


class TreeView:
    """Expandable flat view over a document forest."""

    def __init__(self, nodes: list[Node]) -> None:
        self.source_nodes: list[Node] = list(nodes)
        self.expanded: dict[int, bool] = {}
        self.items: list[TreeItem] = []
        self.selected_index = 0
        self.rebuild_items()

    def rebuild_items(self) -> None:
        """Recompute ``items`` from the source forest and expansion map."""
        items: list[TreeItem] = []
        counter = 0

        def visit(node: Node, depth: int) -> None:
            nonlocal counter
            index = counter
            counter += 1
            children = node_children(node)
            is_expanded = self.expanded.get(index, False)
            items.append(
                TreeItem(
                    node=node,
                    display_text=display_text(node),
                    depth=depth,
                    is_expanded=is_expanded,
                    has_children=bool(children),
                    index=index,
                )
            )
            if is_expanded and children:
                for child in children:
                    visit(child, depth + 1)

        for root in self.source_nodes:
            visit(root, 0)
        self.items = items
        logger.debug("tree rebuilt: %d rows", len(items))

    def move_up(self) -> None:
        if self.selected_index > 0:
            self.selected_index -= 1

    def move_down(self) -> None:
        if self.selected_index + 1 < len(self.items):
            self.selected_index += 1

    def toggle_expand(self) -> None:
        """Flip expansion of the selected row when it has children."""
        if not (0 <= self.selected_index < len(self.items)):
            return
        item = self.items[self.selected_index]
        if not item.has_children:
            return
        self.expanded[item.index] = not item.is_expanded
        self.rebuild_items()
        self.selected_index = min(self.selected_index, max(0, len(self.items) - 1))

    def get_selected_node(self) -> Node | None:
        if 0 <= self.selected_index < len(self.items):
            return self.items[self.selected_index].node
        return None


__all__ = [
    "NODE_STYLE_KEYS",
    "TreeItem",
    "TreeView",
    "display_text",
    "expand_glyph",
]

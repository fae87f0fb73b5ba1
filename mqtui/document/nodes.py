"""Document node model.

``Node`` is a closed tagged union: ``kind`` selects one of a fixed set of
variants and only the fields relevant to that variant are populated. Every
per-kind table in the code base is keyed by ``kind`` and must cover all of
``NODE_KINDS``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

CONTAINER_KINDS: frozenset[str] = frozenset(
    {
        "heading",
        "paragraph",
        "list",
        "list_item",
        "blockquote",
        "strong",
        "emphasis",
        "delete",
        "link",
        "table",
        "table_row",
        "table_cell",
        "footnote",
    }
)

LEAF_KINDS: frozenset[str] = frozenset(
    {
        "text",
        "code",
        "code_inline",
        "html",
        "image",
        "hr",
        "break",
        "math",
        "math_inline",
        "yaml",
        "footnote_ref",
    }
)

NODE_KINDS: frozenset[str] = CONTAINER_KINDS | LEAF_KINDS

# Containers whose children are blocks rather than inline runs.
_BLOCK_CONTAINER_KINDS = frozenset({"list", "list_item", "blockquote", "table", "footnote"})


@dataclass(frozen=True)
class Node:
    """One document node.

    ``value`` holds the literal payload of leaves (text, code body, alt text
    for images). ``depth`` is the heading level. ``start``/``ordered`` describe
    lists, ``checked`` task-list items, ``header`` table header rows.
    """

    kind: str
    children: tuple[Node, ...] = ()
    value: str = ""
    depth: int = 0
    ordered: bool = False
    start: int = 1
    checked: bool | None = None
    lang: str | None = None
    url: str = ""
    title: str | None = None
    ident: str = ""
    header: bool = False

    def __post_init__(self) -> None:
        if self.kind not in NODE_KINDS:
            raise ValueError(f"unknown node kind: {self.kind!r}")
        if self.children and self.kind in LEAF_KINDS:
            raise ValueError(f"{self.kind} nodes cannot have children")


def text_node(value: str) -> Node:
    """Return a plain text leaf."""
    return Node("text", value=value)


def node_children(node: Node) -> tuple[Node, ...]:
    """Return child nodes; leaves always return an empty tuple."""
    if node.kind in CONTAINER_KINDS:
        return node.children
    return ()


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in pre-order."""
    yield node
    for child in node_children(node):
        yield from walk(child)


def to_text(node: Node) -> str:
    """Flatten a node to its plain text content."""
    if node.kind in LEAF_KINDS:
        if node.kind == "break":
            return "\n"
        if node.kind == "hr":
            return ""
        if node.kind == "footnote_ref":
            return node.ident
        return node.value
    separator = "\n" if node.kind in _BLOCK_CONTAINER_KINDS else ""
    if node.kind == "table_row":
        separator = " "
    return separator.join(to_text(child) for child in node.children)


def _inline(nodes: Iterable[Node]) -> str:
    return "".join(to_markdown(child) for child in nodes)


def _blocks(nodes: Iterable[Node]) -> str:
    return "\n".join(to_markdown(child) for child in nodes)


def _indent_continuation(text: str, width: int) -> str:
    lines = text.split("\n")
    pad = " " * width
    return "\n".join([lines[0], *[pad + line if line else line for line in lines[1:]]])


def _link_target(node: Node) -> str:
    if node.title:
        escaped = node.title.replace('"', '\\"')
        return f'({node.url} "{escaped}")'
    return f"({node.url})"


def _list_item_markdown(node: Node, marker: str) -> str:
    body = _blocks(node.children)
    if node.checked is not None:
        body = ("[x] " if node.checked else "[ ] ") + body
    return marker + _indent_continuation(body, len(marker))


def _list_markdown(node: Node) -> str:
    lines: list[str] = []
    for offset, item in enumerate(node.children):
        marker = f"{node.start + offset}. " if node.ordered else "- "
        if item.kind == "list_item":
            lines.append(_list_item_markdown(item, marker))
        else:
            lines.append(marker + to_markdown(item))
    return "\n".join(lines)


def _code_inline_markdown(node: Node) -> str:
    fence = "``" if "`" in node.value else "`"
    return f"{fence}{node.value}{fence}"


def _code_markdown(node: Node) -> str:
    body = node.value[:-1] if node.value.endswith("\n") else node.value
    return f"```{node.lang or ''}\n{body}\n```"


def _blockquote_markdown(node: Node) -> str:
    inner = _blocks(node.children)
    return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))


def _table_row_markdown(node: Node) -> str:
    cells = " | ".join(to_markdown(cell) for cell in node.children)
    return f"| {cells} |"


def _table_markdown(node: Node) -> str:
    lines: list[str] = []
    for row in node.children:
        lines.append(to_markdown(row))
        if row.header:
            lines.append("|" + "|".join(" --- " for _ in row.children) + "|")
    return "\n".join(lines)


_MARKDOWN_RENDERERS: dict[str, Callable[[Node], str]] = {
    "heading": lambda node: "#" * max(1, node.depth) + " " + _inline(node.children),
    "paragraph": lambda node: _inline(node.children),
    "list": _list_markdown,
    "list_item": lambda node: _list_item_markdown(node, "- "),
    "blockquote": _blockquote_markdown,
    "strong": lambda node: f"**{_inline(node.children)}**",
    "emphasis": lambda node: f"*{_inline(node.children)}*",
    "delete": lambda node: f"~~{_inline(node.children)}~~",
    "link": lambda node: f"[{_inline(node.children)}]{_link_target(node)}",
    "table": _table_markdown,
    "table_row": _table_row_markdown,
    "table_cell": lambda node: _inline(node.children),
    "footnote": lambda node: f"[^{node.ident}]: " + _indent_continuation(_blocks(node.children), 4),
    "text": lambda node: node.value,
    "code": _code_markdown,
    "code_inline": _code_inline_markdown,
    "html": lambda node: node.value.rstrip("\n"),
    "image": lambda node: f"![{node.value}]{_link_target(node)}",
    "hr": lambda node: "---",
    "break": lambda node: "\\\n",
    "math": lambda node: f"$$\n{node.value.strip()}\n$$",
    "math_inline": lambda node: f"${node.value}$",
    "yaml": lambda node: f"---\n{node.value.rstrip()}\n---",
    "footnote_ref": lambda node: f"[^{node.ident}]",
}


def to_markdown(node: Node) -> str:
    """Serialize one node back to Markdown source."""
    return _MARKDOWN_RENDERERS[node.kind](node)


def render_markdown(nodes: Iterable[Node]) -> str:
    """Serialize a node sequence, one node per block."""
    return "\n".join(to_markdown(node) for node in nodes)


__all__ = [
    "CONTAINER_KINDS",
    "LEAF_KINDS",
    "NODE_KINDS",
    "Node",
    "node_children",
    "render_markdown",
    "text_node",
    "to_markdown",
    "to_text",
    "walk",
]

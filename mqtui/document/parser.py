"""Markdown parsing into the document node model.

Uses markdown-it-py's token stream viewed through ``SyntaxTreeNode`` and
converts each syntax node into a ``Node``. Structural wrappers that carry no
meaning for queries (``inline``, ``thead``/``tbody``, the footnote block) are
flattened away.
"""

from __future__ import annotations

import functools
import logging

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from ..errors import ParseError
from .nodes import Node, text_node

logger = logging.getLogger(__name__)

_TASK_MARKERS: dict[str, bool] = {"[ ] ": False, "[x] ": True, "[X] ": True}

_INLINE_CONTAINERS: dict[str, str] = {
    "strong": "strong",
    "em": "emphasis",
    "s": "delete",
}


@functools.lru_cache(maxsize=1)
def _markdown_parser() -> MarkdownIt:
    """Return the shared parser configured for CommonMark plus extensions."""
    return (
        MarkdownIt("commonmark")
        .enable(["table", "strikethrough"])
        .use(front_matter_plugin)
        .use(footnote_plugin)
        .use(dollarmath_plugin)
    )


def _merge_text(nodes: list[Node]) -> list[Node]:
    """Join runs of adjacent text leaves into one leaf."""
    merged: list[Node] = []
    for node in nodes:
        if node.kind == "text" and merged and merged[-1].kind == "text":
            merged[-1] = text_node(merged[-1].value + node.value)
            continue
        merged.append(node)
    return merged


def _attr_str(syntax: SyntaxTreeNode, name: str) -> str | None:
    value = syntax.attrs.get(name)
    if value is None:
        return None
    return str(value)


def _convert_inline(syntax: SyntaxTreeNode) -> list[Node]:
    kind = syntax.type
    if kind == "text":
        return [text_node(syntax.content)] if syntax.content else []
    if kind == "softbreak":
        return [text_node("\n")]
    if kind == "hardbreak":
        return [Node("break")]
    if kind == "code_inline":
        return [Node("code_inline", value=syntax.content)]
    if kind == "html_inline":
        return [Node("html", value=syntax.content)]
    if kind.startswith("math_inline"):
        return [Node("math_inline", value=syntax.content)]
    if kind == "footnote_ref":
        return [Node("footnote_ref", ident=str(syntax.meta.get("label", syntax.meta.get("id", ""))))]
    if kind == "footnote_anchor":
        return []
    if kind == "image":
        return [
            Node(
                "image",
                value=syntax.content,
                url=_attr_str(syntax, "src") or "",
                title=_attr_str(syntax, "title"),
            )
        ]
    if kind == "link":
        return [
            Node(
                "link",
                children=tuple(_convert_inline_children(syntax)),
                url=_attr_str(syntax, "href") or "",
                title=_attr_str(syntax, "title"),
            )
        ]
    if kind in _INLINE_CONTAINERS:
        return [Node(_INLINE_CONTAINERS[kind], children=tuple(_convert_inline_children(syntax)))]
    # Unrecognized inline syntax keeps its children or its literal text.
    if syntax.children:
        return _convert_inline_children(syntax)
    return [text_node(syntax.content)] if syntax.content else []


def _convert_inline_children(syntax: SyntaxTreeNode) -> list[Node]:
    out: list[Node] = []
    for child in syntax.children:
        if child.type == "inline":
            out.extend(_convert_inline_children(child))
        else:
            out.extend(_convert_inline(child))
    return _merge_text(out)


def _table_rows(syntax: SyntaxTreeNode) -> list[Node]:
    rows: list[Node] = []
    for section in syntax.children:
        is_header = section.type == "thead"
        row_nodes = section.children if section.type in {"thead", "tbody"} else [section]
        for row in row_nodes:
            cells = tuple(
                Node("table_cell", children=tuple(_convert_inline_children(cell)))
                for cell in row.children
            )
            rows.append(Node("table_row", children=cells, header=is_header))
    return rows


def _split_task_marker(children: list[Node]) -> tuple[bool | None, list[Node]]:
    """Detect a ``[ ]``/``[x]`` prefix on the first paragraph of a list item."""
    if not children or children[0].kind != "paragraph":
        return None, children
    paragraph = children[0]
    if not paragraph.children or paragraph.children[0].kind != "text":
        return None, children
    first = paragraph.children[0]
    for marker, checked in _TASK_MARKERS.items():
        if first.value.startswith(marker):
            remainder = first.value[len(marker) :]
            inline = ([text_node(remainder)] if remainder else []) + list(paragraph.children[1:])
            return checked, [Node("paragraph", children=tuple(inline)), *children[1:]]
    return None, children


def _convert_block(syntax: SyntaxTreeNode) -> list[Node]:
    kind = syntax.type
    if kind == "heading":
        return [
            Node(
                "heading",
                children=tuple(_convert_inline_children(syntax)),
                depth=int(syntax.tag[1:]) if syntax.tag[1:].isdigit() else 1,
            )
        ]
    if kind == "paragraph":
        return [Node("paragraph", children=tuple(_convert_inline_children(syntax)))]
    if kind in {"bullet_list", "ordered_list"}:
        try:
            start = int(syntax.attrs.get("start", 1))
        except (TypeError, ValueError):
            start = 1
        return [
            Node(
                "list",
                children=tuple(_convert_blocks(syntax.children)),
                ordered=kind == "ordered_list",
                start=start,
            )
        ]
    if kind == "list_item":
        children = [node for child in syntax.children for node in _convert_block(child)]
        checked, children = _split_task_marker(children)
        return [Node("list_item", children=tuple(children), checked=checked)]
    if kind == "blockquote":
        return [Node("blockquote", children=tuple(_convert_blocks(syntax.children)))]
    if kind == "fence":
        info = syntax.info.strip()
        return [Node("code", value=syntax.content, lang=info.split()[0] if info else None)]
    if kind == "code_block":
        return [Node("code", value=syntax.content)]
    if kind == "html_block":
        return [Node("html", value=syntax.content)]
    if kind == "hr":
        return [Node("hr")]
    if kind == "table":
        return [Node("table", children=tuple(_table_rows(syntax)))]
    if kind.startswith("math_block"):
        return [Node("math", value=syntax.content)]
    if kind == "front_matter":
        return [Node("yaml", value=syntax.content)]
    if kind == "footnote_block":
        return _convert_blocks(syntax.children)
    if kind == "footnote":
        return [
            Node(
                "footnote",
                children=tuple(_convert_blocks(syntax.children)),
                ident=str(syntax.meta.get("label", syntax.meta.get("id", ""))),
            )
        ]
    if kind == "inline":
        return [Node("paragraph", children=tuple(_convert_inline_children(syntax)))]
    if syntax.children:
        return _convert_blocks(syntax.children)
    return [text_node(syntax.content)] if syntax.content else []


def _convert_blocks(children: list[SyntaxTreeNode]) -> list[Node]:
    return [node for child in children for node in _convert_block(child)]


def parse_markdown(text: str) -> list[Node]:
    """Parse Markdown ``text`` into its top-level node forest.

    Raises ``ParseError`` when the parser rejects the input.
    """
    if not isinstance(text, str):
        raise ParseError(f"expected text, got {type(text).__name__}")
    try:
        tokens = _markdown_parser().parse(text)
        root = SyntaxTreeNode(tokens)
        nodes = _convert_blocks(root.children)
    except ParseError:
        raise
    except Exception as exc:
        logger.debug("markdown parse failed", exc_info=True)
        raise ParseError(str(exc) or type(exc).__name__) from exc
    return nodes


__all__ = ["parse_markdown"]

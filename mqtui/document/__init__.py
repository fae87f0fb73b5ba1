"""Document model and Markdown parser."""

from .nodes import (
    CONTAINER_KINDS,
    LEAF_KINDS,
    NODE_KINDS,
    Node,
    node_children,
    render_markdown,
    text_node,
    to_markdown,
    to_text,
    walk,
)
from .parser import parse_markdown

__all__ = [
    "CONTAINER_KINDS",
    "LEAF_KINDS",
    "NODE_KINDS",
    "Node",
    "node_children",
    "parse_markdown",
    "render_markdown",
    "text_node",
    "to_markdown",
    "to_text",
    "walk",
]

"""Tests for Markdown parsing and node serialization.

Pins the node shapes produced for each supported construct and the Markdown
written back by ``to_markdown``. Per-kind tables must stay exhaustive.
"""

from __future__ import annotations

import unittest

from mqtui.document import (
    NODE_KINDS,
    Node,
    node_children,
    parse_markdown,
    render_markdown,
    text_node,
    to_markdown,
    to_text,
    walk,
)
from mqtui.document import nodes as nodes_mod
from mqtui.errors import ParseError


def _kinds(nodes: list[Node]) -> list[str]:
    return [node.kind for node in nodes]


class ParseMarkdownTests(unittest.TestCase):
    def test_empty_document_has_no_nodes(self) -> None:
        self.assertEqual(parse_markdown(""), [])

    def test_heading_and_paragraph_with_emphasis(self) -> None:
        heading, paragraph = parse_markdown("# Title\n\nHello *world*\n")

        self.assertEqual(heading.kind, "heading")
        self.assertEqual(heading.depth, 1)
        self.assertEqual(heading.children, (text_node("Title"),))
        self.assertEqual(_kinds(list(paragraph.children)), ["text", "emphasis"])
        self.assertEqual(paragraph.children[1].children, (text_node("world"),))

    def test_heading_levels_are_kept(self) -> None:
        nodes = parse_markdown("## Two\n\n###### Six\n")
        self.assertEqual([node.depth for node in nodes], [2, 6])

    def test_bullet_list_with_task_item(self) -> None:
        (lst,) = parse_markdown("- plain\n- [x] done\n- [ ] todo\n")

        self.assertEqual(lst.kind, "list")
        self.assertFalse(lst.ordered)
        self.assertEqual(_kinds(list(lst.children)), ["list_item"] * 3)
        self.assertEqual([item.checked for item in lst.children], [None, True, False])
        self.assertEqual(to_text(lst.children[1]), "done")

    def test_ordered_list_keeps_start_number(self) -> None:
        (lst,) = parse_markdown("3. three\n4. four\n")

        self.assertTrue(lst.ordered)
        self.assertEqual(lst.start, 3)
        self.assertEqual(to_markdown(lst), "3. three\n4. four")

    def test_fenced_code_keeps_language_and_body(self) -> None:
        (code,) = parse_markdown("```python\nprint(1)\n```\n")

        self.assertEqual(code.kind, "code")
        self.assertEqual(code.lang, "python")
        self.assertEqual(code.value, "print(1)\n")
        self.assertEqual(to_markdown(code), "```python\nprint(1)\n```")

    def test_link_image_and_inline_code(self) -> None:
        (paragraph,) = parse_markdown('[site](http://example.com "T") ![alt](a.png) `x`\n')
        link, image, code = (node for node in paragraph.children if node.kind != "text")

        self.assertEqual(link.kind, "link")
        self.assertEqual(link.url, "http://example.com")
        self.assertEqual(link.title, "T")
        self.assertEqual(to_markdown(link), '[site](http://example.com "T")')
        self.assertEqual(image.kind, "image")
        self.assertEqual(image.value, "alt")
        self.assertEqual(image.url, "a.png")
        self.assertEqual(code.kind, "code_inline")
        self.assertEqual(code.value, "x")

    def test_blockquote_and_rule(self) -> None:
        quote, rule, para = parse_markdown("> quoted\n\n---\n\nafter\n")

        self.assertEqual(quote.kind, "blockquote")
        self.assertEqual(to_markdown(quote), "> quoted")
        self.assertEqual(rule.kind, "hr")
        self.assertEqual(para.kind, "paragraph")

    def test_strikethrough_and_strong(self) -> None:
        (paragraph,) = parse_markdown("~~gone~~ **bold**\n")
        kinds = _kinds(list(paragraph.children))

        self.assertIn("delete", kinds)
        self.assertIn("strong", kinds)
        self.assertEqual(to_markdown(paragraph), "~~gone~~ **bold**")

    def test_hard_break_and_soft_break(self) -> None:
        (hard,) = parse_markdown("a  \nb\n")
        (soft,) = parse_markdown("a\nb\n")

        self.assertEqual(_kinds(list(hard.children)), ["text", "break", "text"])
        self.assertEqual(to_text(hard), "a\nb")
        self.assertEqual(soft.children, (text_node("a\nb"),))

    def test_table_rows_mark_header(self) -> None:
        (table,) = parse_markdown("| a | b |\n| --- | --- |\n| 1 | 2 |\n")

        self.assertEqual(table.kind, "table")
        self.assertEqual([row.header for row in table.children], [True, False])
        self.assertEqual(_kinds(list(table.children[0].children)), ["table_cell", "table_cell"])
        self.assertEqual(to_markdown(table), "| a | b |\n| --- | --- |\n| 1 | 2 |")

    def test_front_matter_becomes_yaml_node(self) -> None:
        nodes = parse_markdown("---\ntitle: x\n---\n# H\n")

        self.assertEqual(_kinds(nodes), ["yaml", "heading"])
        self.assertEqual(nodes[0].value.strip(), "title: x")

    def test_math_block_and_inline_math(self) -> None:
        block, para = parse_markdown("$$\nx^2\n$$\n\nsee $a+b$\n")

        self.assertEqual(block.kind, "math")
        self.assertEqual(block.value.strip(), "x^2")
        inline = [node for node in para.children if node.kind == "math_inline"]
        self.assertEqual(len(inline), 1)
        self.assertEqual(inline[0].value, "a+b")

    def test_footnote_reference_and_definition(self) -> None:
        nodes = parse_markdown("Text[^1].\n\n[^1]: The note.\n")
        kinds = {node.kind for root in nodes for node in walk(root)}

        self.assertIn("footnote_ref", kinds)
        self.assertIn("footnote", kinds)

    def test_non_text_input_raises_parse_error(self) -> None:
        with self.assertRaises(ParseError):
            parse_markdown(None)  # type: ignore[arg-type]


class NodeModelTests(unittest.TestCase):
    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Node("bogus")

    def test_leaf_kinds_cannot_have_children(self) -> None:
        with self.assertRaises(ValueError):
            Node("text", children=(text_node("x"),))

    def test_leaf_children_are_empty(self) -> None:
        self.assertEqual(node_children(Node("code", value="x")), ())

    def test_walk_is_pre_order(self) -> None:
        node = Node("paragraph", (text_node("a"), Node("strong", (text_node("b"),))))
        self.assertEqual(_kinds(list(walk(node))), ["paragraph", "text", "strong", "text"])

    def test_render_markdown_joins_blocks_with_newlines(self) -> None:
        nodes = parse_markdown("# Title\n\nHello *world*\n")
        self.assertEqual(render_markdown(nodes), "# Title\nHello *world*")

    def test_markdown_renderers_cover_every_kind(self) -> None:
        self.assertEqual(set(nodes_mod._MARKDOWN_RENDERERS), set(NODE_KINDS))

    def test_nested_list_item_indents_continuation(self) -> None:
        (lst,) = parse_markdown("- outer\n  - inner\n")
        self.assertEqual(to_markdown(lst), "- outer\n  - inner")


if __name__ == "__main__":
    unittest.main()

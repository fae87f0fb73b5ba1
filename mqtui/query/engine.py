"""Query evaluation over document nodes.

Each top-level input node flows through the expression separately and every
stage maps one value to zero or more output values. Values are ``Node``
instances, strings, numbers, booleans or ``None``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from ..document.nodes import Node, node_children, to_markdown, to_text, walk
from ..errors import QueryError
from .parser import BoolOp, Call, Compare, Identity, Literal, Pipe, Recurse, Selector, parse_query

logger = logging.getLogger(__name__)


def _kind_selector(kind: str) -> Callable[[Node], bool]:
    return lambda node: node.kind == kind


def _heading_selector(depth: int) -> Callable[[Node], bool]:
    return lambda node: node.kind == "heading" and node.depth == depth


SELECTORS: dict[str, Callable[[Node], bool]] = {
    "heading": _kind_selector("heading"),
    "h": _kind_selector("heading"),
    **{f"h{level}": _heading_selector(level) for level in range(1, 7)},
    "paragraph": _kind_selector("paragraph"),
    "list": _kind_selector("list"),
    "list_item": _kind_selector("list_item"),
    "item": _kind_selector("list_item"),
    "blockquote": _kind_selector("blockquote"),
    "strong": _kind_selector("strong"),
    "emphasis": _kind_selector("emphasis"),
    "em": _kind_selector("emphasis"),
    "delete": _kind_selector("delete"),
    "strikethrough": _kind_selector("delete"),
    "link": _kind_selector("link"),
    "table": _kind_selector("table"),
    "table_row": _kind_selector("table_row"),
    "table_cell": _kind_selector("table_cell"),
    "footnote": _kind_selector("footnote"),
    "text": _kind_selector("text"),
    "code": _kind_selector("code"),
    "code_inline": _kind_selector("code_inline"),
    "html": _kind_selector("html"),
    "image": _kind_selector("image"),
    "hr": _kind_selector("hr"),
    "break": _kind_selector("break"),
    "math": _kind_selector("math"),
    "math_inline": _kind_selector("math_inline"),
    "yaml": _kind_selector("yaml"),
    "footnote_ref": _kind_selector("footnote_ref"),
}

# Node attributes reachable through ``attr(name)``.
_ATTRIBUTES: dict[str, str] = {
    "depth": "depth",
    "level": "depth",
    "value": "value",
    "lang": "lang",
    "url": "url",
    "title": "title",
    "ident": "ident",
    "checked": "checked",
    "ordered": "ordered",
    "start": "start",
}


def format_value(value: object) -> str:
    """Return the textual form of a non-node query value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Node):
        return to_text(value)
    return str(value)


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "node"


def _truthy(value: object) -> bool:
    return value is not None and value is not False


def _as_text(name: str, value: object) -> str:
    """Coerce ``value`` to a string for a string function, or fail."""
    if isinstance(value, str):
        return value
    if isinstance(value, Node):
        return to_text(value)
    raise QueryError(f"{name}: expected string, got {_type_name(value)}")


def _comparable(value: object, other: object) -> object:
    if isinstance(value, Node) and isinstance(other, str):
        return to_text(value)
    return value


@dataclass(frozen=True)
class _Function:
    arity: int
    apply: Callable[[_Evaluator, tuple[object, ...], object], Iterator[object]]


class _Evaluator:
    def run(self, expr: object, value: object) -> Iterator[object]:
        if isinstance(expr, Identity):
            yield value
        elif isinstance(expr, Recurse):
            if isinstance(value, Node):
                yield from walk(value)
            else:
                yield value
        elif isinstance(expr, Selector):
            if isinstance(value, Node) and SELECTORS[expr.name](value):
                yield value
        elif isinstance(expr, Literal):
            yield expr.value
        elif isinstance(expr, Pipe):
            yield from self._pipe(expr.stages, value)
        elif isinstance(expr, Compare):
            for left in self.run(expr.left, value):
                for right in self.run(expr.right, value):
                    equal = _comparable(left, right) == _comparable(right, left)
                    yield equal if expr.op == "==" else not equal
        elif isinstance(expr, BoolOp):
            for left in self.run(expr.left, value):
                if expr.op == "and" and not _truthy(left):
                    yield False
                elif expr.op == "or" and _truthy(left):
                    yield True
                else:
                    for right in self.run(expr.right, value):
                        yield _truthy(right)
        elif isinstance(expr, Call):
            yield from FUNCTIONS[expr.name].apply(self, expr.args, value)
        else:
            raise QueryError(f"cannot evaluate {type(expr).__name__}")

    def _pipe(self, stages: tuple[object, ...], value: object) -> Iterator[object]:
        if not stages:
            yield value
            return
        for item in self.run(stages[0], value):
            yield from self._pipe(stages[1:], item)

    def argument(self, name: str, expr: object, value: object) -> str:
        """Evaluate a string argument against the current value."""
        for item in self.run(expr, value):
            if isinstance(item, str):
                return item
            raise QueryError(f"{name}: argument must be a string, got {_type_name(item)}")
        raise QueryError(f"{name}: argument produced no value")


def _select(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    if any(_truthy(result) for result in ev.run(args[0], value)):
        yield value


def _not(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    yield not _truthy(value)


def _to_text(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    yield format_value(value)


def _to_markdown(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    yield to_markdown(value) if isinstance(value, Node) else format_value(value)


def _kind(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    yield value.kind if isinstance(value, Node) else _type_name(value)


def _children(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    if isinstance(value, Node):
        yield from node_children(value)


def _len(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    if value is None:
        yield 0
    elif isinstance(value, (str, Node)):
        yield len(_as_text("len", value))
    else:
        raise QueryError(f"len: unsupported value of type {_type_name(value)}")


def _string_map(name: str, fn: Callable[[str], str]) -> Callable[..., Iterator[object]]:
    def apply(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
        yield fn(_as_text(name, value))

    return apply


def _string_test(name: str, fn: Callable[[str, str], bool]) -> Callable[..., Iterator[object]]:
    def apply(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
        yield fn(_as_text(name, value), ev.argument(name, args[0], value))

    return apply


def _test(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    pattern = ev.argument("test", args[0], value)
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise QueryError(f"test: invalid pattern {pattern!r}: {exc}") from exc
    yield compiled.search(_as_text("test", value)) is not None


def _replace(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    old = ev.argument("replace", args[0], value)
    new = ev.argument("replace", args[1], value)
    yield _as_text("replace", value).replace(old, new)


def _attr(ev: _Evaluator, args: tuple[object, ...], value: object) -> Iterator[object]:
    name = ev.argument("attr", args[0], value)
    field = _ATTRIBUTES.get(name)
    if field is None:
        raise QueryError(f"attr: unknown attribute {name!r}")
    if isinstance(value, Node):
        yield getattr(value, field)
    else:
        yield None


FUNCTIONS: dict[str, _Function] = {
    "select": _Function(1, _select),
    "not": _Function(0, _not),
    "to_text": _Function(0, _to_text),
    "to_markdown": _Function(0, _to_markdown),
    "kind": _Function(0, _kind),
    "children": _Function(0, _children),
    "len": _Function(0, _len),
    "upcase": _Function(0, _string_map("upcase", str.upper)),
    "downcase": _Function(0, _string_map("downcase", str.lower)),
    "trim": _Function(0, _string_map("trim", str.strip)),
    "contains": _Function(1, _string_test("contains", lambda text, arg: arg in text)),
    "starts_with": _Function(1, _string_test("starts_with", str.startswith)),
    "ends_with": _Function(1, _string_test("ends_with", str.endswith)),
    "test": _Function(1, _test),
    "replace": _Function(2, _replace),
    "attr": _Function(1, _attr),
}


def _check(expr: object) -> None:
    """Reject unknown selectors, unknown functions and bad arity up front."""
    if isinstance(expr, Selector):
        if expr.name not in SELECTORS:
            raise QueryError(f"unknown selector .{expr.name}", expr.position)
    elif isinstance(expr, Call):
        function = FUNCTIONS.get(expr.name)
        if function is None:
            raise QueryError(f"unknown function {expr.name}", expr.position)
        if len(expr.args) != function.arity:
            raise QueryError(
                f"{expr.name} expects {function.arity} argument(s), got {len(expr.args)}",
                expr.position,
            )
        for arg in expr.args:
            _check(arg)
    elif isinstance(expr, Pipe):
        for stage in expr.stages:
            _check(stage)
    elif isinstance(expr, (Compare, BoolOp)):
        _check(expr.left)
        _check(expr.right)


def compile_query(query: str) -> object:
    """Parse and validate ``query`` without evaluating it."""
    expr = parse_query(query)
    _check(expr)
    return expr


def evaluate(query: str, nodes: Iterable[Node]) -> list[object]:
    """Run ``query`` over each node in ``nodes`` and collect every output value."""
    results: list[object] = []
    try:
        expr = compile_query(query)
        evaluator = _Evaluator()
        for node in nodes:
            results.extend(evaluator.run(expr, node))
    except RecursionError as exc:
        raise QueryError("query nesting too deep") from exc
    logger.debug("query %r produced %d values", query, len(results))
    return results


__all__ = ["FUNCTIONS", "SELECTORS", "compile_query", "evaluate", "format_value"]

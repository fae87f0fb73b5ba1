"""Tokenizer and recursive-descent parser for the query language.

Grammar::

    pipeline := or_expr ("|" or_expr)*
    or_expr  := and_expr ("or" and_expr)*
    and_expr := compare ("and" compare)*
    compare  := primary (("==" | "!=") primary)?
    primary  := "." | ".." | ".name" | STRING | NUMBER | "true" | "false" | "null"
              | NAME ["(" pipeline ("," pipeline)* ")"] | "(" pipeline ")"
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import QueryError

_SYMBOLS: dict[str, str] = {
    "|": "PIPE",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
}
_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}
_LITERAL_NAMES: dict[str, object] = {"true": True, "false": False, "null": None}


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    position: int


@dataclass(frozen=True)
class Identity:
    pass


@dataclass(frozen=True)
class Recurse:
    pass


@dataclass(frozen=True)
class Selector:
    name: str
    position: int


@dataclass(frozen=True)
class Literal:
    value: object


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple[object, ...]
    position: int


@dataclass(frozen=True)
class Compare:
    op: str
    left: object
    right: object


@dataclass(frozen=True)
class BoolOp:
    op: str
    left: object
    right: object


@dataclass(frozen=True)
class Pipe:
    stages: tuple[object, ...]


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into tokens, ending with an ``EOF`` token."""
    tokens: list[Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _SYMBOLS:
            tokens.append(Token(_SYMBOLS[ch], ch, i))
            i += 1
            continue
        if source.startswith("==", i) or source.startswith("!=", i):
            tokens.append(Token("OP", source[i : i + 2], i))
            i += 2
            continue
        if ch == ".":
            if source.startswith("..", i):
                tokens.append(Token("RECURSE", "..", i))
                i += 2
                continue
            end = i + 1
            while end < n and _is_name_char(source[end]):
                end += 1
            if end == i + 1:
                tokens.append(Token("DOT", ".", i))
            else:
                tokens.append(Token("SELECTOR", source[i + 1 : end], i))
            i = end
            continue
        if ch == '"':
            out: list[str] = []
            end = i + 1
            while True:
                if end >= n:
                    raise QueryError("unterminated string", i)
                c = source[end]
                if c == '"':
                    break
                if c == "\\":
                    if end + 1 >= n:
                        raise QueryError("unterminated string", i)
                    escaped = source[end + 1]
                    if escaped not in _ESCAPES:
                        raise QueryError(f"invalid escape \\{escaped}", end)
                    out.append(_ESCAPES[escaped])
                    end += 2
                    continue
                out.append(c)
                end += 1
            tokens.append(Token("STRING", "".join(out), i))
            i = end + 1
            continue
        if ch.isdigit() or (ch == "-" and i + 1 < n and source[i + 1].isdigit()):
            end = i + 1
            while end < n and (source[end].isdigit() or source[end] == "."):
                end += 1
            tokens.append(Token("NUMBER", source[i:end], i))
            i = end
            continue
        if ch.isalpha() or ch == "_":
            end = i + 1
            while end < n and _is_name_char(source[end]):
                end += 1
            tokens.append(Token("NAME", source[i:end], i))
            i = end
            continue
        raise QueryError(f"unexpected character {ch!r}", i)
    tokens.append(Token("EOF", "", n))
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "EOF":
            self.index += 1
        return token

    def expect(self, kind: str, what: str) -> Token:
        token = self.current
        if token.kind != kind:
            found = token.value or "end of query"
            raise QueryError(f"expected {what}, found {found!r}", token.position)
        return self.advance()

    def pipeline(self) -> object:
        stages = [self.or_expr()]
        while self.current.kind == "PIPE":
            self.advance()
            stages.append(self.or_expr())
        if len(stages) == 1:
            return stages[0]
        return Pipe(tuple(stages))

    def or_expr(self) -> object:
        left = self.and_expr()
        while self.current.kind == "NAME" and self.current.value == "or":
            self.advance()
            left = BoolOp("or", left, self.and_expr())
        return left

    def and_expr(self) -> object:
        left = self.compare()
        while self.current.kind == "NAME" and self.current.value == "and":
            self.advance()
            left = BoolOp("and", left, self.compare())
        return left

    def compare(self) -> object:
        left = self.primary()
        if self.current.kind == "OP":
            op = self.advance().value
            return Compare(op, left, self.primary())
        return left

    def primary(self) -> object:
        token = self.current
        if token.kind == "DOT":
            self.advance()
            return Identity()
        if token.kind == "RECURSE":
            self.advance()
            return Recurse()
        if token.kind == "SELECTOR":
            self.advance()
            return Selector(token.value, token.position)
        if token.kind == "STRING":
            self.advance()
            return Literal(token.value)
        if token.kind == "NUMBER":
            self.advance()
            try:
                number = float(token.value) if "." in token.value else int(token.value)
            except ValueError:
                raise QueryError(f"invalid number {token.value!r}", token.position) from None
            return Literal(number)
        if token.kind == "LPAREN":
            self.advance()
            inner = self.pipeline()
            self.expect("RPAREN", "')'")
            return inner
        if token.kind == "NAME":
            if token.value in {"and", "or"}:
                raise QueryError(f"unexpected keyword {token.value!r}", token.position)
            self.advance()
            if token.value in _LITERAL_NAMES:
                return Literal(_LITERAL_NAMES[token.value])
            args: list[object] = []
            if self.current.kind == "LPAREN":
                self.advance()
                if self.current.kind != "RPAREN":
                    args.append(self.pipeline())
                    while self.current.kind == "COMMA":
                        self.advance()
                        args.append(self.pipeline())
                self.expect("RPAREN", "')'")
            return Call(token.value, tuple(args), token.position)
        found = token.value or "end of query"
        raise QueryError(f"unexpected {found!r}", token.position)


def parse_query(source: str) -> object:
    """Parse ``source`` into an expression tree, raising ``QueryError``."""
    tokens = tokenize(source)
    if tokens[0].kind == "EOF":
        raise QueryError("empty query")
    parser = _Parser(tokens)
    try:
        expr = parser.pipeline()
    except RecursionError as exc:
        raise QueryError("query nesting too deep") from exc
    if parser.current.kind != "EOF":
        raise QueryError(f"unexpected {parser.current.value!r}", parser.current.position)
    return expr


__all__ = [
    "BoolOp",
    "Call",
    "Compare",
    "Identity",
    "Literal",
    "Pipe",
    "Recurse",
    "Selector",
    "Token",
    "parse_query",
    "tokenize",
]

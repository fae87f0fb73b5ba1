"""jq-style query language over document nodes."""

from .engine import FUNCTIONS, SELECTORS, compile_query, evaluate, format_value
from .parser import parse_query, tokenize

__all__ = [
    "FUNCTIONS",
    "SELECTORS",
    "compile_query",
    "evaluate",
    "format_value",
    "parse_query",
    "tokenize",
]

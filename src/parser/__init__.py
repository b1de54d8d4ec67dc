"""Interfaces for parsing Elixir source code."""

from .elixir_parser import ElixirSyntaxError, ParseError, ParseResult, parse_elixir
from .syntax import CommentToken, collect_comments, multiline_literals, parse_tree

__all__ = [
    "CommentToken",
    "ElixirSyntaxError",
    "ParseError",
    "ParseResult",
    "collect_comments",
    "multiline_literals",
    "parse_elixir",
    "parse_tree",
]

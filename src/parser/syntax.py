"""
Access to the tree-sitter Elixir grammar.

`parse_tree` runs the grammar over source text and returns the concrete syntax
tree. Two views of that tree serve the comment ledger: `collect_comments` lists
every comment with its position and whether code precedes it on the same line,
and `multiline_literals` lists the line spans of quoted literals that cover
several lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import tree_sitter as ts
import tree_sitter_elixir as tselixir

ELIXIR_LANGUAGE = ts.Language(tselixir.language())
_parser: Optional[ts.Parser] = None

_QUOTED_LITERALS = {"string", "charlist", "sigil", "quoted_atom", "quoted_keyword"}


def _get_parser() -> ts.Parser:
    global _parser
    if _parser is None:
        _parser = ts.Parser(ELIXIR_LANGUAGE)
    return _parser


def parse_tree(source: str) -> ts.Tree:
    return _get_parser().parse(source.encode("utf-8"))


def node_text(node: ts.Node) -> str:
    return node.text.decode("utf-8")


@dataclass(frozen=True)
class CommentToken:
    """A `#` comment; `column` is 1-based and counted in characters."""

    text: str
    line: int
    column: int
    trailing: bool


def _leaves(node: ts.Node) -> Iterator[ts.Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.child_count == 0:
            yield current
        else:
            stack.extend(reversed(current.children))


def collect_comments(tree: ts.Tree, source: str) -> List[CommentToken]:
    """Comments of `source` in order; `trailing` marks comments that follow code on their line."""
    lines = source.split("\n")
    comments: List[CommentToken] = []
    code_row: Optional[int] = None
    for leaf in _leaves(tree.root_node):
        if leaf.type == "comment":
            row, column = leaf.start_point
            prefix = lines[row].encode("utf-8")[:column].decode("utf-8", errors="ignore")
            comments.append(
                CommentToken(
                    text=node_text(leaf).rstrip(),
                    line=row + 1,
                    column=len(prefix) + 1,
                    trailing=code_row == row,
                )
            )
        elif leaf.end_byte > leaf.start_byte and node_text(leaf).strip():
            code_row = leaf.end_point[0]
    return comments


def multiline_literals(tree: ts.Tree) -> List[Tuple[int, int]]:
    """(first, last) lines of every quoted literal spanning more than one line."""
    spans: List[Tuple[int, int]] = []
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type in _QUOTED_LITERALS and node.end_point[0] > node.start_point[0]:
            spans.append((node.start_point[0] + 1, node.end_point[0] + 1))
            continue
        stack.extend(node.children)
    return sorted(spans)


__all__ = [
    "CommentToken",
    "ELIXIR_LANGUAGE",
    "collect_comments",
    "multiline_literals",
    "node_text",
    "parse_tree",
]

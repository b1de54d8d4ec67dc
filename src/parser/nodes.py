"""
Syntax tree for Elixir source, as consumed by the annotator and renderer.

Every node kind is its own dataclass carrying a `Meta` record. The parser fills
in `line`/`end_line`; the annotation pass fills in the layout fields
(`prev_line`, `prefix_comments`, `prefix_blank`, `suffix_comments`). Nodes whose
`line` is None carry no position and are skipped by the annotation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union


class LiteralFormat(str, Enum):
    DECIMAL = "decimal"
    HEX = "hex"
    OCTAL = "octal"
    BINARY = "binary"
    CHAR = "char"
    PLAIN_STRING = "plain-string"
    CHARLIST = "charlist"
    BYTE_STRING_HEREDOC = "byte-string-heredoc"
    CHAR_LIST_HEREDOC = "char-list-heredoc"
    NONE = "none"


BLOCK_KEYWORDS = ("do", "catch", "rescue", "after", "else")


@dataclass
class Meta:
    """Layout metadata attached to a node."""

    line: Optional[int] = None
    end_line: Optional[int] = None
    prev_line: Optional[int] = None
    prefix_comments: str = ""
    prefix_blank: bool = False
    suffix_comments: str = ""

    @property
    def has_position(self) -> bool:
        return self.line is not None


@dataclass
class Node:
    meta: Meta = field(default_factory=Meta, kw_only=True)

    def children(self) -> Iterator["Node"]:
        """Yield direct child nodes in source order."""
        return iter(())


@dataclass
class Variable(Node):
    name: str


@dataclass
class ModulePath(Node):
    segments: List[str]


@dataclass
class Block(Node):
    exprs: List[Node]

    def children(self) -> Iterator[Node]:
        yield from self.exprs


@dataclass
class BitstringLiteral(Node):
    """`<<...>>` containers and interpolated strings, charlists and atoms.

    For interpolated forms `parts` mixes raw text segments (str) with nodes;
    for plain bitstrings every part is a node.
    """

    parts: List[Union[str, Node]]
    interpolated: bool = False
    format: LiteralFormat = LiteralFormat.NONE
    atom: bool = False

    def children(self) -> Iterator[Node]:
        for part in self.parts:
            if isinstance(part, Node):
                yield part


@dataclass
class TwoElementTuple(Node):
    left: Node
    right: Node

    def children(self) -> Iterator[Node]:
        yield self.left
        yield self.right


@dataclass
class TupleLiteral(Node):
    elems: List[Node]

    def children(self) -> Iterator[Node]:
        yield from self.elems


@dataclass
class KeywordPair(Node):
    """`key: value` entry of a keyword list or map."""

    key: str
    value: Node

    def children(self) -> Iterator[Node]:
        yield self.value


@dataclass
class MapPair(Node):
    """`key => value` entry of a map."""

    key: Node
    value: Node

    def children(self) -> Iterator[Node]:
        yield self.key
        yield self.value


@dataclass
class MapLiteral(Node):
    pairs: List[Node]
    update: Optional[Node] = None

    def children(self) -> Iterator[Node]:
        if self.update is not None:
            yield self.update
        yield from self.pairs


@dataclass
class StructLiteral(Node):
    name: Node
    map: MapLiteral

    def children(self) -> Iterator[Node]:
        yield self.name
        yield self.map


@dataclass
class Clause(Node):
    """`left -> right` arrow; `left` is the (possibly empty) parameter list."""

    left: List[Node]
    right: Node

    def children(self) -> Iterator[Node]:
        yield from self.left
        yield self.right


@dataclass
class ClauseList(Node):
    clauses: List[Clause]

    def children(self) -> Iterator[Node]:
        yield from self.clauses


@dataclass
class AnonymousFunction(Node):
    clauses: List[Clause]

    def children(self) -> Iterator[Node]:
        yield from self.clauses


@dataclass
class Range(Node):
    first: Node
    last: Node
    step: Optional[Node] = None

    def children(self) -> Iterator[Node]:
        yield self.first
        yield self.last
        if self.step is not None:
            yield self.step


@dataclass
class GuardedExpression(Node):
    """`left when guard`; more than one left operand is the clause-head splat form."""

    left: List[Node]
    guard: Node

    def children(self) -> Iterator[Node]:
        yield from self.left
        yield self.guard


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node

    def children(self) -> Iterator[Node]:
        yield self.left
        yield self.right


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node

    def children(self) -> Iterator[Node]:
        yield self.operand


@dataclass
class Capture(Node):
    expr: Node

    def children(self) -> Iterator[Node]:
        yield self.expr


@dataclass
class AccessIndex(Node):
    base: Node
    key: Node

    def children(self) -> Iterator[Node]:
        yield self.base
        yield self.key


@dataclass
class Dot(Node):
    """Call target: `left.name`, `left.()` when name is None, `left.{}` for multi-alias."""

    left: Node
    name: Optional[str] = None

    def children(self) -> Iterator[Node]:
        yield self.left


@dataclass
class Call(Node):
    target: Union[str, Dot]
    args: List[Node] = field(default_factory=list)

    def children(self) -> Iterator[Node]:
        if isinstance(self.target, Node):
            yield self.target
        yield from self.args

    @property
    def keyword_blocks(self) -> Optional["ListLiteral"]:
        """Trailing `do:`-keyed keyword list, when present."""
        if not self.args:
            return None
        last = self.args[-1]
        if isinstance(last, ListLiteral) and last.meta.line is None and last.is_keyword:
            keys = [pair.key for pair in last.elems]
            if keys[0] == "do" and all(key in BLOCK_KEYWORDS for key in keys):
                return last
        return None


@dataclass
class ListLiteral(Node):
    elems: List[Node]

    def children(self) -> Iterator[Node]:
        yield from self.elems

    @property
    def is_keyword(self) -> bool:
        return bool(self.elems) and all(isinstance(e, KeywordPair) for e in self.elems)

    def get(self, key: str) -> Optional[Node]:
        for elem in self.elems:
            if isinstance(elem, KeywordPair) and elem.key == key:
                return elem.value
        return None


@dataclass
class AtomLiteral(Node):
    value: str


@dataclass
class Literal(Node):
    """Numbers, chars, strings and heredocs.

    `value` is an int for integer and char formats, the decoded text for plain
    strings and charlists, the raw (indentation-stripped) body for heredocs and
    the source lexeme for floats.
    """

    value: Union[int, str]
    format: LiteralFormat = LiteralFormat.NONE


@dataclass
class Sigil(Node):
    letter: str
    parts: List[Union[str, Node]]
    terminator: str
    modifiers: str = ""

    def children(self) -> Iterator[Node]:
        for part in self.parts:
            if isinstance(part, Node):
                yield part


def walk(node: Node) -> Iterator[Node]:
    """Yield `node` and its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children())))


__all__ = [
    "AccessIndex",
    "BLOCK_KEYWORDS",
    "AnonymousFunction",
    "AtomLiteral",
    "BinaryOp",
    "BitstringLiteral",
    "Block",
    "Call",
    "Capture",
    "Clause",
    "ClauseList",
    "Dot",
    "GuardedExpression",
    "KeywordPair",
    "ListLiteral",
    "Literal",
    "LiteralFormat",
    "MapLiteral",
    "MapPair",
    "Meta",
    "ModulePath",
    "Node",
    "Range",
    "Sigil",
    "StructLiteral",
    "TupleLiteral",
    "TwoElementTuple",
    "UnaryOp",
    "Variable",
    "walk",
]

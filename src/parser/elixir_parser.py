"""
Elixir parsing utilities built on top of the `tree_sitter_elixir` grammar.

The module exposes `parse_elixir`, which returns the syntax tree (see
`parser.nodes`) along with metadata describing the parse run. Consumers can
decide whether syntax errors should raise or be reported as diagnostics via the
`tolerant` flag.

tree-sitter yields a concrete syntax tree. `_TreeConverter` walks it with one
handler per grammar node type and builds the formatter's tree, recording the
first and last source line of every node. Quoted literals are rebuilt from
their source text so that escapes, heredoc indentation and interpolations are
handled in one place (`parser.quoted`).
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import tree_sitter as ts

from .nodes import (
    AccessIndex,
    AnonymousFunction,
    AtomLiteral,
    BinaryOp,
    BitstringLiteral,
    Block,
    Call,
    Capture,
    Clause,
    ClauseList,
    Dot,
    GuardedExpression,
    KeywordPair,
    ListLiteral,
    Literal,
    LiteralFormat,
    MapLiteral,
    MapPair,
    ModulePath,
    Node,
    Range,
    Sigil,
    StructLiteral,
    TupleLiteral,
    TwoElementTuple,
    UnaryOp,
    Variable,
)
from .quoted import Interpolation, StringParts, decode_escape, heredoc_body, split_interpolations
from .syntax import node_text, parse_tree


class ElixirSyntaxError(ValueError):
    """Raised when the source does not form a valid Elixir program."""

    def __init__(self, message: str, line: Optional[int], column: Optional[int]):
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.description = message
        self.line = line
        self.column = column


@dataclass(frozen=True)
class ParseError:
    """Represents a syntax problem reported in tolerant mode."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the output tree plus metadata about the parse run."""

    ast: Optional[Node]
    errors: List[ParseError]
    source_hash: str
    source_name: str

    def to_json(self) -> str:
        """Serialise the parse result to JSON for debugging or caching."""
        payload = {
            "ast": _node_to_dict(self.ast) if self.ast is not None else None,
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)


def _node_to_dict(node: Node) -> Any:
    data = asdict(node)
    data["type"] = type(node).__name__
    return data


_INTEGER_PREFIXES = {
    "0x": (16, LiteralFormat.HEX),
    "0o": (8, LiteralFormat.OCTAL),
    "0b": (2, LiteralFormat.BINARY),
}

# `do` block sections other than `do` itself, by grammar node type.
_BLOCK_SECTIONS = {
    "else_block": "else",
    "rescue_block": "rescue",
    "catch_block": "catch",
    "after_block": "after",
}


def _syntax_error(root: ts.Node) -> Optional[ElixirSyntaxError]:
    """First ERROR or MISSING node of the tree, as an exception."""
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        if node.is_missing:
            return ElixirSyntaxError(f"Missing {node.type!r}", line, column)
        if node.is_error:
            snippet = node_text(node).strip().split("\n")[0]
            return ElixirSyntaxError(f"Unexpected {snippet!r}", line, column)
        stack.extend(reversed(node.children))
    return ElixirSyntaxError("Invalid syntax", None, None)


class _TreeConverter:
    """Builds `parser.nodes` from a tree-sitter Elixir tree."""

    def __init__(self, line_offset: int = 0) -> None:
        self._line_offset = line_offset
        self._handlers: Dict[str, Callable[[ts.Node], Node]] = {
            "identifier": self._identifier,
            "operator_identifier": self._identifier,
            "alias": self._alias,
            "integer": self._integer,
            "float": self._float,
            "char": self._char,
            "boolean": self._word_atom,
            "nil": self._word_atom,
            "atom": self._atom,
            "quoted_atom": self._quoted_atom,
            "string": self._string,
            "charlist": self._string,
            "sigil": self._sigil,
            "list": self._list,
            "tuple": self._tuple,
            "bitstring": self._bitstring,
            "map": self._map,
            "keywords": self._keywords,
            "binary_operator": self._binary_operator,
            "unary_operator": self._unary_operator,
            "dot": self._dot,
            "call": self._call,
            "access_call": self._access_call,
            "anonymous_function": self._anonymous_function,
            "block": self._block,
        }

    # ---------------------------------------------------------------- helpers

    def line(self, node: ts.Node) -> int:
        return node.start_point[0] + 1 + self._line_offset

    def end_line(self, node: ts.Node) -> int:
        return node.end_point[0] + 1 + self._line_offset

    def _finish(self, result: Node, node: ts.Node, line: Optional[int] = None) -> Node:
        result.meta.line = self.line(node) if line is None else line
        result.meta.end_line = self.end_line(node)
        return result

    @staticmethod
    def _items(node: ts.Node) -> List[ts.Node]:
        return [child for child in node.named_children if child.type != "comment"]

    @staticmethod
    def _child(node: ts.Node, node_type: str) -> Optional[ts.Node]:
        for child in node.children:
            if child.type == node_type:
                return child
        return None

    @staticmethod
    def _operator(node: ts.Node) -> str:
        return " ".join(node_text(node.child_by_field_name("operator")).split())

    def convert(self, node: ts.Node) -> Node:
        handler = self._handlers.get(node.type)
        if handler is None:
            raise ElixirSyntaxError(f"Unsupported syntax {node.type!r}", self.line(node), node.start_point[1] + 1)
        return handler(node)

    # ------------------------------------------------------------- statements

    def program(self, root: ts.Node) -> Node:
        return self._block_of(self._statements(root))

    def _statements(self, node: ts.Node) -> List[ts.Node]:
        statements: List[ts.Node] = []
        for child in self._items(node):
            if child.type == "body":
                statements.extend(self._items(child))
            else:
                statements.append(child)
        return statements

    def _block_of(self, children: List[ts.Node]) -> Node:
        """One expression stands for itself; several form a Block; `->` clauses a ClauseList."""
        clauses = [child for child in children if child.type == "stab_clause"]
        if clauses:
            return ClauseList([self._clause(clause) for clause in clauses])
        exprs = [self.convert(child) for child in children]
        if len(exprs) == 1:
            return exprs[0]
        block = Block(exprs)
        if exprs:
            block.meta.end_line = exprs[-1].meta.end_line
        return block

    def _block(self, node: ts.Node) -> Node:
        children = self._statements(node)
        if not children:
            return self._finish(Block([]), node)
        return self._block_of(children)

    # ---------------------------------------------------------- plain terms

    def _identifier(self, node: ts.Node) -> Node:
        return self._finish(Variable(node_text(node)), node)

    def _alias(self, node: ts.Node) -> Node:
        segments = [segment.strip() for segment in node_text(node).split(".")]
        return self._finish(ModulePath(segments), node)

    def _integer(self, node: ts.Node) -> Node:
        text = node_text(node).replace("_", "")
        base, fmt = _INTEGER_PREFIXES.get(text[:2], (10, LiteralFormat.DECIMAL))
        digits = text if base == 10 else text[2:]
        return self._finish(Literal(int(digits, base), fmt), node)

    def _float(self, node: ts.Node) -> Node:
        return self._finish(Literal(node_text(node), LiteralFormat.NONE), node)

    def _char(self, node: ts.Node) -> Node:
        text = node_text(node)
        if text[1] == "\\":
            decoded, _ = decode_escape(text, 1)
            value = ord(decoded[0]) if decoded else ord("\n")
        else:
            value = ord(text[1])
        return self._finish(Literal(value, LiteralFormat.CHAR), node)

    def _word_atom(self, node: ts.Node) -> Node:
        return self._finish(AtomLiteral(node_text(node)), node)

    def _atom(self, node: ts.Node) -> Node:
        return self._finish(AtomLiteral(node_text(node)[1:]), node)

    # -------------------------------------------------------- quoted literals

    def _parts(self, parts: StringParts) -> List[Union[str, Node]]:
        return [self._interpolation(part) if isinstance(part, Interpolation) else part for part in parts]

    @staticmethod
    def _interpolation(part: Interpolation) -> Node:
        tree = parse_tree(part.source)
        error = _syntax_error(tree.root_node)
        if error is not None:
            raise error
        return _TreeConverter(line_offset=part.line - 1).program(tree.root_node)

    def _quoted_atom(self, node: ts.Node) -> Node:
        text = node_text(node)
        parts = split_interpolations(text[2:-1], self.line(node), interpolate=True, decode=True)
        if all(isinstance(part, str) for part in parts):
            return self._finish(AtomLiteral("".join(parts)), node)
        return self._finish(BitstringLiteral(self._parts(parts), interpolated=True, atom=True), node)

    def _string(self, node: ts.Node) -> Node:
        text = node_text(node)
        quote = text[0]
        is_string = node.type == "string"
        if text.startswith(quote * 3):
            fmt = LiteralFormat.BYTE_STRING_HEREDOC if is_string else LiteralFormat.CHAR_LIST_HEREDOC
            body = heredoc_body(text, quote * 3)
            parts = split_interpolations(body, self.line(node) + 1, interpolate=True, decode=False)
        else:
            fmt = LiteralFormat.PLAIN_STRING if is_string else LiteralFormat.CHARLIST
            parts = split_interpolations(text[1:-1], self.line(node), interpolate=True, decode=True)
        if all(isinstance(part, str) for part in parts):
            return self._finish(Literal("".join(parts), fmt), node)
        return self._finish(BitstringLiteral(self._parts(parts), interpolated=True, format=fmt), node)

    def _sigil(self, node: ts.Node) -> Node:
        name = node_text(self._child(node, "sigil_name"))
        modifiers_node = self._child(node, "sigil_modifiers")
        modifiers = node_text(modifiers_node) if modifiers_node is not None else ""
        text = node_text(node)
        text = text[1 + len(name):len(text) - len(modifiers)]
        if text[:3] in ('"""', "'''"):
            terminator = text[:3]
            body = heredoc_body(text, terminator)
            line = self.line(node) + 1
        else:
            terminator = text[0]
            body = text[1:-1]
            line = self.line(node)
        parts = split_interpolations(body, line, interpolate=name[:1].islower(), decode=False)
        return self._finish(Sigil(name, self._parts(parts), terminator, modifiers), node)

    # ------------------------------------------------------------- containers

    def _list(self, node: ts.Node) -> Node:
        elems: List[Node] = []
        for child in self._items(node):
            # a trailing `key: value` run belongs to the list itself
            if child.type == "keywords":
                elems.extend(self._pairs(child))
            else:
                elems.append(self.convert(child))
        return self._finish(ListLiteral(elems), node)

    def _tuple(self, node: ts.Node) -> Node:
        elems = [self.convert(child) for child in self._items(node)]
        if len(elems) == 2:
            return self._finish(TwoElementTuple(elems[0], elems[1]), node)
        return self._finish(TupleLiteral(elems), node)

    def _bitstring(self, node: ts.Node) -> Node:
        return self._finish(BitstringLiteral([self.convert(child) for child in self._items(node)]), node)

    def _keywords(self, node: ts.Node) -> Node:
        # Bracketless keyword lists carry no position of their own.
        result = ListLiteral(self._pairs(node))
        result.meta.end_line = self.end_line(node)
        return result

    def _pairs(self, node: ts.Node) -> List[Node]:
        pairs: List[Node] = []
        for child in self._items(node):
            pair = KeywordPair(
                self._keyword_key(child.child_by_field_name("key")),
                self.convert(child.child_by_field_name("value")),
            )
            pair.meta.end_line = self.end_line(child)
            pairs.append(pair)
        return pairs

    def _keyword_key(self, node: ts.Node) -> str:
        text = node_text(node).rstrip()
        if text.endswith(":"):
            text = text[:-1]
        if node.type == "quoted_keyword":
            parts = split_interpolations(text[1:-1], self.line(node), interpolate=False, decode=True)
            return "".join(parts)
        return text

    def _map(self, node: ts.Node) -> Node:
        content = self._child(node, "map_content")
        pairs, update = self._map_entries(content) if content is not None else ([], None)
        body = MapLiteral(pairs, update)
        struct = self._child(node, "struct")
        if struct is None:
            return self._finish(body, node)
        body.meta.line = self.line(self._child(node, "{"))
        body.meta.end_line = self.end_line(node)
        name = self.convert(self._items(struct)[0])
        return self._finish(StructLiteral(name, body), node)

    def _map_entries(self, content: ts.Node):
        pairs: List[Node] = []
        update: Optional[Node] = None
        for index, item in enumerate(self._items(content)):
            if index == 0 and item.type == "binary_operator" and self._operator(item) == "|":
                update = self.convert(item.child_by_field_name("left"))
                item = item.child_by_field_name("right")
            if item.type == "keywords":
                pairs.extend(self._pairs(item))
            elif item.type == "binary_operator" and self._operator(item) == "=>":
                pair = MapPair(
                    self.convert(item.child_by_field_name("left")),
                    self.convert(item.child_by_field_name("right")),
                )
                pair.meta.end_line = self.end_line(item)
                pairs.append(pair)
            else:
                pairs.append(self.convert(item))
        return pairs, update

    # -------------------------------------------------------------- operators

    def _binary_operator(self, node: ts.Node) -> Node:
        op = self._operator(node)
        left_node = node.child_by_field_name("left")
        right_node = node.child_by_field_name("right")
        if op == "..":
            step_node = right_node if right_node.type == "binary_operator" else None
            if step_node is not None and self._operator(step_node) == "//":
                last = self.convert(step_node.child_by_field_name("left"))
                step = self.convert(step_node.child_by_field_name("right"))
                return self._finish(Range(self.convert(left_node), last, step), node)
            return self._finish(Range(self.convert(left_node), self.convert(right_node)), node)
        if op == "//" and left_node.type == "binary_operator" and self._operator(left_node) == "..":
            first = self.convert(left_node.child_by_field_name("left"))
            last = self.convert(left_node.child_by_field_name("right"))
            return self._finish(Range(first, last, self.convert(right_node)), node)
        left = self.convert(left_node)
        right = self.convert(right_node)
        if op == "when":
            guarded = GuardedExpression([left], right)
            return self._finish(guarded, node, self.line(node.child_by_field_name("operator")))
        return self._finish(BinaryOp(op, left, right), node, left.meta.line or self.line(node))

    def _unary_operator(self, node: ts.Node) -> Node:
        op = self._operator(node)
        operand_node = node.child_by_field_name("operand")
        if op == "&" and operand_node.type == "integer":
            position = self._finish(Literal(int(node_text(operand_node)), LiteralFormat.DECIMAL), operand_node)
            return self._finish(Capture(position), node)
        operand = self.convert(operand_node)
        if op == "&":
            return self._finish(Capture(operand), node)
        return self._finish(UnaryOp(op, operand), node)

    # ------------------------------------------------------------------ calls

    def _dot(self, node: ts.Node) -> Node:
        left = self.convert(node.child_by_field_name("left"))
        right_node = node.child_by_field_name("right")
        if right_node.type == "tuple":
            target = self._finish(Dot(left, "{}"), node)
            return self._finish(Call(target, [self.convert(child) for child in self._items(right_node)]), node)
        if right_node.type == "alias" and isinstance(left, ModulePath):
            left.segments.extend(segment.strip() for segment in node_text(right_node).split("."))
            left.meta.end_line = self.end_line(node)
            return left
        target = self._finish(Dot(left, node_text(right_node)), node)
        return self._finish(Call(target, []), node)

    def _call_target(self, node: ts.Node) -> Union[str, Dot]:
        if node.type == "identifier":
            return node_text(node)
        if node.type != "dot":
            raise ElixirSyntaxError(f"Unsupported call target {node.type!r}", self.line(node), node.start_point[1] + 1)
        right = node.child_by_field_name("right")
        name = node_text(right) if right is not None else None
        return self._finish(Dot(self.convert(node.child_by_field_name("left")), name), node)

    def _arguments(self, node: ts.Node) -> List[Node]:
        return [self.convert(child) for child in self._items(node)]

    def _call(self, node: ts.Node) -> Node:
        target = self._call_target(node.child_by_field_name("target"))
        arguments = self._child(node, "arguments")
        args = self._arguments(arguments) if arguments is not None else []
        do_block = self._child(node, "do_block")
        if do_block is not None:
            args.append(self._do_block(do_block))
        return self._finish(Call(target, args), node)

    def _do_block(self, node: ts.Node) -> Node:
        """`do ... end` becomes the trailing keyword list `do: ..., else: ...`."""
        body = [child for child in self._statements(node) if child.type not in _BLOCK_SECTIONS]
        sections = [KeywordPair("do", self._block_of(body))]
        for child in self._items(node):
            if child.type in _BLOCK_SECTIONS:
                sections.append(KeywordPair(_BLOCK_SECTIONS[child.type], self._block_of(self._statements(child))))
        blocks = ListLiteral(sections)
        blocks.meta.end_line = self.end_line(node)
        return blocks

    def _access_call(self, node: ts.Node) -> Node:
        base = self.convert(node.child_by_field_name("target"))
        key = self.convert(node.child_by_field_name("key"))
        return self._finish(AccessIndex(base, key), node)

    # ---------------------------------------------------------------- clauses

    def _anonymous_function(self, node: ts.Node) -> Node:
        clauses = [self._clause(child) for child in self._items(node) if child.type == "stab_clause"]
        return self._finish(AnonymousFunction(clauses), node)

    def _clause(self, node: ts.Node) -> Clause:
        right = node.child_by_field_name("right")
        statements = self._statements(right) if right is not None else []
        clause = Clause(self._clause_head(node.child_by_field_name("left")), self._block_of(statements))
        clause.meta.line = self.line(node)
        clause.meta.end_line = self.end_line(statements[-1]) if statements else clause.meta.line
        return clause

    def _clause_head(self, node: Optional[ts.Node]) -> List[Node]:
        if node is None:
            return []
        if node.type == "binary_operator" and self._operator(node) == "when":
            params = self._clause_head(node.child_by_field_name("left"))
            guarded = GuardedExpression(params, self.convert(node.child_by_field_name("right")))
            return [self._finish(guarded, node, self.line(node.child_by_field_name("operator")))]
        if node.type == "arguments":
            return self._arguments(node)
        return [self.convert(node)]


def _hash_source(source: str) -> str:
    """Create a deterministic hash for cache keying."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def parse_elixir(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
) -> ParseResult:
    """
    Parse Elixir source text into a syntax tree.

    Args:
        source: Raw Elixir source code.
        source_name: Optional label used for diagnostics (defaults to `<input>`).
        tolerant: When True, syntax errors are reported in `errors` instead of raised.

    Returns:
        ParseResult containing the tree (None on failure), errors, and metadata.

    Raises:
        ElixirSyntaxError: If parsing fails and `tolerant` is False.
    """
    try:
        tree = parse_tree(source)
        error = _syntax_error(tree.root_node)
        if error is not None:
            raise error
        ast = _TreeConverter().program(tree.root_node)
    except ElixirSyntaxError as exc:
        # Re-raise when caller opted into strict error handling.
        if not tolerant:
            raise
        errors = [ParseError(description=exc.description, line=exc.line, column=exc.column)]
        return ParseResult(
            ast=None,
            errors=errors,
            source_hash=_hash_source(source),
            source_name=source_name,
        )

    return ParseResult(
        ast=ast,
        errors=[],
        source_hash=_hash_source(source),
        source_name=source_name,
    )


__all__ = ["ElixirSyntaxError", "ParseError", "ParseResult", "parse_elixir"]

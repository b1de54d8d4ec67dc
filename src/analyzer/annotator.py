"""
Annotation pass attaching layout metadata to a parsed Elixir tree.

The pass walks the tree in pre-order threading the line of the previously
visited node. Each node with a position receives `prev_line`, the comment block
found above it and whether a blank line precedes it. The same walk derives two
tree-wide facts: zero-arity references in definition heads and pipe targets
become explicit empty calls, and every local call written with a `do` block
joins the parenless-call set.

Trailing comments are claimed afterwards, once every prefix walk is done: the
final element of every statement sequence, container and argument list takes
the comment lines that follow it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List

from parser.nodes import (
    BinaryOp,
    BitstringLiteral,
    Block,
    Call,
    Clause,
    ClauseList,
    KeywordPair,
    ListLiteral,
    MapLiteral,
    MapPair,
    Node,
    TupleLiteral,
    TwoElementTuple,
    Variable,
    walk,
)

from .ledger import SourceLedger

_DEFINITIONS = {"def", "defp", "defmacro", "defmacrop", "defdelegate"}


@dataclass(frozen=True)
class AnnotationResult:
    tree: Node
    parenless_calls: FrozenSet[str]
    diagnostics: List[str]


@dataclass(frozen=True)
class _Accumulator:
    """Traversal context: line of the last positioned node visited."""

    prev_line: int


def layout_target(node: Node) -> Node:
    """Node whose metadata stands for a container element."""
    if isinstance(node, (KeywordPair, MapPair)):
        return node.value
    return node


class _LayoutAnnotator:
    def __init__(self, ledger: SourceLedger, parenless_calls: Iterable[str]) -> None:
        self._ledger = ledger
        self._parenless = set(parenless_calls)
        self._diagnostics: List[str] = []

    def annotate(self, tree: Node) -> AnnotationResult:
        acc = _Accumulator(prev_line=1)
        # `walk` reads a node's children only after the node was visited, so
        # arguments rewritten by `_visit` are traversed in their new form.
        for node in walk(tree):
            acc = self._visit(node, acc)

        for node in self._sequence_tails(tree):
            self._attach_suffix(node)

        for lineno in self._ledger.unconsumed_comment_lines():
            self._diagnostics.append(f"Comment on line {lineno} could not be attached to a node.")

        return AnnotationResult(
            tree=tree,
            parenless_calls=frozenset(self._parenless),
            diagnostics=self._diagnostics,
        )

    # ------------------------------------------------------------- side tasks

    @staticmethod
    def _as_call(variable: Variable) -> Call:
        return Call(variable.name, [], meta=variable.meta)

    def _normalize_zero_arity(self, node: Node) -> None:
        if isinstance(node, Call) and isinstance(node.target, str) and node.target in _DEFINITIONS and node.args:
            head = node.args[0]
            if isinstance(head, Variable):
                node.args[0] = self._as_call(head)
        elif isinstance(node, BinaryOp) and node.op == "|>" and isinstance(node.right, Variable):
            node.right = self._as_call(node.right)

    def _discover_parenless(self, node: Node) -> None:
        if not (isinstance(node, Call) and isinstance(node.target, str) and node.args):
            return
        last = node.args[-1]
        if isinstance(last, ListLiteral) and last.is_keyword and last.get("do") is not None:
            self._parenless.add(node.target)

    # ----------------------------------------------------------------- layout

    def _visit(self, node: Node, acc: _Accumulator) -> _Accumulator:
        self._normalize_zero_arity(node)
        self._discover_parenless(node)
        meta = node.meta
        if meta.line is None:
            return acc
        meta.prev_line = acc.prev_line
        meta.prefix_comments = self._ledger.prefix_comments(meta.line - 1, acc.prev_line)
        meta.prefix_blank = self._ledger.prefix_blank(meta.line - 1, acc.prev_line)
        return _Accumulator(prev_line=meta.line)

    def _attach_suffix(self, node: Node) -> None:
        target = layout_target(node)
        meta = target.meta
        if meta.line is None or meta.end_line is None:
            return
        suffix = self._ledger.suffix_comments(meta.end_line + 1)
        if suffix:
            meta.suffix_comments += suffix

    def _sequence_tails(self, tree: Node) -> Iterator[Node]:
        """Final elements of statement sequences, containers and argument lists."""
        yield from self._statement_tail(tree)
        for node in walk(tree):
            if isinstance(node, Block) and node.exprs:
                yield from self._statement_tail(node.exprs[-1])
            elif isinstance(node, Clause):
                yield from self._statement_tail(node.right)
            elif isinstance(node, Call):
                yield from self._call_tail(node)
            elif isinstance(node, ListLiteral) and node.meta.line is None:
                continue
            elif isinstance(node, (ListLiteral, TupleLiteral)) and node.elems:
                yield node.elems[-1]
            elif isinstance(node, TwoElementTuple):
                yield node.right
            elif isinstance(node, MapLiteral) and node.pairs:
                yield node.pairs[-1]
            elif isinstance(node, BitstringLiteral) and not node.interpolated and node.parts:
                yield node.parts[-1]

    def _call_tail(self, node: Call) -> Iterator[Node]:
        blocks = node.keyword_blocks
        if blocks is not None:
            for section in blocks.elems:
                yield from self._statement_tail(section.value)
            return
        if not node.args:
            return
        last = node.args[-1]
        if isinstance(last, ListLiteral) and last.meta.line is None:
            if last.elems:
                yield last.elems[-1]
        else:
            yield last

    def _statement_tail(self, node: Node) -> Iterator[Node]:
        if isinstance(node, Block):
            if node.exprs:
                yield from self._statement_tail(node.exprs[-1])
        elif isinstance(node, ClauseList):
            for clause in node.clauses:
                yield from self._statement_tail(clause.right)
        else:
            yield node


def annotate(tree: Node, ledger: SourceLedger, *, parenless_calls: Iterable[str]) -> AnnotationResult:
    """
    Attach layout metadata to `tree` in place.

    Args:
        tree: Parsed syntax tree (result of `parse_elixir`).
        ledger: Source line ledger built from the same source text.
        parenless_calls: Call targets rendered without parentheses a priori.

    Returns:
        AnnotationResult with the annotated tree, the complete parenless-call
        set and diagnostics for comments that could not be placed.
    """
    annotator = _LayoutAnnotator(ledger, parenless_calls)
    return annotator.annotate(tree)


__all__ = ["AnnotationResult", "annotate", "layout_target"]

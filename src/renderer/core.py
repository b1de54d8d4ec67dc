"""
Renderer turning an annotated Elixir syntax tree back into source text.

The renderer is a recursive function of (node, render state). Each node kind has
a `_render_<Kind>` handler; the text it returns is passed through the caller's
`decorate` hook, which splices in the comments and blank lines recorded on the
node by the annotation pass. Layout decisions follow a handful of rules:

* a child operator expression is parenthesized only when precedence or
  associativity demands it;
* containers go one element per line when the single-line candidate does not
  fit, when elements started on different source lines, or when comments sit
  between elements;
* calls drop their parentheses when the target is a known parenless call (or a
  zero-arity reference inside a type specification);
* `do` blocks are written out when any section spans lines in the source and
  collapse to `do:` keywords otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from analyzer.ledger import SourceLedger
from parser.nodes import (
    BLOCK_KEYWORDS,
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
from parser.operators import CAPTURE_PRECEDENCE, precedence

from .literals import escape_text, format_literal, inspect_atom, inspect_term, keyword_key, sigil_closer
from .operators import (
    AMPERSAND_OPERATORS,
    BREAKABLE_OPERATORS,
    LEFT,
    PIPE_OPERATOR,
    RIGHT,
    binary_operator,
    needs_parens,
)

Decorate = Callable[[Node, str], str]

DEFAULT_PARENLESS_CALLS: FrozenSet[str] = frozenset(
    {"use", "import", "not", "alias", "try", "raise", "reraise", "defexception", "require"}
)

# Calls whose arguments are aligned under the first one when they span lines.
ALIGNED_CALLS = frozenset({"with", "for", "defstruct"})

INDENT = "\n  "


def adjust_new_lines(text: str, replacement: str = INDENT) -> str:
    """Indent every line after the first by replacing each newline."""
    return text.replace("\n", replacement)


def decorate_layout(node: Node, text: str) -> str:
    """Default decoration: leading comments, one optional blank line, trailing comments."""
    meta = node.meta
    blank = "\n" if meta.prefix_blank else ""
    return f"{meta.prefix_comments}{blank}{text}{meta.suffix_comments}"


def _no_decoration(node: Node, text: str) -> str:
    return text


@dataclass(frozen=True)
class RenderState:
    """Context threaded through a subtree; replaced, never mutated."""

    parenless_calls: FrozenSet[str] = DEFAULT_PARENLESS_CALLS
    parenless_zero_arity: bool = False


class Renderer:
    """Recursive tree-to-text renderer."""

    def __init__(
        self,
        decorate: Decorate = decorate_layout,
        *,
        line_length: int = 80,
        ledger: Optional[SourceLedger] = None,
    ) -> None:
        self._decorate = decorate
        self.line_length = line_length
        self._ledger = ledger

    def fits(self, text: str) -> bool:
        return len(text) <= self.line_length

    def render(self, node: Node, state: Optional[RenderState] = None) -> str:
        """Render a whole program body (a statement sequence or a single node)."""
        return self._body(node, state or RenderState())

    # ------------------------------------------------------------- dispatching

    def _render(self, node: Node, state: RenderState, *, decorated: bool = True) -> str:
        handler = getattr(self, f"_render_{type(node).__name__}", self._render_fallback)
        text = handler(node, state)
        if not decorated or isinstance(node, GuardedExpression):
            return text
        return self._decorate(node, text)

    def _body(self, node: Node, state: RenderState) -> str:
        """Statements of a program, block section or clause, one per line."""
        if isinstance(node, Block):
            return "\n".join(self._render(expr, state) for expr in node.exprs)
        if isinstance(node, ClauseList):
            return "\n".join(self._render(clause, state) for clause in node.clauses)
        return self._render(node, state)

    def _render_fallback(self, node: Node, state: RenderState) -> str:
        return inspect_term(node)

    # ---------------------------------------------------------------- atoms

    def _render_Variable(self, node: Variable, state: RenderState) -> str:
        return node.name

    def _render_ModulePath(self, node: ModulePath, state: RenderState) -> str:
        return ".".join(node.segments)

    def _render_AtomLiteral(self, node: AtomLiteral, state: RenderState) -> str:
        return inspect_atom(node.value)

    def _render_Literal(self, node: Literal, state: RenderState) -> str:
        return format_literal(node.value, node.format)

    def _render_Sigil(self, node: Sigil, state: RenderState) -> str:
        body = self._interpolated(node.parts, state, lambda text: text)
        opener = node.terminator
        if len(opener) == 3:
            return f"~{node.letter}{opener}\n{body}{opener}{node.modifiers}"
        return f"~{node.letter}{opener}{body}{sigil_closer(opener)}{node.modifiers}"

    def _render_BitstringLiteral(self, node: BitstringLiteral, state: RenderState) -> str:
        if node.atom:
            return ':"' + self._interpolated(node.parts, state, escape_text) + '"'
        if node.format == LiteralFormat.PLAIN_STRING:
            return '"' + self._interpolated(node.parts, state, escape_text) + '"'
        if node.format == LiteralFormat.CHARLIST:
            return "'" + self._interpolated(node.parts, state, lambda text: escape_text(text, "'")) + "'"
        if node.format == LiteralFormat.BYTE_STRING_HEREDOC:
            return '"""\n' + self._interpolated(node.parts, state, lambda text: text) + '"""'
        if node.format == LiteralFormat.CHAR_LIST_HEREDOC:
            return "'''\n" + self._interpolated(node.parts, state, lambda text: text) + "'''"
        parts = [self._bitstring_part(part, state) for part in node.parts]
        return self._container("<<", parts, node.parts, ">>", state)

    def _interpolated(self, parts, state: RenderState, escape: Callable[[str], str]) -> str:
        out: List[str] = []
        for part in parts:
            if isinstance(part, str):
                out.append(escape(part))
            else:
                out.append("#{" + self._render(part, state) + "}")
        return "".join(out)

    def _bitstring_part(self, part: Node, state: RenderState) -> str:
        if isinstance(part, BinaryOp) and part.op == "::":
            left = self._render(part.left, state)
            text = f"{left}::{self._bit_modifiers(part.right, state)}"
        else:
            text = self._render(part, state, decorated=False)
        if text.startswith("<") or text.endswith(">"):
            return f"({text})"
        return text

    def _bit_modifiers(self, node: Node, state: RenderState) -> str:
        if isinstance(node, BinaryOp) and node.op in ("-", "*"):
            return self._bit_modifiers(node.left, state) + node.op + self._bit_modifiers(node.right, state)
        return self._render(node, state)

    # ------------------------------------------------------------- containers

    def _render_ListLiteral(self, node: ListLiteral, state: RenderState) -> str:
        return self._container("[", self._element_texts(node.elems, state), node.elems, "]", state)

    def _render_TupleLiteral(self, node: TupleLiteral, state: RenderState) -> str:
        return self._container("{", self._element_texts(node.elems, state), node.elems, "}", state)

    def _render_TwoElementTuple(self, node: TwoElementTuple, state: RenderState) -> str:
        elems = [node.left, node.right]
        return self._container("{", self._element_texts(elems, state), elems, "}", state)

    def _render_MapLiteral(self, node: MapLiteral, state: RenderState) -> str:
        return "%" + self._map_body(node, state)

    def _render_StructLiteral(self, node: StructLiteral, state: RenderState) -> str:
        return "%" + self._render(node.name, state) + self._map_body(node.map, state)

    def _map_body(self, node: MapLiteral, state: RenderState) -> str:
        opener = "{"
        if node.update is not None:
            opener += self._render(node.update, state) + " | "
        return self._container(opener, self._element_texts(node.pairs, state), node.pairs, "}", state)

    def _render_KeywordPair(self, node: KeywordPair, state: RenderState) -> str:
        return f"{keyword_key(node.key)}: {self._render(node.value, state)}"

    def _render_MapPair(self, node: MapPair, state: RenderState) -> str:
        return f"{self._render(node.key, state)} => {self._render(node.value, state)}"

    def _element_texts(self, elems: Iterable[Node], state: RenderState) -> List[str]:
        """Element text without the element's own leading or trailing comments."""
        texts = []
        for elem in elems:
            if isinstance(elem, KeywordPair):
                value = self._render(elem.value, state, decorated=False)
                texts.append(f"{keyword_key(elem.key)}: {value}")
            elif isinstance(elem, MapPair):
                key = self._render(elem.key, state, decorated=False)
                value = self._render(elem.value, state, decorated=False)
                texts.append(f"{key} => {value}")
            else:
                texts.append(self._render(elem, state, decorated=False))
        return texts

    @staticmethod
    def _element_ends(elem: Node) -> Tuple[Node, Node]:
        """Nodes carrying the leading and the trailing layout of an element."""
        if isinstance(elem, MapPair):
            return elem.key, elem.value
        if isinstance(elem, KeywordPair):
            return elem.value, elem.value
        return elem, elem

    def _container(self, opener: str, texts: List[str], elems: List[Node], closer: str, state: RenderState) -> str:
        if not texts:
            return opener + closer
        return opener + self._container_body(texts, elems) + closer

    def _container_body(self, texts: List[str], elems: List[Node]) -> str:
        """
        Lay out container elements.

        Returns the elements joined on one line, or the multi-line layout
        (newline, one indented element per line, trailing comma, newline)
        when the single-line form does not fit, elements started on
        different source lines or comments sit among them.
        """
        ends = [self._element_ends(elem) for elem in elems]
        joined = ", ".join(texts)
        if self.fits("  " + joined + "  ") and not self._spans_lines(ends):
            return joined
        pieces = []
        for index, (text, (head, tail)) in enumerate(zip(texts, ends)):
            leading = self._leading(head, first=index == 0)
            pieces.append(adjust_new_lines(f"{leading}{text},{self._trailing(tail)}"))
        return INDENT + INDENT.join(pieces) + "\n"

    def _spans_lines(self, ends: List[Tuple[Node, Node]]) -> bool:
        for index, (head, tail) in enumerate(ends):
            if self._leading(head, first=index == 0) or self._trailing(tail):
                return True
            meta = head.meta
            if index and meta.line is not None and meta.prev_line is not None and meta.prev_line < meta.line:
                return True
        return False

    def _leading(self, node: Node, *, first: bool = False) -> str:
        if self._decorate is _no_decoration:
            return ""
        meta = node.meta
        blank = "\n" if meta.prefix_blank and not first else ""
        return f"{meta.prefix_comments}{blank}"

    def _trailing(self, node: Node) -> str:
        if self._decorate is _no_decoration:
            return ""
        return node.meta.suffix_comments

    # -------------------------------------------------------------- operators

    def _operand(self, child: Node, parent_op: str, side: str, state: RenderState) -> str:
        text = self._render(child, state)
        child_op = binary_operator(child)
        if child_op is not None and needs_parens(child_op, parent_op, side):
            return f"({text})"
        if (
            side == LEFT
            and isinstance(child, Capture)
            and not self._is_capture_position(child)
            and precedence(parent_op) >= CAPTURE_PRECEDENCE
        ):
            return f"({text})"
        return text

    def _render_BinaryOp(self, node: BinaryOp, state: RenderState) -> str:
        op = node.op
        if op == "::":
            state = replace(state, parenless_zero_arity=True)
        left = self._operand(node.left, op, LEFT, state)
        right = self._operand(node.right, op, RIGHT, state)
        if op == PIPE_OPERATOR:
            if self._operands_split(node, f"{left} |> {right}"):
                return f"{left}\n|> {right}"
        elif op in BREAKABLE_OPERATORS:
            if self._operands_split(node, f"{left} {op} {right}"):
                return f"{left} {op}\n{right}"
        elif op == "=" and "\n" in right and self._assign_on_next_line(node.right):
            return left + adjust_new_lines(" =\n" + right)
        return f"{left} {op} {right}"

    def _operands_split(self, node: BinaryOp, joined: str) -> bool:
        left_line, right_line = node.left.meta.line, node.right.meta.line
        if left_line is None or right_line is None:
            return False
        return left_line != right_line or not self.fits(joined)

    @staticmethod
    def _assign_on_next_line(node: Node) -> bool:
        return not isinstance(node, (StructLiteral, MapLiteral, ListLiteral, TwoElementTuple))

    def _render_Range(self, node: Range, state: RenderState) -> str:
        text = f"{self._range_operand(node.first, state)}..{self._range_operand(node.last, state)}"
        if node.step is not None:
            text += f"//{self._range_operand(node.step, state)}"
        return text

    def _range_operand(self, node: Node, state: RenderState) -> str:
        text = self._render(node, state)
        if binary_operator(node) is not None or isinstance(node, Capture):
            return f"({text})"
        return text

    def _render_GuardedExpression(self, node: GuardedExpression, state: RenderState) -> str:
        guard = self._guard(node.guard, state)
        if len(node.left) != 1:
            params = ", ".join(self._render(param, state) for param in node.left)
            return self._decorate(node, f"({params}) when {guard}")
        left = self._operand(node.left[0], "when", LEFT, state)
        meta = node.meta
        if meta.line is not None and meta.prev_line is not None and meta.line > meta.prev_line:
            padding = self._guard_padding(meta.prev_line)
            return f"{left}\n" + self._decorate(node, f"{padding}when {guard}")
        return f"{left} " + self._decorate(node, f"when {guard}")

    def _guard(self, guard: Node, state: RenderState) -> str:
        if isinstance(guard, ListLiteral) and guard.meta.line is None and guard.is_keyword:
            return ", ".join(self._element_texts(guard.elems, state))
        return self._operand(guard, "when", RIGHT, state)

    def _guard_padding(self, lineno: int) -> str:
        """Indent aligning `when` just past the first word of the guarded line."""
        text = self._ledger.line(lineno) if self._ledger is not None else None
        if not text:
            return "  "
        return " " * (len(text.split()[0]) + 1)

    def _render_UnaryOp(self, node: UnaryOp, state: RenderState) -> str:
        op, operand = node.op, node.operand
        if op == "@":
            name = self._attribute_name(operand)
            if name is not None:
                state = replace(state, parenless_calls=state.parenless_calls | {name})
            return "@" + self._render(operand, state)
        text = self._render(operand, state)
        if binary_operator(operand) is not None:
            return f"{op}({text})"
        if op == "not":
            return f"not {text}"
        if op in ("-", "+") and text[:1] in ("-", "+"):
            return f"{op}({text})"
        return op + text

    @staticmethod
    def _attribute_name(operand: Node) -> Optional[str]:
        if isinstance(operand, Variable):
            return operand.name
        if isinstance(operand, Call) and isinstance(operand.target, str):
            return operand.target
        return None

    # --------------------------------------------------------------- captures

    @staticmethod
    def _is_capture_position(node: Capture) -> bool:
        return isinstance(node.expr, Literal) and isinstance(node.expr.value, int)

    def _render_Capture(self, node: Capture, state: RenderState) -> str:
        expr = node.expr
        if self._is_capture_position(node):
            return f"&{expr.value}"
        reference = self._function_reference(expr, state)
        if reference is not None:
            return reference
        text = self._render(expr, state)
        if self._parenless_capture(expr):
            return f"&{text}"
        return f"&({text})"

    def _function_reference(self, expr: Node, state: RenderState) -> Optional[str]:
        """`&name/arity` and `&Mod.name/arity` forms."""
        if not (isinstance(expr, BinaryOp) and expr.op == "/" and isinstance(expr.right, Literal)):
            return None
        arity = self._render(expr.right, state)
        name = expr.left
        if isinstance(name, Variable):
            if name.name in AMPERSAND_OPERATORS:
                return f"&({name.name}/{arity})"
            return f"&{name.name}/{arity}"
        if isinstance(name, Call) and not name.args and isinstance(name.target, Dot) and name.target.name:
            target = self._render(name, replace(state, parenless_zero_arity=True))
            return f"&{target}/{arity}"
        return None

    @staticmethod
    def _parenless_capture(expr: Node) -> bool:
        if isinstance(expr, (BinaryOp, UnaryOp, Capture, GuardedExpression, Range)):
            return False
        if isinstance(expr, Call) and isinstance(expr.target, Dot) and isinstance(expr.target.left, Capture):
            return False
        return True

    def _render_AccessIndex(self, node: AccessIndex, state: RenderState) -> str:
        base = self._render(node.base, state)
        if binary_operator(node.base) is not None:
            base = f"({base})"
        return f"{base}[{self._render(node.key, state)}]"

    # ------------------------------------------------------------------ calls

    def _render_Dot(self, node: Dot, state: RenderState) -> str:
        left = self._render(node.left, state)
        if self._wrap_dot_left(node.left):
            left = f"({left})"
        if node.name is None:
            return left + "."
        return f"{left}.{node.name}"

    @staticmethod
    def _wrap_dot_left(left: Node) -> bool:
        if binary_operator(left) is not None or isinstance(left, AnonymousFunction):
            return True
        if isinstance(left, Capture):
            return not Renderer._is_capture_position(left)
        return isinstance(left, UnaryOp) and left.op != "@"

    def _call_target(self, node: Call, state: RenderState) -> str:
        if isinstance(node.target, str):
            return node.target
        return self._render_Dot(node.target, state)

    def is_parenless(self, node: Call, state: RenderState) -> bool:
        """Whether `node` renders without parentheses around its arguments."""
        target = node.target
        if isinstance(target, str):
            return target in state.parenless_calls or (state.parenless_zero_arity and not node.args)
        if target.name is None:
            return False
        if target.name[:1].isupper():
            return True
        if isinstance(target.left, (ModulePath, AtomLiteral)):
            return state.parenless_zero_arity and not node.args
        return not node.args

    def _render_Call(self, node: Call, state: RenderState) -> str:
        target = node.target
        if isinstance(target, Dot) and target.name == "{}":
            left = self._render_Dot(Dot(target.left, None, meta=target.meta), state)
            return self._container(left + "{", self._element_texts(node.args, state), node.args, "}", state)
        blocks = node.keyword_blocks
        if blocks is not None:
            return self._render_block_call(node, blocks, state)
        return self._call_with_args(node, node.args, state)

    def _call_with_args(self, node: Call, args: List[Node], state: RenderState, trailing: str = "") -> str:
        target = self._call_target(node, state)
        aligned = isinstance(node.target, str) and node.target in ALIGNED_CALLS
        parenless = aligned or self.is_parenless(node, state)
        positional, keywords = self._split_keywords(args)
        if self._has_comments(positional + (keywords.elems if keywords is not None else [])):
            return self._commented_call(target, positional, keywords, state, trailing)
        separator = ",\n" + " " * (len(target) + 1) if aligned else ", "
        pieces = []
        for index, arg in enumerate(positional):
            last = index == len(args) - 1
            pieces.append(self._render(arg, self._argument_state(arg, state, last)))
        args_text = separator.join(pieces)
        tail = []
        if keywords is not None:
            body = self._container_body(self._element_texts(keywords.elems, state), keywords.elems)
            if body.endswith(",\n"):
                body = body[:-2]
            if aligned:
                body = body.replace(INDENT, "\n" + " " * (len(target) + 1))
            tail.append(body)
        if trailing:
            tail.append(trailing)
        if tail:
            args_text = ", ".join(([args_text] if args_text else []) + tail)
        if parenless:
            return f"{target} {args_text}" if args_text else target
        return f"{target}({args_text})"

    def _commented_call(
        self,
        target: str,
        positional: List[Node],
        keywords: Optional[ListLiteral],
        state: RenderState,
        trailing: str,
    ) -> str:
        """Arguments with comments among them always go one per line inside parentheses."""
        items = positional + (keywords.elems if keywords is not None else [])
        texts = self._element_texts(items, state)
        pieces = []
        for index, (text, item) in enumerate(zip(texts, items)):
            head, tail = self._element_ends(item)
            comma = "," if trailing or index < len(items) - 1 else ""
            pieces.append(f"{self._leading(head, first=index == 0)}{text}{comma}{self._trailing(tail)}")
        if trailing:
            pieces.append(trailing)
        return target + "(" + INDENT + adjust_new_lines("\n".join(pieces)) + "\n)"

    def _has_comments(self, items: List[Node]) -> bool:
        for item in items:
            head, tail = self._element_ends(item)
            if self._leading(head) or self._trailing(tail):
                return True
        return False

    @staticmethod
    def _split_keywords(args: List[Node]) -> Tuple[List[Node], Optional[ListLiteral]]:
        """Separate a trailing bracketless keyword list from the positional arguments."""
        if args:
            last = args[-1]
            if isinstance(last, ListLiteral) and last.meta.line is None and last.is_keyword:
                return list(args[:-1]), last
        return list(args), None

    def _argument_state(self, arg: Node, state: RenderState, last: bool) -> RenderState:
        """A parenless call followed by more arguments would swallow them."""
        if last or not (isinstance(arg, Call) and isinstance(arg.target, str) and arg.args):
            return state
        if arg.target not in state.parenless_calls:
            return state
        return replace(state, parenless_calls=state.parenless_calls - {arg.target})

    # --------------------------------------------------------- keyword blocks

    def _render_block_call(self, node: Call, blocks: ListLiteral, state: RenderState) -> str:
        sections = sorted(blocks.elems, key=lambda pair: BLOCK_KEYWORDS.index(pair.key))
        bodies = [(pair.key, pair.value, self._body(pair.value, state)) for pair in sections]
        positional = list(node.args[:-1])
        if any(self._is_multiline(value, text) for _, value, text in bodies):
            head = self._call_with_args(node, positional, state)
            return head + " " + "".join(self._block_section(key, text) for key, _, text in bodies) + "end"
        inline = ", ".join(f"{key}: {text}" for key, _, text in bodies)
        if self.is_parenless(node, state):
            head = self._call_with_args(node, positional, state)
            return f"{head}, {inline}" if positional else f"{head} {inline}"
        return self._call_with_args(node, positional, state, trailing=inline)

    @staticmethod
    def _block_section(key: str, text: str) -> str:
        if not text:
            return f"{key}\n"
        return f"{key}{INDENT}{adjust_new_lines(text)}\n"

    @staticmethod
    def _is_multiline(node: Node, text: str) -> bool:
        if isinstance(node, Block):
            return len(node.exprs) != 1
        if isinstance(node, ClauseList):
            return True
        meta = node.meta
        if meta.line is None:
            return True
        if "\n" in text or meta.suffix_comments:
            return True
        return meta.prev_line is not None and meta.line > meta.prev_line

    # ---------------------------------------------------------------- clauses

    def _params(self, params: List[Node], state: RenderState) -> str:
        if not params:
            return ""
        return ", ".join(self._render(param, state) for param in params) + " "

    def _render_Clause(self, node: Clause, state: RenderState) -> str:
        body = self._body(node.right, state)
        params = self._params(node.left, state)
        if not body:
            return params + "->"
        return f"{params}->{INDENT}{adjust_new_lines(body)}"

    def _render_ClauseList(self, node: ClauseList, state: RenderState) -> str:
        return self._body(node, state)

    def _render_AnonymousFunction(self, node: AnonymousFunction, state: RenderState) -> str:
        clauses = node.clauses
        if len(clauses) == 1 and not self._leading(clauses[0]):
            clause = clauses[0]
            body = self._body(clause.right, state)
            params = self._params(clause.left, state)
            if self._fn_on_one_line(clause, body):
                return f"fn {params}-> {body} end"
            if not body:
                return f"fn {params}->\nend"
            return f"fn {params}->{INDENT}{adjust_new_lines(body)}\nend"
        rendered = "\n".join(self._render(clause, state) for clause in clauses)
        return f"fn{INDENT}{adjust_new_lines(rendered)}\nend"

    def _fn_on_one_line(self, clause: Clause, body: str) -> bool:
        right = clause.right
        if isinstance(right, (Block, ClauseList)) or not body or "\n" in body:
            return False
        if right.meta.suffix_comments or right.meta.line is None:
            return False
        if clause.left:
            return clause.left[0].meta.line == right.meta.line
        return self.fits(f"fn -> {body} end")

    # ----------------------------------------------------------------- blocks

    def _render_Block(self, node: Block, state: RenderState) -> str:
        # A parenthesized expression sequence used as a value.
        return "(" + self._body(node, state) + ")"


def render(
    node: Node,
    decorate: Optional[Decorate] = decorate_layout,
    state: Optional[RenderState] = None,
    *,
    line_length: int = 80,
    ledger: Optional[SourceLedger] = None,
) -> str:
    """
    Render an annotated tree as Elixir source text.

    Args:
        node: Root of the tree, normally the annotated program body.
        decorate: Hook applied to every node's text; `decorate_layout` splices
            in comments and blank lines, None renders without them.
        state: Initial render state; defaults to the default parenless calls.
        line_length: Column threshold for the single-line candidates.
        ledger: Source ledger, consulted read-only to align multi-line guards.

    Returns:
        The rendered text, without a trailing newline.
    """
    renderer = Renderer(decorate or _no_decoration, line_length=line_length, ledger=ledger)
    return renderer.render(node, state)


__all__ = [
    "ALIGNED_CALLS",
    "DEFAULT_PARENLESS_CALLS",
    "Decorate",
    "RenderState",
    "Renderer",
    "adjust_new_lines",
    "decorate_layout",
    "render",
]

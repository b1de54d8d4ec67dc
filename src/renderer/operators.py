"""
Operator rules used while rendering.

The precedence table itself lives with the grammar in `parser.operators`; this
module adds the decisions the renderer makes with it.
"""

from __future__ import annotations

from typing import Optional

from parser.nodes import BinaryOp, GuardedExpression, Node, Range
from parser.operators import AMPERSAND_OPERATORS, BINARY_OPERATORS, LEFT, RIGHT, UNARY_OPERATORS

# Operators that break after the operator when their operands span lines.
BREAKABLE_OPERATORS = frozenset({"<>", "++", "and", "or"})
PIPE_OPERATOR = "|>"


def binary_operator(node: Node) -> Optional[str]:
    """Operator of `node` when it renders as an infix expression."""
    if isinstance(node, BinaryOp):
        return node.op
    if isinstance(node, GuardedExpression) and len(node.left) == 1:
        return "when"
    if isinstance(node, Range):
        return ".."
    return None


def needs_parens(child_op: str, parent_op: str, side: str) -> bool:
    """
    Whether an operand rendered with `child_op` needs parentheses under `parent_op`.

    A looser-binding child always needs them; an equally binding child needs
    them unless it sits on the side the parent associates towards.
    """
    parent_assoc, parent_prec = BINARY_OPERATORS[parent_op]
    _, prec = BINARY_OPERATORS[child_op]
    if parent_prec < prec:
        return False
    if parent_prec > prec:
        return True
    return parent_assoc != side


__all__ = [
    "AMPERSAND_OPERATORS",
    "BREAKABLE_OPERATORS",
    "LEFT",
    "PIPE_OPERATOR",
    "RIGHT",
    "UNARY_OPERATORS",
    "binary_operator",
    "needs_parens",
]

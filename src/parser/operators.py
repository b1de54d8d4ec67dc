"""
Operator tables consulted by the renderer.

Binary operators map to `(associativity, precedence)`; a higher precedence binds
tighter. The values follow Elixir's operator table.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

LEFT = "left"
RIGHT = "right"

BINARY_OPERATORS: Dict[str, Tuple[str, int]] = {
    "<-": (LEFT, 40),
    "\\\\": (LEFT, 40),
    "when": (RIGHT, 50),
    "::": (RIGHT, 60),
    "|": (RIGHT, 70),
    "=": (RIGHT, 90),
    "||": (LEFT, 130),
    "|||": (LEFT, 130),
    "or": (LEFT, 130),
    "&&": (LEFT, 140),
    "&&&": (LEFT, 140),
    "and": (LEFT, 140),
    "==": (LEFT, 150),
    "!=": (LEFT, 150),
    "=~": (LEFT, 150),
    "===": (LEFT, 150),
    "!==": (LEFT, 150),
    "<": (LEFT, 160),
    "<=": (LEFT, 160),
    ">=": (LEFT, 160),
    ">": (LEFT, 160),
    "|>": (LEFT, 170),
    "<<<": (LEFT, 170),
    ">>>": (LEFT, 170),
    "<~": (LEFT, 170),
    "~>": (LEFT, 170),
    "<<~": (LEFT, 170),
    "~>>": (LEFT, 170),
    "<~>": (LEFT, 170),
    "<|>": (LEFT, 170),
    "^^^": (LEFT, 170),
    "in": (LEFT, 180),
    "not in": (LEFT, 180),
    "++": (RIGHT, 200),
    "--": (RIGHT, 200),
    "+++": (RIGHT, 200),
    "---": (RIGHT, 200),
    "..": (RIGHT, 200),
    "<>": (RIGHT, 200),
    "+": (LEFT, 210),
    "-": (LEFT, 210),
    "*": (LEFT, 220),
    "/": (LEFT, 220),
    "**": (LEFT, 230),
    ".": (LEFT, 310),
}

# `&` captures everything binding at least as tight as `=`.
CAPTURE_PRECEDENCE = 90

UNARY_OPERATORS: FrozenSet[str] = frozenset({"!", "@", "^", "not", "+", "-", "~~~", "&"})
AMPERSAND_OPERATORS: FrozenSet[str] = frozenset({"&", "&&", "&&&"})


def precedence(op: str) -> int:
    return BINARY_OPERATORS[op][1]


__all__ = [
    "AMPERSAND_OPERATORS",
    "BINARY_OPERATORS",
    "CAPTURE_PRECEDENCE",
    "LEFT",
    "RIGHT",
    "UNARY_OPERATORS",
    "precedence",
]

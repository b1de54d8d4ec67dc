"""
Text helpers for literals: numbers, characters, strings, atoms and sigils.
"""

from __future__ import annotations

import re
from typing import Any

from parser.nodes import LiteralFormat, Node

_IDENTIFIER_ATOM = re.compile(r"^[a-z_][a-zA-Z0-9_@]*[?!]?$")
_ALIAS_ATOM = re.compile(r"^[A-Z][a-zA-Z0-9_]*(\.[A-Z][a-zA-Z0-9_]*)*$")

OPERATOR_ATOMS = frozenset(
    {
        "===", "!==", "<<<", ">>>", "<<~", "~>>", "<~>", "<|>", "^^^", "~~~",
        "|||", "&&&", "+++", "---", "<<>>", "%{}", "{}", "...", "==", "!=",
        "=~", "<=", ">=", "&&", "||", "<>", "++", "--", "..", "|>", "->",
        "<-", "\\\\", "=>", "<~", "~>", "**", "//", "+", "-", "*", "/", "=",
        "<", ">", "|", ".", "!", "^", "&", "@", "%",
    }
)
_WORD_ATOMS = frozenset({"true", "false", "nil"})

_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\x1b": "\\e",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\0": "\\0",
    "\x7f": "\\d",
}

SIGIL_CLOSERS = {"/": "/", "|": "|", '"': '"', "'": "'", "(": ")", "[": "]", "{": "}", "<": ">"}


def underscore_decimal(digits: str) -> str:
    """Group digits in threes with `_` once there are six or more of them."""
    if len(digits) < 6:
        return digits
    groups = []
    while digits:
        groups.append(digits[-3:])
        digits = digits[:-3]
    return "_".join(reversed(groups))


def escape_text(text: str, quote: str = '"') -> str:
    """Escape decoded text for a quoted literal delimited by `quote`."""
    out = []
    index = 0
    while index < len(text):
        ch = text[index]
        if ch == quote:
            out.append("\\" + ch)
        elif ch == "#" and text.startswith("{", index + 1):
            out.append("\\#")
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\x{ord(ch):02X}")
        else:
            out.append(ch)
        index += 1
    return "".join(out)


def char_literal(codepoint: int) -> str:
    ch = chr(codepoint)
    if ch == " ":
        return "?\\s"
    if ch == "\0":
        return "?\\0"
    return "?" + escape_text(ch)


def format_number(value: Any, fmt: LiteralFormat) -> str:
    if fmt == LiteralFormat.CHAR:
        return char_literal(value)
    if fmt == LiteralFormat.HEX:
        return "0x" + format(value, "X")
    if fmt == LiteralFormat.OCTAL:
        return "0o" + format(value, "o")
    if fmt == LiteralFormat.BINARY:
        return "0b" + format(value, "b")
    if fmt == LiteralFormat.DECIMAL:
        sign = "-" if value < 0 else ""
        return sign + underscore_decimal(str(abs(value)))
    return str(value)


def format_literal(value: Any, fmt: LiteralFormat) -> str:
    """Source text for a `Literal` node's value under its format hint."""
    if fmt == LiteralFormat.PLAIN_STRING:
        return '"' + escape_text(value) + '"'
    if fmt == LiteralFormat.CHARLIST:
        return "'" + escape_text(value, "'") + "'"
    if fmt == LiteralFormat.BYTE_STRING_HEREDOC:
        return '"""\n' + value + '"""'
    if fmt == LiteralFormat.CHAR_LIST_HEREDOC:
        return "'''\n" + value + "'''"
    if isinstance(value, int):
        return format_number(value, fmt)
    if fmt == LiteralFormat.NONE and isinstance(value, str):
        # floats keep their source spelling
        return value
    return inspect_term(value)


def inspect_atom(name: str) -> str:
    if name in _WORD_ATOMS:
        return name
    if _IDENTIFIER_ATOM.match(name) or _ALIAS_ATOM.match(name) or name in OPERATOR_ATOMS:
        return ":" + name
    return ':"' + escape_text(name) + '"'


def keyword_key(name: str) -> str:
    """`key` part of `key: value`."""
    if name in _WORD_ATOMS or _IDENTIFIER_ATOM.match(name) or _ALIAS_ATOM.match(name):
        return name
    return '"' + escape_text(name) + '"'


def sigil_closer(opener: str) -> str:
    if len(opener) == 3:
        return opener
    return SIGIL_CLOSERS.get(opener, opener)


def inspect_term(value: Any) -> str:
    """Best-effort source text for values outside the modelled tree shapes."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return '"' + escape_text(value) + '"'
    if isinstance(value, (list, tuple)):
        inner = ", ".join(inspect_term(item) for item in value)
        return f"[{inner}]" if isinstance(value, list) else f"{{{inner}}}"
    if isinstance(value, Node):
        return f"#{type(value).__name__}<>"
    return repr(value)


__all__ = [
    "OPERATOR_ATOMS",
    "char_literal",
    "escape_text",
    "format_literal",
    "format_number",
    "inspect_atom",
    "inspect_term",
    "keyword_key",
    "sigil_closer",
    "underscore_decimal",
]

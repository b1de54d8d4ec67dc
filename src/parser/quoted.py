"""
Helpers for the bodies of Elixir strings, charlists, quoted atoms and sigils.

The grammar hands quoted literals over as source text. `split_interpolations`
cuts a body into text segments and `Interpolation` records holding the raw
source of each `#{...}`, which the parser then parses recursively. Plain
strings and charlists have their escapes decoded; heredoc and sigil bodies are
kept verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Interpolation:
    """Raw source of one `#{...}` segment and the line it starts on."""

    source: str
    line: int


StringParts = List[Union[str, Interpolation]]

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "d": "\x7f",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "s": " ",
    "t": "\t",
    "v": "\v",
    "0": "\0",
}


def _is_ident_char(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def decode_escape(text: str, index: int) -> Tuple[str, int]:
    """Decode the escape sequence whose backslash sits at `index`.

    Returns the decoded text and the index just past the sequence.
    """
    if index + 1 >= len(text):
        return "\\", index + 1
    ch = text[index + 1]
    if ch in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[ch], index + 2
    if ch == "\n":
        return "", index + 2
    if ch in "xu":
        start = index + 2
        if start < len(text) and text[start] == "{":
            close = text.find("}", start)
            if close != -1:
                return chr(int(text[start + 1:close], 16)), close + 1
        width = 2 if ch == "x" else 4
        digits = text[start:start + width]
        if len(digits) == width and all(c in "0123456789abcdefABCDEF" for c in digits):
            return chr(int(digits, 16)), start + width
        return ch, index + 2
    return ch, index + 2


def split_interpolations(body: str, line: int, *, interpolate: bool, decode: bool) -> StringParts:
    """Split a string body into text segments and interpolations."""
    parts: StringParts = []
    buffer: List[str] = []
    index = 0
    current_line = line
    while index < len(body):
        ch = body[index]
        if ch == "\\":
            if decode:
                decoded, index = decode_escape(body, index)
                buffer.append(decoded)
            else:
                buffer.append(body[index:index + 2])
                index += 2
            continue
        if interpolate and ch == "#" and body.startswith("{", index + 1):
            end = _find_interpolation_end(body, index + 2)
            if buffer:
                parts.append("".join(buffer))
                buffer = []
            parts.append(Interpolation(body[index + 2:end], current_line))
            current_line += body.count("\n", index, end)
            index = end + 1
            continue
        if ch == "\n":
            current_line += 1
        buffer.append(ch)
        index += 1
    if buffer:
        parts.append("".join(buffer))
    return parts


def _find_interpolation_end(text: str, start: int) -> int:
    """Index of the `}` closing an interpolation opened just before `start`."""
    depth = 1
    index = start
    quote: Optional[str] = None
    while index < len(text):
        ch = text[index]
        if quote:
            if ch == "\\":
                index += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "?" and index + 1 < len(text) and not (index > start and _is_ident_char(text[index - 1])):
            # char literals such as ?} or ?{
            index += 3 if text[index + 1] == "\\" else 2
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return len(text)


def heredoc_body(text: str, delimiter: str) -> str:
    """
    Content of a heredoc literal whose source `text` ends with `delimiter`.

    The line holding the opening delimiter is dropped and every content line
    loses as much leading whitespace as precedes the closing delimiter.
    """
    start = text.index("\n") + 1
    inner = text[start:len(text) - len(delimiter)]
    cut = inner.rfind("\n") + 1
    lines = inner[:cut].splitlines(keepends=True)
    return strip_heredoc_indentation(lines, len(inner) - cut)


def strip_heredoc_indentation(lines: List[str], indent: int) -> str:
    stripped: List[str] = []
    for line in lines:
        width = 0
        while width < indent and width < len(line) and line[width] in " \t":
            width += 1
        stripped.append(line[width:])
    return "".join(stripped)


__all__ = [
    "Interpolation",
    "StringParts",
    "decode_escape",
    "heredoc_body",
    "split_interpolations",
    "strip_heredoc_indentation",
]

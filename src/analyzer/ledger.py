"""
Source line ledger used to carry comments and blank lines through formatting.

The syntax tree drops comments, so the formatter keeps the original text around:
a 1-indexed table of trimmed source lines plus a queue of same-line trailing
comments keyed by a fingerprint of the code in front of them. The annotation
pass reads comment lines out of the table (clearing each one as it is claimed so
that it is emitted exactly once) and the emitter pops trailing comments back
onto output lines whose fingerprint matches.

One ledger exists per format invocation.
"""

from __future__ import annotations

import re
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from parser.syntax import collect_comments, multiline_literals, parse_tree

_NON_WORD = re.compile(r"\W+")


def fingerprint(text: str) -> str:
    """Drop every run of non-word characters; `x = foo(1)` becomes `xfoo1`."""
    return "".join(_NON_WORD.split(text))


class SourceLedger:
    """Mutable view of the source lines and the pending trailing comments."""

    def __init__(self, lines: List[str]) -> None:
        self._lines: Dict[int, Optional[str]] = {
            index: line.strip() for index, line in enumerate(lines, start=1)
        }
        self._inline: Dict[str, Deque[str]] = {}

    @classmethod
    def from_source(cls, source: str) -> "SourceLedger":
        """
        Build the ledger for `source`.

        Comments come from the grammar's `comment` nodes: one that follows code
        on its own line is queued under the fingerprint of the text before it.
        Lines inside multi-line quoted literals are made opaque so their
        content is never mistaken for comments or blank lines.
        """
        text = source.replace("\r\n", "\n")
        raw_lines = text.split("\n")
        ledger = cls(raw_lines)
        tree = parse_tree(text)
        for first, last in multiline_literals(tree):
            for lineno in range(first + 1, last + 1):
                ledger.consume(lineno)
        for comment in collect_comments(tree, text):
            if not comment.trailing:
                continue
            key = fingerprint(raw_lines[comment.line - 1][: comment.column - 1])
            if key:
                ledger.push_inline_comment(key, comment.text)
        return ledger

    # ------------------------------------------------------------------- lines

    def line(self, lineno: int) -> Optional[str]:
        """Trimmed text of `lineno`; None when out of range or already consumed."""
        return self._lines.get(lineno)

    def consume(self, lineno: int) -> None:
        if lineno in self._lines:
            self._lines[lineno] = None

    def _is_comment(self, lineno: int) -> bool:
        text = self.line(lineno)
        return text is not None and text.startswith("#")

    def prefix_blank(self, curr: int, prev: int = 0) -> bool:
        """True when `curr` is a blank line at or below `prev`."""
        return curr >= prev and self.line(curr) == ""

    def prefix_comments(self, curr: int, prev: int) -> str:
        """
        Claim the comment lines directly above a node.

        Walks upward from `curr` (the line just above the node) and stops at
        `prev` or at the first line holding code. Each claimed comment keeps a
        leading newline when a blank line sits right above it.
        """
        pieces: List[str] = []
        while curr >= prev:
            text = self.line(curr)
            if text is None:
                break
            if text.startswith("#"):
                blank = "\n" if self.prefix_blank(curr - 1, prev) else ""
                pieces.append(f"{blank}{text}\n")
                self.consume(curr)
            elif text != "":
                break
            curr -= 1
        return "".join(reversed(pieces))

    def suffix_comments(self, curr: int) -> str:
        """Claim the comment lines below a node, starting at `curr`."""
        pieces: List[str] = []
        while True:
            text = self.line(curr)
            if text is None:
                break
            if text.startswith("#"):
                blank = "\n" if self.prefix_blank(curr - 1) else ""
                pieces.append(f"\n{blank}{text}")
                self.consume(curr)
            elif text != "":
                break
            curr += 1
        return "".join(pieces)

    def unconsumed_comment_lines(self) -> List[int]:
        return [lineno for lineno in sorted(self._lines) if self._is_comment(lineno)]

    # ---------------------------------------------------------------- trailing

    def push_inline_comment(self, key: str, comment: str) -> None:
        self._inline.setdefault(key, deque()).append(comment)

    def pop_inline_comment(self, key: str) -> Optional[str]:
        """Oldest trailing comment queued under `key`, if any."""
        queue = self._inline.get(key)
        if not queue:
            return None
        return queue.popleft()

    def pending_inline_comments(self) -> List[Tuple[str, str]]:
        return [(key, comment) for key, queue in self._inline.items() for comment in queue]


__all__ = ["SourceLedger", "fingerprint"]

"""
Serialize rendered Elixir text, ready for writing to disk.

Rendering loses the comments that shared a line with code. The emitter puts them
back: every output line is trimmed of trailing whitespace, fingerprinted the
same way the ledger fingerprinted the source, and receives the oldest pending
comment queued under that fingerprint. Two source lines reducing to the same
fingerprint can trade comments; that imprecision is accepted.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import List, Optional

from analyzer.ledger import SourceLedger, fingerprint


@dataclass(frozen=True)
class EmitOptions:
    trailing_newline: bool = True


@dataclass(frozen=True)
class EmitResult:
    source: str
    diagnostics: List[str]


def reinject_inline_comments(text: str, ledger: SourceLedger) -> str:
    """
    Append pending same-line comments to the rendered lines they belong to.

    Args:
        text: Rendered source, without the final newline.
        ledger: Ledger holding the harvested trailing comments; popped in place.

    Returns:
        The text with trailing whitespace removed from every line and each
        matched comment appended after a single space.
    """
    lines = []
    for line in text.split("\n"):
        line = line.rstrip()
        comment = ledger.pop_inline_comment(fingerprint(line))
        if comment is not None:
            line = f"{line} {comment}"
        lines.append(line)
    return "\n".join(lines)


def emit_module(rendered: str, ledger: SourceLedger, options: Optional[EmitOptions] = None) -> EmitResult:
    """
    Produce the final source text for a rendered module.
    """
    options = options or EmitOptions()

    buffer = io.StringIO()
    buffer.write(reinject_inline_comments(rendered.lstrip("\n"), ledger))
    if options.trailing_newline:
        buffer.write("\n")

    diagnostics = [
        f"Inline comment {comment!r} found no matching line." for _, comment in ledger.pending_inline_comments()
    ]
    return EmitResult(source=buffer.getvalue(), diagnostics=diagnostics)


__all__ = ["EmitOptions", "EmitResult", "emit_module", "reinject_inline_comments"]

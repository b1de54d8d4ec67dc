"""
Pipeline glue stitching together parsing, annotation, rendering and emission.

`run_frontend` parses the source, builds the per-invocation source ledger and
runs the annotation pass; `format_source` carries the result through the
renderer and the emitter. Each call owns its ledger and render state, so
independent files can be formatted concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Optional, Union

from analyzer import AnnotationResult, SourceLedger, annotate
from emitter import EmitOptions, emit_module
from parser import ParseResult, parse_elixir
from renderer import DEFAULT_PARENLESS_CALLS, RenderState, decorate_layout, render


class FormatError(RuntimeError):
    """Raised when source text cannot be formatted because it does not parse."""

    def __init__(self, message: str, parse: Optional[ParseResult] = None):
        loc = ""
        if parse is not None and parse.errors:
            first = parse.errors[0]
            loc = f" (line {first.line}, column {first.column}): {first.description}"
        super().__init__(f"{message}{loc}")
        self.parse = parse


@dataclass(frozen=True)
class FormatOptions:
    """Recognised formatter options."""

    line_length: int = 80
    parenless_calls: FrozenSet[str] = DEFAULT_PARENLESS_CALLS
    trailing_newline: bool = True


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from parsing and annotation."""

    parse: ParseResult
    annotation: Optional[AnnotationResult]
    ledger: Optional[SourceLedger]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def diagnostics(self):
        """Aggregate diagnostics from parse failures and comment placement."""
        diagnostics = [error.description for error in self.parse.errors]
        if self.annotation:
            diagnostics.extend(self.annotation.diagnostics)
        return diagnostics


@dataclass(frozen=True)
class FormatResult:
    source: str
    diagnostics: List[str]


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    options: Optional[FormatOptions] = None,
    cache_dir: Optional[Union[str, Path]] = None,
) -> FrontEndResult:
    """
    Parse Elixir input and annotate the tree with layout metadata.

    Args:
        source: Raw Elixir source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to the parser; when True syntax errors become diagnostics.
        options: Formatter options; only `parenless_calls` matters here.
        cache_dir: Optional directory to write the parse result as JSON (`None` disables).

    Returns:
        FrontEndResult with the parse output and, when a tree was produced, the
        ledger and annotation result.
    """
    options = options or FormatOptions()
    parse_result = parse_elixir(source, source_name=source_name, tolerant=tolerant)

    annotation: Optional[AnnotationResult] = None
    ledger: Optional[SourceLedger] = None
    if parse_result.ast is not None:
        ledger = SourceLedger.from_source(source)
        annotation = annotate(parse_result.ast, ledger, parenless_calls=options.parenless_calls)

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    return FrontEndResult(parse=parse_result, annotation=annotation, ledger=ledger)


def format_source(
    source: str,
    *,
    source_name: str = "<input>",
    options: Optional[FormatOptions] = None,
) -> FormatResult:
    """
    Format Elixir source text.

    Args:
        source: Raw Elixir source text.
        source_name: Identifier used in diagnostics.
        options: Formatter options (line length, parenless calls, trailing newline).

    Returns:
        FormatResult with the formatted text and diagnostics about comments
        that could not be placed.

    Raises:
        FormatError: If the source does not parse.
    """
    options = options or FormatOptions()
    frontend = run_frontend(source, source_name=source_name, options=options)
    if frontend.annotation is None:
        raise FormatError(f"Cannot format {source_name}", frontend.parse)

    annotation = frontend.annotation
    state = RenderState(parenless_calls=annotation.parenless_calls)
    rendered = render(
        annotation.tree,
        decorate_layout,
        state,
        line_length=options.line_length,
        ledger=frontend.ledger,
    )
    emitted = emit_module(rendered, frontend.ledger, EmitOptions(trailing_newline=options.trailing_newline))
    return FormatResult(source=emitted.source, diagnostics=annotation.diagnostics + emitted.diagnostics)


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk for inspection."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")


__all__ = ["FormatError", "FormatOptions", "FormatResult", "FrontEndResult", "format_source", "run_frontend"]

"""
Command-line interface for formatting Elixir source files.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from frontend import FormatError, FormatOptions, format_source, run_frontend
from renderer import DEFAULT_PARENLESS_CALLS


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _print_diagnostics(messages: List[str]) -> None:
    if not messages:
        return
    for message in messages:
        sys.stderr.write(message + "\n")


def _collect_diagnostics(source_name: str, format_diagnostics: List[str], changed: bool, check: bool) -> List[str]:
    diagnostics: List[str] = []
    for message in format_diagnostics:
        diagnostics.append(f"WARNING {source_name}: {message}")
    if check and changed:
        diagnostics.append(f"INFO {source_name}: File is not formatted.")
    return diagnostics


def _build_options(args: argparse.Namespace) -> FormatOptions:
    parenless = DEFAULT_PARENLESS_CALLS | frozenset(args.parenless or ())
    return FormatOptions(line_length=args.line_length, parenless_calls=parenless)


def format_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    options = _build_options(args)
    try:
        result = format_source(source, source_name=str(input_path), options=options)
    except FormatError:
        frontend_result = run_frontend(source, source_name=str(input_path), options=options)
        sys.stderr.write("ERROR: Parsing failed; nothing formatted.\n")
        for error in frontend_result.parse.errors:
            loc = _format_location(error.line, error.column)
            sys.stderr.write(f"ERROR {input_path}{loc}: {error.description}\n")
        return 1

    changed = result.source != source
    if not args.check:
        output_path = Path(args.out) if args.out else input_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.source, encoding="utf-8")

    diagnostics = _collect_diagnostics(str(input_path), result.diagnostics, changed, args.check)
    _print_diagnostics(diagnostics)

    if args.check and changed:
        return 1
    if args.strict and result.diagnostics:
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exformat", description="Format Elixir source files")
    subparsers = parser.add_subparsers(dest="command")

    format_parser = subparsers.add_parser("format", help="Format a single Elixir file")
    format_parser.add_argument("input", help="Path to the Elixir source file")
    format_parser.add_argument(
        "--out",
        help="Output file path (defaults to rewriting the input file)",
    )
    format_parser.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit with status 1 when the file is not formatted.",
    )
    format_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings (such as unplaced comments) as errors.",
    )
    format_parser.add_argument(
        "--line-length",
        type=int,
        default=80,
        help="Column threshold for single-line layouts (default: 80).",
    )
    format_parser.add_argument(
        "--parenless",
        action="append",
        metavar="NAME",
        help="Additional call name rendered without parentheses; may be repeated.",
    )
    format_parser.set_defaults(func=format_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

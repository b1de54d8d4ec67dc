from collections import Counter
from pathlib import Path

import pytest

from analyzer import SourceLedger
from emitter import EmitOptions, emit_module, reinject_inline_comments
from frontend import format_source
from parser import collect_comments, parse_tree

FORMATTED_CASES = ["tests/cases/greeter.ex", "tests/cases/shapes.ex", "tests/cases/notes.ex"]
ALL_CASES = FORMATTED_CASES + ["tests/cases/messy.ex"]


def _format_file(relative_path: str):
    source_path = Path(relative_path)
    source = source_path.read_text(encoding="utf-8")
    result = format_source(source, source_name=str(source_path))
    return source, result


def _comments(source: str) -> Counter:
    return Counter(comment.text for comment in collect_comments(parse_tree(source), source))


def test_reinject_ignores_trailing_whitespace():
    ledger = SourceLedger([])
    ledger.push_inline_comment("x1", "# one")
    assert reinject_inline_comments("x = 1   \ny = 2", ledger) == "x = 1 # one\ny = 2"


def test_reinject_pops_duplicate_fingerprints_in_order():
    ledger = SourceLedger([])
    ledger.push_inline_comment("foo", "# first")
    ledger.push_inline_comment("foo", "# second")
    assert reinject_inline_comments("foo()\nfoo()", ledger) == "foo() # first\nfoo() # second"


def test_emit_module_trailing_newline_option():
    ledger = SourceLedger([])
    assert emit_module("\nfoo()", ledger).source == "foo()\n"
    assert emit_module("foo()", ledger, EmitOptions(trailing_newline=False)).source == "foo()"


def test_emit_module_reports_unmatched_inline_comments():
    ledger = SourceLedger([])
    ledger.push_inline_comment("gone", "# orphan")
    result = emit_module("foo()", ledger)
    assert result.source == "foo()\n"
    assert result.diagnostics == ["Inline comment '# orphan' found no matching line."]


@pytest.mark.parametrize("relative_path", FORMATTED_CASES)
def test_formatted_files_are_left_unchanged(relative_path):
    source, result = _format_file(relative_path)
    assert result.source == source
    assert result.diagnostics == []


def test_messy_file_is_formatted():
    _, result = _format_file("tests/cases/messy.ex")
    assert result.source == (
        "defmodule Messy do\n"
        "  def calc(a, b), do: (a + b) * 2\n"
        "\n"
        "  def check(x) do\n"
        "    if x > 0, do: :pos, else: :neg\n"
        "  end\n"
        "  def pipeline(list), do: list |> Enum.reverse()\n"
        "end\n"
    )


@pytest.mark.parametrize("relative_path", ALL_CASES)
def test_formatting_is_idempotent(relative_path):
    _, first = _format_file(relative_path)
    second = format_source(first.source, source_name=relative_path)
    assert second.source == first.source


@pytest.mark.parametrize("relative_path", ALL_CASES)
def test_formatting_keeps_every_comment(relative_path):
    source, result = _format_file(relative_path)
    assert _comments(result.source) == _comments(source)

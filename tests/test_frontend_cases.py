import json
from pathlib import Path

import pytest

from frontend import FormatError, FormatOptions, format_source, run_frontend


def _load(relative_path: str) -> str:
    return Path(relative_path).read_text(encoding="utf-8")


def test_frontend_parses_and_annotates_fixture():
    source = _load("tests/cases/greeter.ex")
    result = run_frontend(source, source_name="greeter.ex")
    assert result.has_ast
    assert result.parse.errors == []
    assert result.diagnostics == []
    assert result.ledger is not None
    assert "defmodule" in result.annotation.parenless_calls


def test_frontend_writes_parse_cache(tmp_path):
    source = _load("tests/cases/shapes.ex")
    result = run_frontend(source, source_name="shapes.ex", cache_dir=tmp_path)
    cache_file = tmp_path / f"{result.parse.source_hash}.json"
    assert cache_file.exists()
    payload = json.loads(cache_file.read_text(encoding="utf-8"))
    assert payload["source_name"] == "shapes.ex"
    assert payload["ast"] is not None


def test_frontend_reports_parse_errors():
    result = run_frontend("foo(", source_name="broken.ex")
    assert not result.has_ast
    assert result.annotation is None
    assert result.ledger is None
    assert len(result.diagnostics) == 1


def test_format_source_raises_on_parse_error():
    with pytest.raises(FormatError) as excinfo:
        format_source("foo(", source_name="broken.ex")
    assert "broken.ex" in str(excinfo.value)
    assert excinfo.value.parse.errors


def test_format_source_keeps_comment_after_only_element():
    result = format_source("[\n  1\n  # last\n]\n", source_name="last.ex")
    assert result.source == "[\n  1,\n  # last\n]\n"
    assert result.diagnostics == []


def test_format_source_without_trailing_newline():
    result = format_source("foo(1)\n", options=FormatOptions(trailing_newline=False))
    assert result.source == "foo(1)"


def test_format_source_uses_parenless_option():
    options = FormatOptions(parenless_calls=frozenset({"plug"}))
    assert format_source("plug :auth", options=options).source == "plug :auth\n"

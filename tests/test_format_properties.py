from collections import Counter
from dataclasses import asdict

import pytest

from frontend import format_source, run_frontend
from parser import collect_comments, parse_elixir, parse_tree

COMMENTED_SOURCES = [
    "[\n  1\n  # last\n]\n",
    "x = [\n  1,\n  # between\n  2\n]\n",
    "{\n  :ok,\n  1\n  # tail\n}\n",
    '%{\n  "a" => 1\n  # tail\n}\n',
    "foo(\n  1\n  # tail\n)\n",
    "foo(\n  1,\n  2\n  # tail\n)\n",
    "foo(\n  # first\n  a,\n  b\n)\n",
    "foo(a,\n  b: 1\n  # tail\n)\n",
    "defmodule A do\n  # lead\n  def b(x), do: x # same line\n  # trailing\nend\n",
]

CALL_SOURCES = [
    "String.upcase(x)\n",
    "Enum.map(xs, f)\n",
    "Enum.map(xs, &String.upcase/1) # upcase\n",
    "fun.(1)\n",
    "x |> Enum.reverse()\n",
    "list\n|> Enum.map(&f/1)\n|> Enum.sum()\n",
    "@spec name(String.t()) :: String.t()\n",
    "@spec add(integer, integer) :: integer\n",
    "Logger.info(fn -> msg end)\n",
    "__MODULE__.Child.start_link(opts)\n",
]

OPERATORS = [
    "=", "||", "or", "&&", "and", "==", "!=", "===", "<", ">=",
    "|>", "in", "<>", "++", "--", "+", "-", "*", "/",
]


def _comments(source: str) -> Counter:
    return Counter(comment.text for comment in collect_comments(parse_tree(source), source))


def _without_meta(value):
    if isinstance(value, dict):
        return {key: _without_meta(item) for key, item in value.items() if key != "meta"}
    if isinstance(value, list):
        return [_without_meta(item) for item in value]
    return value


def _shape(tree):
    return _without_meta(asdict(tree))


@pytest.mark.parametrize("source", COMMENTED_SOURCES + CALL_SOURCES)
def test_formatting_keeps_every_comment(source):
    result = format_source(source)
    assert _comments(result.source) == _comments(source)
    assert result.diagnostics == []


@pytest.mark.parametrize("source", COMMENTED_SOURCES + CALL_SOURCES)
def test_formatting_is_idempotent(source):
    first = format_source(source).source
    assert format_source(first).source == first


@pytest.mark.parametrize(
    "source, expected",
    [
        ("[\n  1\n  # last\n]\n", "[\n  1,\n  # last\n]\n"),
        ("foo(\n  1\n  # tail\n)\n", "foo(\n  1\n  # tail\n)\n"),
        ("foo(\n  1,\n  2\n  # tail\n)\n", "foo(\n  1,\n  2\n  # tail\n)\n"),
        ("foo(a,\n  b: 1\n  # tail\n)\n", "foo(\n  a,\n  b: 1\n  # tail\n)\n"),
        ("{\n  :ok,\n  1\n  # tail\n}\n", "{\n  :ok,\n  1,\n  # tail\n}\n"),
    ],
)
def test_comment_after_last_element_forces_multiline_layout(source, expected):
    assert format_source(source).source == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("String.upcase(x)\n", "String.upcase(x)\n"),
        ("fun.(1)\n", "fun.(1)\n"),
        ("x |> Enum.reverse\n", "x |> Enum.reverse()\n"),
        ("@spec name(String.t()) :: String.t()\n", "@spec name(String.t) :: String.t\n"),
    ],
)
def test_remote_and_anonymous_calls(source, expected):
    assert format_source(source).source == expected


@pytest.mark.parametrize("outer", OPERATORS)
def test_rendered_operators_parse_back_to_the_same_tree(outer):
    for inner in OPERATORS:
        for source in (
            f"a {inner} b {outer} c",
            f"(a {inner} b) {outer} c",
            f"a {outer} (b {inner} c)",
        ):
            expected = _shape(run_frontend(source).annotation.tree)
            rendered = format_source(source).source
            reparsed = parse_elixir(rendered)
            assert reparsed.errors == [], rendered
            assert _shape(reparsed.ast) == expected, (source, rendered)

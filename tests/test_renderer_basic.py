import pytest

from frontend import FormatOptions, format_source, run_frontend
from renderer import DEFAULT_PARENLESS_CALLS, RenderState, render


def _format(source: str, **options) -> str:
    result = format_source(source, source_name="test.ex", options=FormatOptions(**options))
    return result.source


def _unchanged(source: str) -> None:
    assert _format(source + "\n") == source + "\n"


def test_renderer_operator_spacing_and_precedence():
    assert _format("1+2*3") == "1 + 2 * 3\n"
    assert _format("(1+2)*3") == "(1 + 2) * 3\n"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("a - (b - c)", "a - (b - c)"),
        ("(a - b) - c", "a - b - c"),
        ("a ++ (b ++ c)", "a ++ b ++ c"),
        ("(a ++ b) ++ c", "(a ++ b) ++ c"),
        ("-(a + b)", "-(a + b)"),
        ("x = y = 1", "x = y = 1"),
        ("(a || b) && c", "(a || b) && c"),
    ],
)
def test_renderer_parenthesizes_only_where_needed(source, expected):
    assert _format(source) == expected + "\n"


def test_renderer_keeps_statement_comments_and_do_blocks():
    _unchanged("# explain\nfoo(1)")
    _unchanged("if x do\n  y\nend")
    _unchanged("foo bar do\n  :ok\nend")


def test_renderer_breaks_long_lists_one_element_per_line():
    items = ", ".join(f":item{i}" for i in range(12))
    expected = "[\n" + "".join(f"  :item{i},\n" for i in range(12)) + "]\n"
    assert _format(f"[{items}]") == expected


def test_renderer_line_fit_boundary():
    # A container is measured with two columns of padding on each side of its
    # elements, so at the default threshold of 80 a list of 78 columns is the
    # longest that stays on one line.
    fits = "[:a, :" + "x" * 71 + "]"
    assert len(fits) == 78
    assert _format(fits) == fits + "\n"
    long_atom = ":" + "x" * 72
    too_long = "[:a, " + long_atom + "]"
    assert len(too_long) == 79
    assert _format(too_long) == "[\n  :a,\n  " + long_atom + ",\n]\n"
    assert _format(too_long, line_length=81) == too_long + "\n"


def test_renderer_respects_line_length_option():
    assert _format("[:aaa, :bbb]", line_length=10) == "[\n  :aaa,\n  :bbb,\n]\n"


def test_renderer_list_spanning_source_lines_stays_multiline():
    assert _format("[1,\n 2]") == "[\n  1,\n  2,\n]\n"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("1000000", "1_000_000"),
        ("12345", "12345"),
        ("0x1f", "0x1F"),
        ("?\\s", "?\\s"),
        ("'abc'", "'abc'"),
        ('"tab\\there"', '"tab\\there"'),
        (':"foo bar"', ':"foo bar"'),
        ("~r/ab+c/i", "~r/ab+c/i"),
        ("3.14", "3.14"),
        ('"#{a}-#{b}"', '"#{a}-#{b}"'),
    ],
)
def test_renderer_literals(source, expected):
    assert _format(source) == expected + "\n"


@pytest.mark.parametrize(
    "source",
    ["&foo/1", "&Enum.map/2", "&(&1 + 1)", "&{&1, &2}", "&foo(&1, 2)"],
)
def test_renderer_captures(source):
    _unchanged(source)


def test_renderer_anonymous_functions():
    _unchanged("fn x -> x end")
    _unchanged("fn x ->\n  x\nend")
    source = "fn\n  0 -> :zero\n  _ -> :other\nend"
    assert _format(source) == "fn\n  0 ->\n    :zero\n  _ ->\n    :other\nend\n"


def test_renderer_aligns_multiline_guard_under_head():
    _unchanged("def foo(x)\n    when x > 0 do\n  x\nend")


def test_renderer_keyword_blocks():
    _unchanged("if a, do: b, else: c")
    _unchanged("if a do\n  b\nelse\n  c\nend")
    assert _format("if a, do: b,\n  else: c") == "if a do\n  b\nelse\n  c\nend\n"


def test_renderer_parenless_calls():
    assert _format("foo 1") == "foo(1)\n"
    assert _format("foo 1", parenless_calls=DEFAULT_PARENLESS_CALLS | {"foo"}) == "foo 1\n"
    assert _format("x |> foo") == "x |> foo()\n"


def test_renderer_type_spec_drops_zero_arity_parens():
    assert _format("@spec name() :: String.t()") == "@spec name :: String.t\n"


def test_renderer_breakable_operator_and_assignment():
    assert _format('"a" <>\n  "b"') == '"a" <>\n"b"\n'
    source = "x = case y do\n  _ -> 1\nend"
    assert _format(source) == "x =\n  case y do\n    _ ->\n      1\n  end\n"


def test_renderer_comments_and_blank_lines():
    _unchanged("foo()\n# bye")
    _unchanged("x = 1 # one\ny = 2")
    assert _format("a = 1\n\n\nb = 2\n") == "a = 1\n\nb = 2\n"


@pytest.mark.parametrize(
    "source",
    [
        "%{a: 1, b: 2}",
        '%User{name: "x"}',
        "%{m | a: 1}",
        '%{"a" => 1}',
        "a[:b]",
        "1..10//2",
        "alias Foo.{Bar, Baz}",
        "<<x::binary-size(4), rest::binary>>",
    ],
)
def test_renderer_containers_and_access(source):
    _unchanged(source)


def test_renderer_call_with_commented_arguments():
    _unchanged("foo(\n  # first\n  a,\n  b\n)")


def test_renderer_aligns_with_clauses():
    _unchanged("with {:ok, a} <- f(),\n     {:ok, b} <- g(a) do\n  a + b\nend")


def test_render_without_decoration_drops_comments():
    source = "# gone\nfoo(1)\n"
    tree = run_frontend(source).annotation.tree
    assert render(tree, None, RenderState()) == "foo(1)"

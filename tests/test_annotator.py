from analyzer import SourceLedger, annotate
from parser import parse_elixir
from parser.nodes import Call, Dot


def _annotate(source: str, parenless=frozenset()):
    tree = parse_elixir(source).ast
    ledger = SourceLedger.from_source(source)
    return annotate(tree, ledger, parenless_calls=parenless)


def test_annotator_normalizes_zero_arity_definition_heads():
    result = _annotate("def foo, do: 1")
    head = result.tree.args[0]
    assert isinstance(head, Call)
    assert head.target == "foo"
    assert head.args == []


def test_annotator_normalizes_pipe_targets():
    result = _annotate("x |> foo")
    assert isinstance(result.tree.right, Call)


def test_annotator_discovers_do_block_calls():
    source = 'defmodule A do\n  schema "x" do\n  end\nend\n'
    result = _annotate(source, frozenset({"if"}))
    assert {"defmodule", "schema", "if"} <= result.parenless_calls
    assert "foo" not in result.parenless_calls


def test_annotator_attaches_prefix_comments_and_blank_lines():
    result = _annotate("a = 1\n\n# note\nb = 2\n")
    first, second = result.tree.exprs
    assert first.meta.prefix_comments == ""
    assert second.meta.prefix_comments == "\n# note\n"
    assert second.meta.prev_line == 1
    assert result.diagnostics == []


def test_annotator_marks_blank_line_before_statement():
    result = _annotate("a = 1\n\nb = 2\n")
    assert result.tree.exprs[1].meta.prefix_blank
    assert not result.tree.exprs[0].meta.prefix_blank


def test_annotator_attaches_suffix_comments_to_last_statement():
    result = _annotate("foo()\n# end\n")
    assert result.tree.meta.suffix_comments == "\n# end"


def test_annotator_reports_comments_left_in_the_ledger():
    tree = parse_elixir("foo()").ast
    ledger = SourceLedger(["# stray", "foo()"])
    result = annotate(tree, ledger, parenless_calls=frozenset())
    assert result.diagnostics == ["Comment on line 1 could not be attached to a node."]


def test_annotator_handles_remote_call_targets():
    result = _annotate("Enum.map(xs, f)\nfun.(1)\nx |> Enum.reverse()\n")
    remote, anonymous, pipe = result.tree.exprs
    assert isinstance(remote.target, Dot)
    assert anonymous.target.name is None
    assert isinstance(pipe.right, Call)
    assert result.diagnostics == []


def test_annotator_attaches_comment_after_only_list_element():
    result = _annotate("x = [\n  1\n  # last\n]\n")
    elem = result.tree.right.elems[0]
    assert elem.meta.suffix_comments == "\n# last"
    assert result.diagnostics == []


def test_annotator_attaches_comment_after_last_call_argument():
    result = _annotate("foo(\n  1,\n  2\n  # tail\n)\n")
    assert result.tree.args[-1].meta.suffix_comments == "\n# tail"
    keyword = _annotate("foo(a,\n  b: 1\n  # tail\n)\n")
    assert keyword.tree.args[-1].elems[-1].value.meta.suffix_comments == "\n# tail"


def test_annotator_attaches_comment_after_tuple_and_map_entries():
    pair = _annotate("{\n  :ok,\n  1\n  # tail\n}\n")
    assert pair.tree.right.meta.suffix_comments == "\n# tail"
    entries = _annotate('%{\n  "a" => 1\n  # tail\n}\n')
    assert entries.tree.pairs[0].value.meta.suffix_comments == "\n# tail"

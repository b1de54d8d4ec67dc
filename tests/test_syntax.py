from parser import collect_comments, multiline_literals, parse_tree
from parser.quoted import Interpolation, decode_escape, heredoc_body, split_interpolations


def _comments(source: str):
    return collect_comments(parse_tree(source), source)


def test_collect_comments_marks_trailing_comments():
    comments = _comments("# own\nx = 1 # note\n")
    assert [(c.text, c.line, c.column, c.trailing) for c in comments] == [
        ("# own", 1, 1, False),
        ("# note", 2, 7, True),
    ]


def test_collect_comments_counts_columns_in_characters():
    comments = _comments('x = "é" # accent\n')
    assert comments[0].column == 9


def test_comment_on_line_after_code_is_not_trailing():
    comments = _comments("foo()\n# bye\n")
    assert not comments[0].trailing


def test_hash_inside_strings_is_not_a_comment():
    assert _comments('x = "# not a comment"\n') == []


def test_multiline_literals_report_line_spans():
    source = 'x = """\n  body\n"""\ny = "one line"\nz = ~S"""\n  raw\n"""\n'
    assert multiline_literals(parse_tree(source)) == [(1, 3), (5, 7)]


def test_split_interpolations_tracks_lines():
    parts = split_interpolations("a\n#{b}c", 4, interpolate=True, decode=True)
    assert parts == ["a\n", Interpolation("b", 5), "c"]


def test_split_interpolations_keeps_raw_escapes_when_asked():
    assert split_interpolations("a\\n", 1, interpolate=False, decode=False) == ["a\\n"]
    assert split_interpolations("a\\n", 1, interpolate=False, decode=True) == ["a\n"]


def test_decode_escape_handles_unicode_forms():
    assert decode_escape("\\u{1F600}", 0) == ("\U0001F600", 9)
    assert decode_escape("\\x41", 0) == ("A", 4)


def test_heredoc_body_strips_closing_indentation():
    assert heredoc_body('"""\n    one\n      two\n    """', '"""') == "one\n  two\n"
    assert heredoc_body('"""\n"""', '"""') == ""

import datetime

from dyffpack.output.text import (
    Styler,
    change_ratio,
    count_word,
    is_whitespace_only_change,
    multiline_hunks,
    plural,
    render_value,
    show_whitespace,
    side_by_side,
    type_name,
    visible_width,
)


def test_counts_are_spelled_out_up_to_twelve() -> None:
    assert count_word(1) == "one"
    assert count_word(12) == "twelve"
    assert count_word(13) == "13"
    assert plural(1, "map entry", "map entries") == "one map entry"
    assert plural(3, "map entry", "map entries") == "three map entries"
    assert plural(0, "difference") == "no differences"


def test_render_value_scalars_and_blocks() -> None:
    assert render_value(None) == "null"
    assert render_value(True) == "true"
    assert render_value(1.5) == "1.5"
    assert render_value("") == '""'
    assert render_value([]) == "[]"
    assert render_value({"a": [1, 2]}) == "a:\n- 1\n- 2"
    assert render_value(datetime.date(2024, 1, 2)) == "2024-01-02"


def test_type_names() -> None:
    assert [type_name(value) for value in (None, True, 1, 1.0, "s", {}, [])] == [
        "null",
        "bool",
        "int",
        "float",
        "string",
        "map",
        "list",
    ]


def test_whitespace_helpers() -> None:
    assert is_whitespace_only_change("a b", "a  b")
    assert not is_whitespace_only_change("a", "a")
    assert not is_whitespace_only_change("a", "b")
    assert show_whitespace("a b\t") == "a·b→"


def test_change_ratio() -> None:
    assert change_ratio("abcd", "abcd") == 0.0
    assert change_ratio("abcd", "abce") == 0.25
    assert change_ratio("", "") == 0.0


def test_multiline_hunks_counts_inserts_and_deletions() -> None:
    hunks = multiline_hunks("a\nb\nc", "a\nc\nd\ne", context_lines=0)

    assert hunks.deletions == 1
    assert hunks.inserts == 2
    assert ("-", "b") in hunks.lines
    assert ("+", "e") in hunks.lines


def test_side_by_side_ignores_escape_sequences_for_width() -> None:
    styler = Styler(color=True)
    left = [styler.removed("- a: 1"), styler.removed("  bb: 2")]
    right = ["+ a: 3"]

    rows = side_by_side(left, right)

    assert visible_width(rows[0]) == len("- a: 1") + 1 + 2 + len("+ a: 3")
    assert rows[1] == left[1]


def test_plain_styler_returns_text_unchanged() -> None:
    assert Styler().added("+ x") == "+ x"
    assert Styler(color=True).added("+ x") != "+ x"

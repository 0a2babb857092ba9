from shifter.models.fragment import SelectionKind, SelectionShape
from shifter.services.text_utils import (
    case_like,
    is_comma_separated_list,
    line_bounds,
    operator_at_offset,
    reapply_selection_case,
    reduce_duplicate_lines,
    split_comma_separated,
    swap_quotes,
    swap_slashes,
    word_at_offset,
)


def test_operator_at_offset_needs_spaces_on_both_sides():
    assert operator_at_offset("a + b", 2) == (2, "+")
    assert operator_at_offset("a + b", 3) == (2, "+")
    assert operator_at_offset("a+b", 1) is None
    assert operator_at_offset("+ b", 0) is None
    assert operator_at_offset("x < y", 2) == (2, "<")


def test_word_at_offset_finds_word_around_caret():
    assert word_at_offset("foo bar", 5) == (4, "bar")
    assert word_at_offset("foo bar", 3) == (0, "foo")
    assert word_at_offset("   ", 1) is None


def test_word_at_offset_absorbs_sign_only_when_not_an_operand():
    assert word_at_offset("x = -5", 5) == (4, "-5")
    assert word_at_offset("a-3", 2) == (2, "3")
    assert word_at_offset("arr[i]-1", 7) == (7, "1")


def test_word_at_offset_hyphens_in_css_mode():
    assert word_at_offset("margin-top: 0", 3, allow_hyphens=True) == (0, "margin-top")
    assert word_at_offset("margin-top: 0", 3) == (0, "margin")


def test_word_at_offset_keeps_units_and_dates_whole():
    assert word_at_offset("width: 10px;", 8) == (7, "10px")
    assert word_at_offset("on 2024-01-31 at", 6) == (3, "2024-01-31")
    assert word_at_offset("color: #fff", 8) == (7, "#fff")


def test_swap_quotes_and_slashes():
    assert swap_quotes("'a' \"b\"") == "\"a\" 'b'"
    assert swap_slashes("a/b\\c") == "a\\b/c"


def test_case_like():
    assert case_like("TRUE", "false") == "FALSE"
    assert case_like("True", "false") == "False"
    assert case_like("true", "FALSE") == "false"
    assert case_like("42", "x") == "x"


def test_reapply_selection_case():
    assert reapply_selection_case("FOO", "bar") == "BAR"
    assert reapply_selection_case("Foo", "bar") == "Bar"
    assert reapply_selection_case("fooBar", "baz") == "Baz"
    assert reapply_selection_case("foo", "Bar") == "Bar"


def test_comma_separated_list_detection():
    assert is_comma_separated_list("a, b")
    assert is_comma_separated_list("banana,apple,cherry")
    assert not is_comma_separated_list("a")
    assert not is_comma_separated_list("a,\nb")
    assert split_comma_separated(" a,b,  c ") == ["a", "b", "c"]


def test_line_bounds_and_duplicates():
    assert line_bounds("ab\ncd", 4) == (3, 5)
    assert line_bounds("ab\ncd", 0) == (0, 2)
    assert reduce_duplicate_lines(["a", "a", "b", "a"]) == ["a", "b", "a"]


def test_selection_shape_from_ranges():
    text = "ab\ncd"
    assert SelectionShape.from_ranges(text, []).kind is SelectionKind.NONE
    assert SelectionShape.from_ranges(text, [(1, 1)]).kind is SelectionKind.NONE
    assert SelectionShape.from_ranges(text, [(0, 2)]).kind is SelectionKind.SINGLE_LINE
    assert SelectionShape.from_ranges(text, [(0, 3)]).kind is SelectionKind.SINGLE_LINE
    assert SelectionShape.from_ranges(text, [(0, 5)]).kind is SelectionKind.MULTI_LINE
    block = SelectionShape.from_ranges(text, [(4, 5), (1, 2)])
    assert block.kind is SelectionKind.COLUMNAR
    assert block.ranges == ((1, 2), (4, 5))

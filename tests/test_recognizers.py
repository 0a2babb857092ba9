import pytest

from shifter.models.fragment import Direction
from shifter.models.settings import NumberFloorPolicy, ShifterSettings, TimestampUnit
from shifter.services.errors import MalformedNumber
from shifter.services.recognizers import (
    BooleanRecognizer,
    CssUnitRecognizer,
    DateRecognizer,
    DictionaryWordRecognizer,
    HexColorRecognizer,
    LogicalOperatorRecognizer,
    NumericRecognizer,
    OperatorRecognizer,
    QuotedStringRecognizer,
    ShiftContext,
    parse_number,
    shift_number,
)

UP = Direction.UP
DOWN = Direction.DOWN


def ctx(**kwargs):
    return ShiftContext(**kwargs)


@pytest.mark.parametrize(
    "text,direction,expected",
    [
        ("9", UP, "10"),
        ("10", DOWN, "9"),
        ("007", UP, "008"),
        ("0099", UP, "0100"),
        ("1.5", UP, "2.5"),
        ("-1", UP, "0"),
        ("0", DOWN, "-1"),
        ("+3", UP, "+4"),
        (".5", DOWN, "-.5"),
    ],
)
def test_numeric_shift(text, direction, expected):
    assert NumericRecognizer().shift(text, direction, ctx()) == expected


def test_numeric_up_then_down_restores_literal():
    r = NumericRecognizer()
    for literal in ("0", "1", "-1", "42", "007", "1.25", "-0.5", "+3"):
        up = r.shift(literal, UP, ctx())
        assert r.shift(up, DOWN, ctx()) == literal


def test_numeric_without_integer_part():
    r = NumericRecognizer()
    assert r.shift(".5", UP, ctx()) == "1.5"
    for literal in (".5", ".25"):
        down = r.shift(literal, DOWN, ctx())
        assert down.startswith("-.")
        assert r.shift(down, UP, ctx()) == literal


def test_numeric_repeat():
    assert NumericRecognizer().shift("5", UP, ctx(), repeat=10) == "15"
    assert NumericRecognizer().shift("5", DOWN, ctx(), repeat=3) == "2"


def test_number_floor_policies():
    assert shift_number("0", -1, NumberFloorPolicy.CLAMP) == "0"
    assert shift_number("00", -1, NumberFloorPolicy.WRAP) == "99"
    assert shift_number("3", -1, NumberFloorPolicy.WRAP) == "2"
    # explicitly signed numbers are never floored
    assert shift_number("-0", -1, NumberFloorPolicy.CLAMP) == "-1"


def test_parse_number_rejects_garbage():
    with pytest.raises(MalformedNumber):
        parse_number("1.2.3")
    with pytest.raises(MalformedNumber):
        parse_number("-")


def test_operator_requires_spaced_context():
    r = OperatorRecognizer()
    spaced = ctx(prefix_char=" ", postfix_char=" ")
    assert r.matches("+", spaced)
    assert not r.matches("+", ctx(prefix_char="a", postfix_char=" "))
    assert r.shift("+", UP, spaced) == "-"
    assert r.shift("-", UP, spaced) == "+"
    assert r.shift("*", UP, spaced) == "/"
    assert r.shift("/", UP, spaced) == "%"
    assert r.shift("%", UP, spaced) == "*"
    assert r.shift("*", DOWN, spaced) == "%"
    assert r.shift("<", UP, spaced) == ">"


def test_css_units():
    r = CssUnitRecognizer()
    assert r.matches("10px", ctx())
    assert not r.matches("10", ctx())
    assert r.shift("10px", UP, ctx()) == "11px"
    assert r.shift("1.5em", DOWN, ctx()) == "0.5em"
    assert r.shift("0px", DOWN, ctx()) == "-1px"
    assert r.shift("50%", UP, ctx(), repeat=10) == "60%"


def test_css_units_follow_floor_policy():
    clamp = ctx(settings=ShifterSettings(number_floor=NumberFloorPolicy.CLAMP))
    assert CssUnitRecognizer().shift("0px", DOWN, clamp) == "0px"
    wrap = ctx(settings=ShifterSettings(number_floor=NumberFloorPolicy.WRAP))
    assert CssUnitRecognizer().shift("00px", DOWN, wrap) == "99px"


def test_hex_color_wraps_and_keeps_case():
    r = HexColorRecognizer()
    assert r.shift("#0a0a0a", UP, ctx()) == "#0a0a0b"
    assert r.shift("#ffffff", UP, ctx()) == "#000000"
    assert r.shift("#000", DOWN, ctx()) == "#fff"
    assert r.shift("#FFF", UP, ctx()) == "#000"
    assert r.shift("#ABC", UP, ctx()) == "#ABD"
    assert not r.matches("#abcd", ctx())


def test_quoted_string_swaps_quotes():
    r = QuotedStringRecognizer()
    assert r.matches("'abc'", ctx())
    assert not r.matches("'abc\"", ctx())
    assert r.shift("'abc'", UP, ctx()) == '"abc"'


def test_logical_operators_toggle_in_one_pass():
    r = LogicalOperatorRecognizer()
    assert r.shift("&&", UP, ctx()) == "||"
    assert r.shift("foo && bar", DOWN, ctx()) == "foo || bar"
    assert r.shift("a and b or c", UP, ctx()) == "a or b and c"
    assert r.shift("x AND y", UP, ctx()) == "x OR y"
    assert not r.matches("android", ctx())


def test_boolean_toggle_keeps_case():
    r = BooleanRecognizer()
    assert r.shift("true", UP, ctx()) == "false"
    assert r.shift("false", DOWN, ctx()) == "true"
    assert r.shift("TRUE", UP, ctx()) == "FALSE"
    assert r.shift("Yes", UP, ctx()) == "No"
    assert r.shift("true", UP, ctx(), repeat=10) == "false"
    assert r.dictionary_id("on", ctx()) == "boolean:on"


def test_dates_respect_calendar():
    r = DateRecognizer()
    assert r.shift("2024-02-28", UP, ctx()) == "2024-02-29"
    assert r.shift("2023-02-28", UP, ctx()) == "2023-03-01"
    assert r.shift("2024-12-31", UP, ctx()) == "2025-01-01"
    assert r.shift("2024-03-01", DOWN, ctx()) == "2024-02-29"
    assert not r.matches("2024-13-01", ctx())


def test_clock_times_wrap_at_midnight():
    r = DateRecognizer()
    assert r.shift("23:59:59", UP, ctx()) == "00:00:00"
    assert r.shift("12:30", DOWN, ctx()) == "12:29"
    assert r.shift("00:00", DOWN, ctx()) == "23:59"


def test_epoch_timestamps_shift_by_one_day():
    r = DateRecognizer()
    seconds = ctx(source_line="created_at = 1700000000")
    assert r.matches("1700000000", seconds)
    assert r.shift("1700000000", UP, seconds) == "1700086400"
    assert not NumericRecognizer().matches("1700000000", seconds)

    millis = ctx(
        settings=ShifterSettings(timestamp_unit=TimestampUnit.MILLISECONDS),
        source_line="timestamp: 1700000000000",
    )
    assert r.shift("1700000000000", DOWN, millis) == "1699913600000"


def test_ten_digits_without_time_context_stay_numeric():
    plain = ctx(source_line="id = 1700000000")
    assert not DateRecognizer().matches("1700000000", plain)
    assert NumericRecognizer().shift("1700000000", UP, plain) == "1700000001"


def test_time_words_must_be_whole_identifiers():
    r = DateRecognizer()
    for line in (
        "float repeat = 1234567890;",
        "validate(1234567890)",
        "that is 1234567890 sometimes",
        "format = 1234567890",
    ):
        context = ctx(source_line=line)
        assert not r.matches("1234567890", context)
        assert NumericRecognizer().shift("1234567890", UP, context) == "1234567891"
    for line in (
        "start_time = 1234567890",
        "updatedAt: 1234567890",
        "expires = 1234567890",
        "$date = 1234567890",
    ):
        assert r.matches("1234567890", ctx(source_line=line))


def test_dictionary_words():
    r = DictionaryWordRecognizer()
    assert r.shift("Monday", UP, ctx()) == "Tuesday"
    assert r.shift("Monday", DOWN, ctx()) == "Sunday"
    assert r.shift("monday", UP, ctx()) == "Tuesday"
    assert r.shift("private", UP, ctx()) == "public"
    assert r.shift("top", UP, ctx()) == "bottom"
    assert r.shift("GET", UP, ctx()) == "POST"
    assert r.dictionary_id("Monday", ctx()) == "days"


def test_dictionary_words_preserve_case_when_enabled():
    preserving = ctx(settings=ShifterSettings(preserve_case=True))
    r = DictionaryWordRecognizer()
    assert r.shift("monday", UP, preserving) == "tuesday"
    assert r.shift("MONDAY", UP, preserving) == "TUESDAY"

from shifter.models.fragment import Direction
from shifter.models.settings import ShifterSettings
from shifter.services.dictionary import (
    DAYS,
    DictionaryRegistry,
    OrderedDictionary,
    parse_user_dictionary,
    shift_cyclic,
)


def test_shift_cyclic_wraps_at_both_ends():
    terms = ("a", "b", "c")
    assert shift_cyclic(terms, 2, Direction.UP) == 0
    assert shift_cyclic(terms, 0, Direction.DOWN) == 2
    assert shift_cyclic(terms, 0, Direction.UP) == 1


def test_shift_cyclic_full_cycle_returns_to_start():
    index = 3
    for _ in DAYS:
        index = shift_cyclic(DAYS, index, Direction.UP)
    assert index == 3


def test_ordered_dictionary_build_drops_duplicates_and_blanks():
    d = OrderedDictionary.build("x", ["one", "", "two", "ONE", "three"])
    assert d.ordered_terms == ("one", "two", "three")


def test_ordered_dictionary_case_insensitive_lookup():
    d = OrderedDictionary.build("days", DAYS)
    assert d.shifted("monday", Direction.UP) == "Tuesday"
    assert d.shifted("Sunday", Direction.UP) == "Monday"
    assert d.shifted("Monday", Direction.DOWN) == "Sunday"
    assert d.shifted("Monday", Direction.UP, steps=7) == "Monday"
    assert d.shifted("noday", Direction.UP) is None


def test_case_sensitive_dictionary_requires_exact_match():
    d = OrderedDictionary.build("mods", ["public", "private"], case_sensitive=True)
    assert d.index_of("Public") is None
    assert d.shifted("public", Direction.UP) == "private"


def test_parse_user_dictionary_plain_lines_and_groups():
    parsed = parse_user_dictionary("alpha\n\nbeta\n|get|set|\ngamma\n|solo|\n")
    ids = [d.id for d in parsed]
    assert ids == ["user", "user:1"]
    assert parsed[0].ordered_terms == ("alpha", "beta", "gamma")
    assert parsed[1].ordered_terms == ("get", "set")


def test_registry_prefers_exact_match_over_case_insensitive():
    registry = DictionaryRegistry.from_settings(ShifterSettings())
    assert registry.find("GET").shifted("GET", Direction.UP) == "POST"
    assert registry.find("get").shifted("get", Direction.UP) == "set"


def test_registry_finds_builtins_and_booleans():
    registry = DictionaryRegistry.from_settings(ShifterSettings(dictionary_terms=""))
    assert registry.find("March").id == "months"
    assert registry.find("Wed").id == "days_short"
    assert registry.find("protected").id == "access_modifiers"
    assert registry.find("true") is None
    assert registry.find_boolean("TRUE") is not None


def test_short_day_and_month_names_match_exact_case_only():
    registry = DictionaryRegistry.from_settings(ShifterSettings(dictionary_terms=""))
    assert registry.find("Sun").shifted("Sun", Direction.UP) == "Mon"
    assert registry.find("Dec").shifted("Dec", Direction.UP) == "Jan"
    for word in ("sun", "sat", "wed", "dec", "mar"):
        assert registry.find(word) is None

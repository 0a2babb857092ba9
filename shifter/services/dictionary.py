from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from shifter.models.fragment import Direction
from shifter.models.settings import ShifterSettings


def shift_cyclic(terms: Sequence[str], current_index: int, direction: Direction) -> int:
    """Index of the neighbour of ``current_index``, wrapping at both ends."""
    length = len(terms)
    return (current_index + direction.step + length) % length


@dataclass(frozen=True)
class OrderedDictionary:
    """A fixed, cyclic list of terms such as weekdays or access modifiers."""

    id: str
    ordered_terms: Tuple[str, ...]
    case_sensitive: bool = False
    cyclic: bool = True

    @classmethod
    def build(
        cls, dictionary_id: str, terms: Iterable[str], case_sensitive: bool = False
    ) -> "OrderedDictionary":
        seen = set()
        unique: List[str] = []
        for term in terms:
            key = term if case_sensitive else term.lower()
            if not term or key in seen:
                continue
            seen.add(key)
            unique.append(term)
        return cls(id=dictionary_id, ordered_terms=tuple(unique), case_sensitive=case_sensitive)

    def index_of(self, word: str) -> Optional[int]:
        for i, term in enumerate(self.ordered_terms):
            if term == word:
                return i
        if self.case_sensitive:
            return None
        lowered = word.lower()
        for i, term in enumerate(self.ordered_terms):
            if term.lower() == lowered:
                return i
        return None

    def has_word(self, word: str) -> bool:
        return len(self.ordered_terms) > 1 and self.index_of(word) is not None

    def shifted(self, word: str, direction: Direction, steps: int = 1) -> Optional[str]:
        index = self.index_of(word)
        if index is None or len(self.ordered_terms) < 2:
            return None
        for _ in range(max(1, steps)):
            index = shift_cyclic(self.ordered_terms, index, direction)
        return self.ordered_terms[index]


BOOLEAN_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("true", "false"),
    ("yes", "no"),
    ("on", "off"),
    ("enabled", "disabled"),
    ("enable", "disable"),
    ("show", "hide"),
    ("visible", "hidden"),
)

DAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

ACCESS_MODIFIERS = ("public", "protected", "private")


def _builtin_dictionaries() -> List[OrderedDictionary]:
    return [
        OrderedDictionary.build("days", DAYS),
        OrderedDictionary.build("days_short", (d[:3] for d in DAYS), case_sensitive=True),
        OrderedDictionary.build("months", MONTHS),
        OrderedDictionary.build("months_short", (m[:3] for m in MONTHS), case_sensitive=True),
        OrderedDictionary.build("access_modifiers", ACCESS_MODIFIERS),
    ]


def parse_user_dictionary(text: str) -> List[OrderedDictionary]:
    """Parse newline-delimited user terms.

    Plain lines together form one list named ``user``; a line like
    ``|get|set|`` defines its own list. Blank lines are ignored.
    """
    plain: List[str] = []
    groups: List[OrderedDictionary] = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("|") and line.endswith("|") and len(line) > 2:
            terms = [t.strip() for t in line.strip("|").split("|")]
            group = OrderedDictionary.build(
                f"user:{len(groups) + 1}", terms
            )
            if len(group.ordered_terms) > 1:
                groups.append(group)
            continue
        plain.append(line)
    result: List[OrderedDictionary] = []
    if len(plain) > 1:
        result.append(OrderedDictionary.build("user", plain))
    result.extend(groups)
    return result


class DictionaryRegistry:
    """Read-only set of dictionaries consulted by the word recognizers.

    Boolean pairs are kept apart from the generic lists because they are
    tried earlier and always keep the original word's casing.
    """

    def __init__(
        self,
        dictionaries: Sequence[OrderedDictionary],
        booleans: Optional[Sequence[OrderedDictionary]] = None,
    ) -> None:
        self._dictionaries: Tuple[OrderedDictionary, ...] = tuple(dictionaries)
        self._booleans: Tuple[OrderedDictionary, ...] = tuple(
            booleans
            if booleans is not None
            else (OrderedDictionary.build(f"boolean:{a}", (a, b)) for a, b in BOOLEAN_PAIRS)
        )

    @classmethod
    def from_settings(cls, settings: ShifterSettings) -> "DictionaryRegistry":
        return _registry_for_terms(settings.dictionary_terms)

    def find(self, word: str) -> Optional[OrderedDictionary]:
        # An exact hit anywhere beats a case-insensitive hit in an earlier list
        for dictionary in self._dictionaries:
            if len(dictionary.ordered_terms) > 1 and word in dictionary.ordered_terms:
                return dictionary
        for dictionary in self._dictionaries:
            if dictionary.has_word(word):
                return dictionary
        return None

    def find_boolean(self, word: str) -> Optional[OrderedDictionary]:
        for dictionary in self._booleans:
            if dictionary.has_word(word):
                return dictionary
        return None


@lru_cache(maxsize=8)
def _registry_for_terms(terms: str) -> DictionaryRegistry:
    # user lists first: an explicit user ordering wins over the built-ins
    return DictionaryRegistry([*parse_user_dictionary(terms), *_builtin_dictionaries()])

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from shifter.models.settings import ShifterSettings


class Direction(Enum):
    UP = "up"
    DOWN = "down"

    @property
    def step(self) -> int:
        return 1 if self is Direction.UP else -1

    @property
    def is_up(self) -> bool:
        return self is Direction.UP


class TypeTag(Enum):
    NUMERIC = "numeric"
    CSS_UNIT = "css_unit"
    HEX_COLOR = "hex_color"
    QUOTED_STRING = "quoted_string"
    OPERATOR = "operator"
    LOGICAL_OPERATOR = "logical_operator"
    BOOLEAN = "boolean"
    DICTIONARY_WORD = "dictionary_word"
    DATE_OR_TIMESTAMP = "date_or_timestamp"
    PHP_VARIABLE = "php_variable"
    JS_VARIABLE_DECLARATION_LIST = "js_variable_declaration_list"
    SIZZLE_SELECTOR = "sizzle_selector"
    TERNARY_EXPRESSION = "ternary_expression"
    TRAILING_COMMENT = "trailing_comment"
    HTML_ENCODABLE = "html_encodable"
    COMMA_SEPARATED_LIST = "comma_separated_list"
    PLAIN_LINE = "plain_line"


@dataclass(frozen=True)
class Fragment:
    """A classified span of text.

    Attributes:
        text: The fragment as found in the buffer.
        kind: Tag assigned by the first recognizer that matched.
        prefix_char: Character right before the fragment, if any.
        postfix_char: Character right after the fragment, if any.
        source_line: The line the fragment was taken from.
        file_extension: Extension of the edited file, lower-cased, without dot.
        dictionary_id: Set for dictionary words, names the list the word was found in.
    """

    text: str
    kind: TypeTag
    prefix_char: Optional[str] = None
    postfix_char: Optional[str] = None
    source_line: str = ""
    file_extension: Optional[str] = None
    dictionary_id: Optional[str] = None


@dataclass(frozen=True)
class ShiftRequest:
    direction: Direction
    repeat: Optional[int] = None

    @property
    def amount(self) -> int:
        return self.repeat if self.repeat and self.repeat > 0 else 1

    @classmethod
    def more(cls, direction: Direction, settings: "ShifterSettings") -> "ShiftRequest":
        return cls(direction=direction, repeat=settings.shift_more_size)


class SelectionKind(Enum):
    NONE = "none"
    SINGLE_LINE = "single_line"
    MULTI_LINE = "multi_line"
    COLUMNAR = "columnar"


@dataclass(frozen=True)
class SelectionShape:
    """Selection as reported by the host; ranges are (start, end) offsets."""

    kind: SelectionKind
    ranges: Tuple[Tuple[int, int], ...] = ()

    @classmethod
    def from_ranges(
        cls, text: str, ranges: List[Tuple[int, int]]
    ) -> "SelectionShape":
        spans = tuple(
            (min(s, e), max(s, e)) for s, e in ranges if s != e
        )
        if not spans:
            return cls(SelectionKind.NONE)
        if len(spans) > 1:
            return cls(SelectionKind.COLUMNAR, tuple(sorted(spans)))
        start, end = spans[0]
        if "\n" in text[start:end].rstrip("\n"):
            return cls(SelectionKind.MULTI_LINE, spans)
        return cls(SelectionKind.SINGLE_LINE, spans)


@dataclass(frozen=True)
class Replacement:
    start: int
    end: int
    text: str


@dataclass
class ShiftResult:
    """Outcome of one shift request; empty replacements means the buffer stays as is."""

    replacements: List[Replacement] = field(default_factory=list)
    kind: Optional[TypeTag] = None

    @property
    def changed(self) -> bool:
        return bool(self.replacements)

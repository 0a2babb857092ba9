from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class SortCaseMode(Enum):
    CASE_SENSITIVE = "case_sensitive"
    CASE_INSENSITIVE = "case_insensitive"


class TimestampUnit(Enum):
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


class NumberFloorPolicy(Enum):
    """What happens when an unsigned number is shifted below zero."""

    ALLOW_NEGATIVE = "allow_negative"
    CLAMP = "clamp"
    WRAP = "wrap"


SHIFT_MORE_MIN = 2
SHIFT_MORE_MAX = 999
DEFAULT_SHIFT_MORE_SIZE = 10

# Factory user dictionary; every |..|..| line is its own cyclic term group
DEFAULT_TERMS = """\
|absolute|relative|fixed|static|sticky|
|add|remove|
|asc|desc|
|before|after|
|block|inline|inline-block|flex|grid|none|
|div|span|
|first|last|
|get|set|
|GET|POST|PUT|PATCH|DELETE|
|h1|h2|h3|h4|h5|h6|
|height|width|
|horizontal|vertical|
|include|require|
|left|right|
|margin|padding|
|max|min|
|ol|ul|
|previous|next|
|row|column|
|top|bottom|
"""


@dataclass(frozen=True)
class ShifterSettings:
    """Immutable snapshot of user preferences, read once per shift operation.

    Attributes:
        sort_case_mode: Whether sorting lines and list items respects case.
        shift_more_size: Step count used by "shift more" requests (2..999).
        timestamp_unit: Unit UNIX timestamps in the buffer are written in.
        preserve_case: Reapply the original word's case pattern to dictionary results.
        number_floor: Behavior when an unsigned number would go below zero.
        dictionary_terms: Newline-delimited user dictionary.
    """

    sort_case_mode: SortCaseMode = SortCaseMode.CASE_INSENSITIVE
    shift_more_size: int = DEFAULT_SHIFT_MORE_SIZE
    timestamp_unit: TimestampUnit = TimestampUnit.SECONDS
    preserve_case: bool = False
    number_floor: NumberFloorPolicy = NumberFloorPolicy.ALLOW_NEGATIVE
    dictionary_terms: str = DEFAULT_TERMS

    def __post_init__(self) -> None:
        size = max(SHIFT_MORE_MIN, min(SHIFT_MORE_MAX, int(self.shift_more_size)))
        object.__setattr__(self, "shift_more_size", size)

    @property
    def case_sensitive_sort(self) -> bool:
        return self.sort_case_mode is SortCaseMode.CASE_SENSITIVE

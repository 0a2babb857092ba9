from __future__ import annotations
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from shifter.models.fragment import Direction, TypeTag
from shifter.models.settings import NumberFloorPolicy, ShifterSettings, TimestampUnit
from shifter.services.dictionary import DictionaryRegistry, shift_cyclic
from shifter.services.errors import MalformedNumber
from shifter.services.text_utils import OPERATOR_CHARS, case_like, swap_quotes


@dataclass(frozen=True)
class ShiftContext:
    """Everything a recognizer may look at besides the fragment text itself."""

    settings: ShifterSettings = field(default_factory=ShifterSettings)
    dictionaries: Optional[DictionaryRegistry] = None
    file_extension: Optional[str] = None
    source_line: str = ""
    buffer_text: str = ""
    prefix_char: Optional[str] = None
    postfix_char: Optional[str] = None

    @property
    def registry(self) -> DictionaryRegistry:
        return self.dictionaries or DictionaryRegistry.from_settings(self.settings)


class Recognizer:
    """Detects one kind of value and computes its successor / predecessor.

    ``matches`` never raises. ``shift`` returns ``None`` when the value
    cannot be shifted.
    """

    tag: TypeTag

    def matches(self, text: str, context: ShiftContext) -> bool:
        raise NotImplementedError

    def shift(
        self,
        text: str,
        direction: Direction,
        context: ShiftContext,
        repeat: Optional[int] = None,
    ) -> Optional[str]:
        raise NotImplementedError

    def dictionary_id(self, text: str, context: ShiftContext) -> Optional[str]:
        return None


def _amount(repeat: Optional[int]) -> int:
    return repeat if repeat and repeat > 0 else 1


# ---------- Numbers ----------
_re_numeric = re.compile(r"^([-+]?)(\d*)(?:\.(\d+))?$")


def parse_number(text: str) -> Tuple[str, str, str, Decimal]:
    """Split ``text`` into sign, integer digits, fraction digits and value."""
    m = _re_numeric.match(text)
    if not m or not (m.group(2) or m.group(3)):
        raise MalformedNumber(f"not a number: {text!r}")
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise MalformedNumber(f"not a number: {text!r}") from exc
    return m.group(1), m.group(2), m.group(3) or "", value


def format_number(
    value: Decimal, int_digits: str, frac_digits: str, sign: str
) -> str:
    """Format ``value`` like the original literal: same fraction length, same zero padding."""
    negative = value < 0
    magnitude = abs(value)
    places = len(frac_digits)
    rendered = f"{magnitude:.{places}f}" if places else str(int(magnitude))
    int_part, _, frac_part = rendered.partition(".")
    if len(int_digits) > 1 and int_digits.startswith("0"):
        int_part = int_part.zfill(len(int_digits))
    elif not int_digits and int_part == "0" and places:
        int_part = ""
    body = f"{int_part}.{frac_part}" if places else int_part
    if negative:
        return "-" + body
    return ("+" + body) if sign == "+" else body


def shift_number(
    text: str,
    delta: int,
    floor: NumberFloorPolicy = NumberFloorPolicy.ALLOW_NEGATIVE,
) -> str:
    sign, int_digits, frac_digits, value = parse_number(text)
    shifted = value + delta
    if shifted < 0 and sign == "" and value >= 0:
        if floor is NumberFloorPolicy.CLAMP:
            shifted = Decimal(0)
        elif floor is NumberFloorPolicy.WRAP:
            modulus = Decimal(10) ** max(1, len(int_digits))
            while shifted < 0:
                shifted += modulus
    return format_number(shifted, int_digits, frac_digits, sign)


# whole identifiers like `created`, `start_time`, `updatedAt`; not `validate` or `format`
_re_time_context = re.compile(
    r"(?i:(?:\b|_)(?:time(?:stamp)?|date|created|updated|modified|expires?)\w*|_at\b)"
    r"|[a-z](?:At|Time|Date)\b"
)


def is_epoch_timestamp(text: str, context: ShiftContext) -> bool:
    digits = 13 if context.settings.timestamp_unit is TimestampUnit.MILLISECONDS else 10
    return (
        len(text) == digits
        and text.isdigit()
        and bool(_re_time_context.search(context.source_line or ""))
    )


class OperatorRecognizer(Recognizer):
    """A single-char arithmetic or comparison operator flanked by spaces."""

    tag = TypeTag.OPERATOR
    _groups = (("+", "-"), ("*", "/", "%"), ("<", ">"))

    def matches(self, text: str, context: ShiftContext) -> bool:
        return (
            len(text) == 1
            and text in OPERATOR_CHARS
            and context.prefix_char == " "
            and context.postfix_char == " "
        )

    def shift(self, text, direction, context, repeat=None):
        for group in self._groups:
            if text in group:
                return group[shift_cyclic(group, group.index(text), direction)]
        return None


class NumericRecognizer(Recognizer):
    tag = TypeTag.NUMERIC

    def matches(self, text: str, context: ShiftContext) -> bool:
        if not _re_numeric.match(text) or not any(c.isdigit() for c in text):
            return False
        return not is_epoch_timestamp(text, context)

    def shift(self, text, direction, context, repeat=None):
        try:
            return shift_number(
                text, direction.step * _amount(repeat), context.settings.number_floor
            )
        except MalformedNumber:
            return None


class CssUnitRecognizer(Recognizer):
    tag = TypeTag.CSS_UNIT
    UNITS = (
        "px", "em", "rem", "%", "vh", "vw", "vmin", "vmax", "pt", "pc",
        "cm", "mm", "in", "ex", "ch", "deg", "rad", "turn", "s", "ms", "fr",
    )
    _re_unit = re.compile(
        r"^([-+]?(?:\d+(?:\.\d+)?|\.\d+))(" + "|".join(map(re.escape, UNITS)) + r")$"
    )

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_unit.match(text))

    def shift(self, text, direction, context, repeat=None):
        m = self._re_unit.match(text)
        if not m:
            return None
        try:
            number = shift_number(
                m.group(1), direction.step * _amount(repeat), context.settings.number_floor
            )
        except MalformedNumber:
            return None
        return number + m.group(2)


class HexColorRecognizer(Recognizer):
    tag = TypeTag.HEX_COLOR
    _re_hex = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_hex.match(text))

    def shift(self, text, direction, context, repeat=None):
        m = self._re_hex.match(text)
        if not m:
            return None
        digits = m.group(1)
        modulus = 16 ** len(digits)
        value = (int(digits, 16) + direction.step * _amount(repeat)) % modulus
        rendered = f"{value:0{len(digits)}x}"
        if any(c.isupper() for c in digits):
            rendered = rendered.upper()
        return "#" + rendered


class QuotedStringRecognizer(Recognizer):
    """A complete quoted string; shifting swaps its quote style."""

    tag = TypeTag.QUOTED_STRING
    _re_quoted = re.compile(r"^(['\"]).*\1$", re.DOTALL)

    def matches(self, text: str, context: ShiftContext) -> bool:
        return len(text) >= 2 and bool(self._re_quoted.match(text))

    def shift(self, text, direction, context, repeat=None):
        return swap_quotes(text)


class LogicalOperatorRecognizer(Recognizer):
    tag = TypeTag.LOGICAL_OPERATOR
    PAIRS = {"&&": "||", "||": "&&", "and": "or", "or": "and", "AND": "OR", "OR": "AND"}
    _re_logical = re.compile(r"&&|\|\||\b(?:and|or|AND|OR)\b")

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_logical.search(text))

    def shift(self, text, direction, context, repeat=None):
        # Toggle every operator in one pass so swapped ones are not swapped back
        return self._re_logical.sub(lambda m: self.PAIRS[m.group(0)], text)


class BooleanRecognizer(Recognizer):
    tag = TypeTag.BOOLEAN

    def matches(self, text: str, context: ShiftContext) -> bool:
        return context.registry.find_boolean(text) is not None

    def shift(self, text, direction, context, repeat=None):
        dictionary = context.registry.find_boolean(text)
        if dictionary is None:
            return None
        result = dictionary.shifted(text, direction)
        return case_like(text, result) if result is not None else None

    def dictionary_id(self, text, context):
        dictionary = context.registry.find_boolean(text)
        return dictionary.id if dictionary else None


class DateRecognizer(Recognizer):
    """ISO dates shift by days, clock times by seconds, UNIX timestamps by one day."""

    tag = TypeTag.DATE_OR_TIMESTAMP
    _re_date = re.compile(r"^\d{4}-\d{2}-\d{2}$")
    _re_time = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")

    def matches(self, text: str, context: ShiftContext) -> bool:
        if self._re_date.match(text):
            return self._parse(text, "%Y-%m-%d") is not None
        if self._re_time.match(text):
            return self._parse(text, self._time_format(text)) is not None
        return is_epoch_timestamp(text, context)

    def shift(self, text, direction, context, repeat=None):
        delta = direction.step * _amount(repeat)
        if self._re_date.match(text):
            parsed = self._parse(text, "%Y-%m-%d")
            if parsed is None:
                return None
            try:
                return (parsed + timedelta(days=delta)).strftime("%Y-%m-%d")
            except OverflowError:
                return None
        if self._re_time.match(text):
            fmt = self._time_format(text)
            parsed = self._parse(text, fmt)
            if parsed is None:
                return None
            unit = timedelta(seconds=1) if fmt.endswith("%S") else timedelta(minutes=1)
            # wraps at midnight: only the clock part is rendered
            return (parsed + unit * delta).strftime(fmt)
        if is_epoch_timestamp(text, context):
            day = 86400
            if context.settings.timestamp_unit is TimestampUnit.MILLISECONDS:
                day *= 1000
            return str(max(0, int(text) + delta * day))
        return None

    @staticmethod
    def _time_format(text: str) -> str:
        return "%H:%M:%S" if text.count(":") == 2 else "%H:%M"

    @staticmethod
    def _parse(text: str, fmt: str) -> Optional[datetime]:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            return None
        if fmt.startswith("%H"):
            parsed = parsed.replace(year=2000, month=1, day=1)
        return parsed


class DictionaryWordRecognizer(Recognizer):
    tag = TypeTag.DICTIONARY_WORD

    def matches(self, text: str, context: ShiftContext) -> bool:
        return context.registry.find(text) is not None

    def shift(self, text, direction, context, repeat=None):
        dictionary = context.registry.find(text)
        if dictionary is None:
            return None
        result = dictionary.shifted(text, direction, _amount(repeat))
        if result is None:
            return None
        if context.settings.preserve_case:
            return case_like(text, result)
        return result

    def dictionary_id(self, text, context):
        dictionary = context.registry.find(text)
        return dictionary.id if dictionary else None

from __future__ import annotations
import re
from typing import Iterable, List, Optional, Tuple


OPERATOR_CHARS = "+-*/%<>"

# Alternatives are ordered: longer, more specific tokens first
_TOKEN_PARTS = (
    r"\d{4}-\d{2}-\d{2}",
    r"\d{2}:\d{2}(?::\d{2})?",
    r"#[0-9A-Fa-f]+\b",
    r"\d+(?:\.\d+)?(?:%|[A-Za-z]+)?",
    r"\.\d+(?:%|[A-Za-z]+)?",
    r"\$?[A-Za-z_][\w]*",
)
_CSS_TOKEN_PARTS = _TOKEN_PARTS[:-1] + (r"\$?-{0,2}[A-Za-z_][\w-]*",)

_re_token = re.compile("|".join(_TOKEN_PARTS))
_re_css_token = re.compile("|".join(_CSS_TOKEN_PARTS))
_re_numeric_like = re.compile(r"^\.?\d")
_re_comma_list = re.compile(r"^[^,\n]+(?:,[^,\n]*)+$")


# ---------- Case patterns ----------
def is_all_uppercase(text: str) -> bool:
    return any(c.isalpha() for c in text) and text == text.upper()


def is_all_lowercase(text: str) -> bool:
    return any(c.isalpha() for c in text) and text == text.lower()


def is_uc_first(text: str) -> bool:
    if not text:
        return True
    return text[0].isupper() and not is_all_uppercase(text)


def is_camel_case(text: str) -> bool:
    return bool(re.match(r"^[a-z]+[A-Z][A-Za-z0-9]*$", text))


def to_uc_first(text: str) -> str:
    return text[:1].upper() + text[1:].lower() if text else text


def case_like(sample: str, replacement: str) -> str:
    """Reapply the case pattern of ``sample`` (upper, lower, capitalized) to ``replacement``."""
    if not sample or not any(c.isalpha() for c in sample):
        return replacement
    if is_all_uppercase(sample):
        return replacement.upper()
    if is_all_lowercase(sample):
        return replacement.lower()
    return replacement[:1].upper() + replacement[1:] if sample[0].isupper() else replacement


def reapply_selection_case(original: str, shifted: str) -> str:
    # camelCase input falls back to capitalized output; no camelCase re-casing
    if is_all_uppercase(original):
        return shifted.upper()
    if is_camel_case(original) or is_uc_first(original):
        return to_uc_first(shifted)
    return shifted


# ---------- Swapping ----------
def contains_any_quotes(text: str) -> bool:
    return "'" in text or '"' in text


def contains_any_slashes(text: str) -> bool:
    return "/" in text or "\\" in text


def swap_quotes(text: str) -> str:
    return text.translate(str.maketrans({"'": '"', '"': "'"}))


def swap_slashes(text: str) -> str:
    return text.translate(str.maketrans({"/": "\\", "\\": "/"}))


def is_comma_separated_list(text: str) -> bool:
    return "\n" not in text.strip() and bool(_re_comma_list.match(text.strip()))


def split_comma_separated(text: str) -> List[str]:
    return re.split(r",\s*", text.strip())


# ---------- Offsets ----------
def char_before(text: str, offset: int) -> Optional[str]:
    return text[offset - 1] if 0 < offset <= len(text) else None


def char_after(text: str, offset: int) -> Optional[str]:
    return text[offset] if 0 <= offset < len(text) else None


def operator_at_offset(text: str, offset: int) -> Optional[Tuple[int, str]]:
    """Single-char operator touching ``offset`` and flanked by spaces on both sides."""
    for start in (offset, offset - 1):
        if 0 < start < len(text) - 1 and text[start] in OPERATOR_CHARS:
            if text[start - 1] == " " and text[start + 1] == " ":
                return start, text[start]
    return None


def word_at_offset(
    text: str, offset: int, allow_hyphens: bool = False
) -> Optional[Tuple[int, str]]:
    """Token touching ``offset`` as ``(start, word)``.

    Hyphens count as part of a word only when ``allow_hyphens`` is set
    (CSS-like files). A ``-`` right before a number is taken as its sign
    unless it follows an operand.
    """
    if offset < 0 or offset > len(text):
        return None
    pattern = _re_css_token if allow_hyphens else _re_token
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    found: Optional[Tuple[int, str]] = None
    for m in pattern.finditer(text, line_start, line_end):
        if m.start() <= offset < m.end():
            found = (m.start(), m.group(0))
            break
        if m.end() == offset:
            found = (m.start(), m.group(0))
        elif m.start() > offset:
            break
    if found is None:
        return None
    start, word = found
    if _re_numeric_like.match(word) and start > 0 and text[start - 1] == "-":
        before = text[start - 2] if start > 1 else ""
        if not (before.isalnum() or before in "_)]"):
            return start - 1, "-" + word
    return found


def line_bounds(text: str, offset: int) -> Tuple[int, int]:
    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    return start, (len(text) if end == -1 else end)


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def has_adjacent_duplicates(lines: Iterable[str]) -> bool:
    previous = None
    for i, line in enumerate(lines):
        if i and line == previous:
            return True
        previous = line
    return False


def reduce_duplicate_lines(lines: Iterable[str]) -> List[str]:
    reduced: List[str] = []
    for line in lines:
        if reduced and reduced[-1] == line:
            continue
        reduced.append(line)
    return reduced

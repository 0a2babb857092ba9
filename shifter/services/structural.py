from __future__ import annotations
import html
import re
from typing import List, Optional

from shifter.models.fragment import Direction, TypeTag
from shifter.services.dictionary import shift_cyclic
from shifter.services.language import is_javascript, is_php
from shifter.services.recognizers import Recognizer, ShiftContext
from shifter.services.text_utils import leading_whitespace


class PhpVariableRecognizer(Recognizer):
    """``$name`` shifts to the alphabetically adjacent variable used in the buffer."""

    tag = TypeTag.PHP_VARIABLE
    _re_variable = re.compile(r"^\$[A-Za-z_]\w*$")
    _re_all_variables = re.compile(r"\$[A-Za-z_]\w*")

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_variable.match(text))

    def shift(self, text, direction, context, repeat=None):
        names = set(self._re_all_variables.findall(context.buffer_text or ""))
        names.add(text)
        ordered = sorted(names, key=lambda n: (n.lower(), n))
        if len(ordered) < 2:
            return None
        index = ordered.index(text)
        for _ in range(repeat if repeat and repeat > 0 else 1):
            index = shift_cyclic(ordered, index, direction)
        return ordered[index]


class JsVariableDeclarationsRecognizer(Recognizer):
    """Toggles between one declaration per line and a single comma-joined declaration.

    ``var a = 1;`` / ``var b = 2;`` becomes ``var a = 1,`` / ``    b = 2;`` and back.
    """

    tag = TypeTag.JS_VARIABLE_DECLARATION_LIST
    _re_single = re.compile(r"^(var|let|const)\s+([\w$].*?);$")
    _re_opening = re.compile(r"^(var|let|const)\s+([\w$].*),$")

    def matches(self, text: str, context: ShiftContext) -> bool:
        if context.file_extension and not is_javascript(context.file_extension):
            return False
        lines = [line.strip() for line in text.strip().splitlines()]
        if len(lines) < 2:
            return False
        return self._is_separate(lines) or self._is_joined(lines)

    def _is_separate(self, lines: List[str]) -> bool:
        keywords = set()
        for line in lines:
            m = self._re_single.match(line)
            if not m or m.group(2).rstrip().endswith(","):
                return False
            keywords.add(m.group(1))
        return len(keywords) == 1

    def _is_joined(self, lines: List[str]) -> bool:
        if not self._re_opening.match(lines[0]):
            return False
        middle_ok = all(line.endswith(",") for line in lines[1:-1])
        return middle_ok and lines[-1].endswith(";")

    def shift(self, text, direction, context, repeat=None):
        raw_lines = text.strip("\n").splitlines()
        lines = [line.strip() for line in raw_lines]
        if len(lines) < 2:
            return None
        indent = leading_whitespace(raw_lines[0])
        trailing = "\n" if text.endswith("\n") else ""
        if self._is_separate(lines):
            keyword = self._re_single.match(lines[0]).group(1)
            parts = [self._re_single.match(line).group(2).strip() for line in lines]
            continuation = ",\n" + indent + " " * (len(keyword) + 1)
            return f"{indent}{keyword} {continuation.join(parts)};{trailing}"
        if self._is_joined(lines):
            m = self._re_opening.match(lines[0])
            keyword = m.group(1)
            parts = [m.group(2).strip()] + [line.rstrip(",;").strip() for line in lines[1:]]
            return "\n".join(f"{indent}{keyword} {p};" for p in parts) + trailing
        return None


class SizzleSelectorRecognizer(Recognizer):
    """jQuery/Sizzle selector calls toggle to their DOM API counterparts."""

    tag = TypeTag.SIZZLE_SELECTOR
    _re_sizzle = re.compile(r"^(\$|jQuery)\((['\"])([#.]?)([\w-]+)\2\)$")
    _re_dom = re.compile(
        r"^document\.(getElementById|getElementsByClassName|getElementsByTagName)"
        r"\((['\"])([\w-]+)\2\)$"
    )
    _to_dom = {"#": "getElementById", ".": "getElementsByClassName", "": "getElementsByTagName"}
    _to_sizzle = {v: k for k, v in _to_dom.items()}

    def matches(self, text: str, context: ShiftContext) -> bool:
        stripped = text.strip()
        return bool(self._re_sizzle.match(stripped) or self._re_dom.match(stripped))

    def shift(self, text, direction, context, repeat=None):
        stripped = text.strip()
        m = self._re_sizzle.match(stripped)
        if m:
            quote, prefix, name = m.group(2), m.group(3), m.group(4)
            shifted = f"document.{self._to_dom[prefix]}({quote}{name}{quote})"
        else:
            m = self._re_dom.match(stripped)
            if not m:
                return None
            method, quote, name = m.group(1), m.group(2), m.group(3)
            shifted = f"$({quote}{self._to_sizzle[method]}{name}{quote})"
        return text.replace(stripped, shifted, 1)


class TernaryExpressionRecognizer(Recognizer):
    """``cond ? a : b`` swaps its two branches."""

    tag = TypeTag.TERNARY_EXPRESSION
    _re_ternary = re.compile(r"^(\s*)(.+?\s\?\s*)(.+?)(\s*:\s)(.+?)(\s*;?\s*)$", re.DOTALL)

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_ternary.match(text))

    def shift(self, text, direction, context, repeat=None):
        m = self._re_ternary.match(text)
        if not m:
            return None
        indent, head, first, colon, second, tail = m.groups()
        return f"{indent}{head}{second}{colon}{first}{tail}"


class TrailingCommentRecognizer(Recognizer):
    """A comment trailing code on its line; shifting moves it onto its own line above.

    The result replaces the whole source line, not just the comment.
    """

    tag = TypeTag.TRAILING_COMMENT
    _markers = ("//", "/*")

    def matches(self, text: str, context: ShiftContext) -> bool:
        comment = text.strip()
        if not comment.startswith(self._markers):
            return False
        line = context.source_line or ""
        index = line.find(comment)
        return index > 0 and bool(line[:index].strip())

    def shift(self, text, direction, context, repeat=None):
        comment = text.strip()
        line = context.source_line or ""
        index = line.find(comment)
        if index <= 0:
            return None
        code = line[:index].strip()
        if not code:
            return None
        indent = leading_whitespace(line)
        rest = line[index + len(comment):].strip()
        if rest:
            comment = f"{comment} {rest}"
        return f"{indent}{comment}\n{indent}{code}"


class HtmlEncodableRecognizer(Recognizer):
    """Text with HTML special characters toggles between raw and entity-encoded form."""

    tag = TypeTag.HTML_ENCODABLE
    _re_entity = re.compile(r"&(?:[A-Za-z]+|#\d+|#x[0-9A-Fa-f]+);")
    _re_raw = re.compile(r"[<>\"]|&(?!(?:[A-Za-z]+|#\d+|#x[0-9A-Fa-f]+);)")

    def matches(self, text: str, context: ShiftContext) -> bool:
        return bool(self._re_entity.search(text) or self._re_raw.search(text))

    def shift(self, text, direction, context, repeat=None):
        if self._re_entity.search(text):
            return html.unescape(text)
        return html.escape(text, quote=False).replace('"', "&quot;")


class PhpConcatenation:
    """A PHP expression made of exactly two operands joined by ``.``."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._split = self._find_split(text)

    def is_php_concatenation(self) -> bool:
        return self._split is not None

    def shifted(self) -> Optional[str]:
        if self._split is None:
            return None
        start, end = self._split
        lead = leading_whitespace(self.text)
        tail = self.text[len(self.text.rstrip()):]
        left = self.text[:start].strip()
        right = self.text[end:].strip()
        semicolon = ""
        if right.endswith(";"):
            right, semicolon = right[:-1].rstrip(), ";"
        return f"{lead}{right}{self.text[start:end]}{left}{semicolon}{tail}"

    @staticmethod
    def _find_split(text: str) -> Optional[tuple]:
        quote = None
        dots = []
        i = 0
        while i < len(text):
            c = text[i]
            if quote:
                if c == "\\":
                    i += 2
                    continue
                if c == quote:
                    quote = None
            elif c in "'\"":
                quote = c
            elif c == "." and not (
                i > 0 and text[i - 1].isdigit() and i + 1 < len(text) and text[i + 1].isdigit()
            ):
                if i + 1 < len(text) and text[i + 1] == "=":
                    return None
                dots.append(i)
            i += 1
        if len(dots) != 1:
            return None
        dot = dots[0]
        start = dot
        while start > 0 and text[start - 1] == " ":
            start -= 1
        end = dot + 1
        while end < len(text) and text[end] == " ":
            end += 1
        if not text[:start].strip() or not text[end:].strip(" ;\n"):
            return None
        return start, end


def php_concatenation_applies(text: str, context: ShiftContext) -> bool:
    return is_php(context.file_extension) and PhpConcatenation(text).is_php_concatenation()

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from shifter.models.fragment import Fragment, ShiftRequest, TypeTag
from shifter.models.settings import ShifterSettings
from shifter.services.dictionary import DictionaryRegistry
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
    Recognizer,
    ShiftContext,
)
from shifter.services.structural import (
    HtmlEncodableRecognizer,
    JsVariableDeclarationsRecognizer,
    PhpVariableRecognizer,
    SizzleSelectorRecognizer,
    TernaryExpressionRecognizer,
    TrailingCommentRecognizer,
)

logger = logging.getLogger(__name__)


def default_recognizers() -> Tuple[Recognizer, ...]:
    """Recognizers in priority order; the first match classifies a fragment."""
    return (
        OperatorRecognizer(),
        NumericRecognizer(),
        CssUnitRecognizer(),
        HexColorRecognizer(),
        QuotedStringRecognizer(),
        LogicalOperatorRecognizer(),
        BooleanRecognizer(),
        DateRecognizer(),
        DictionaryWordRecognizer(),
        PhpVariableRecognizer(),
        JsVariableDeclarationsRecognizer(),
        SizzleSelectorRecognizer(),
        TernaryExpressionRecognizer(),
        TrailingCommentRecognizer(),
        HtmlEncodableRecognizer(),
    )


@dataclass(frozen=True)
class ShiftOutcome:
    fragment: Fragment
    text: str


class ShiftEngine:
    """Classifies fragments and computes their shifted value.

    Stateless apart from the settings snapshot and the read-only
    dictionaries it was built with.
    """

    _re_line_word = re.compile(r"\S+")
    _punctuation = ";,:()[]{}"

    def __init__(
        self,
        settings: Optional[ShifterSettings] = None,
        recognizers: Optional[Sequence[Recognizer]] = None,
        dictionaries: Optional[DictionaryRegistry] = None,
    ) -> None:
        self.settings = settings or ShifterSettings()
        self.recognizers: Tuple[Recognizer, ...] = tuple(recognizers or default_recognizers())
        self.dictionaries = dictionaries or DictionaryRegistry.from_settings(self.settings)
        self._by_tag = {r.tag: r for r in self.recognizers}
        self._html = HtmlEncodableRecognizer()

    def context(
        self,
        file_extension: Optional[str] = None,
        source_line: str = "",
        buffer_text: str = "",
        prefix_char: Optional[str] = None,
        postfix_char: Optional[str] = None,
    ) -> ShiftContext:
        return ShiftContext(
            settings=self.settings,
            dictionaries=self.dictionaries,
            file_extension=file_extension,
            source_line=source_line,
            buffer_text=buffer_text,
            prefix_char=prefix_char,
            postfix_char=postfix_char,
        )

    def recognizer_for(self, tag: TypeTag) -> Optional[Recognizer]:
        return self._by_tag.get(tag)

    def classify(self, text: str, context: Optional[ShiftContext] = None) -> Optional[Fragment]:
        if not text:
            return None
        context = context or self.context()
        for recognizer in self.recognizers:
            if recognizer.matches(text, context):
                return Fragment(
                    text=text,
                    kind=recognizer.tag,
                    prefix_char=context.prefix_char,
                    postfix_char=context.postfix_char,
                    source_line=context.source_line,
                    file_extension=context.file_extension,
                    dictionary_id=recognizer.dictionary_id(text, context),
                )
        return None

    def shift(
        self,
        fragment: Fragment,
        request: ShiftRequest,
        context: Optional[ShiftContext] = None,
    ) -> Optional[str]:
        """Successor / predecessor of ``fragment``; ``None`` when unchanged or unknown."""
        recognizer = self._by_tag.get(fragment.kind)
        if recognizer is None:
            return None
        if context is None:
            context = self.context(
                fragment.file_extension,
                fragment.source_line,
                prefix_char=fragment.prefix_char,
                postfix_char=fragment.postfix_char,
            )
        shifted = recognizer.shift(fragment.text, request.direction, context, request.repeat)
        if shifted is None or shifted == fragment.text:
            return None
        return shifted

    def shift_text(
        self, text: str, request: ShiftRequest, context: Optional[ShiftContext] = None
    ) -> Optional[ShiftOutcome]:
        context = context or self.context()
        fragment = self.classify(text, context)
        if fragment is None:
            logger.debug("No recognizer matched %r", text)
            return None
        shifted = self.shift(fragment, request, context)
        if shifted is None:
            logger.debug("%s %r is not shiftable", fragment.kind.value, text)
            return None
        logger.debug("Shifted %s %r -> %r", fragment.kind.value, text, shifted)
        return ShiftOutcome(fragment=fragment, text=shifted)

    def shift_line(
        self, line: str, request: ShiftRequest, context: Optional[ShiftContext] = None
    ) -> Optional[str]:
        """Shift the single shiftable word of ``line``.

        With more than one (or no) shiftable word, HTML-encodable lines get
        their encoding toggled; anything else is left alone.
        """
        context = replace(context or self.context(), source_line=line)
        found: List[Tuple[int, str, str]] = []
        for m in self._re_line_word.finditer(line):
            word = m.group(0)
            core = word.strip(self._punctuation)
            if len(core) <= 2:
                continue
            outcome = self.shift_text(
                core, request, replace(context, prefix_char=None, postfix_char=None)
            )
            if outcome is not None:
                found.append((m.start() + word.index(core), core, outcome.text))
        if len(found) == 1:
            start, core, shifted = found[0]
            return line[:start] + shifted + line[start + len(core):]
        if self._html.matches(line, context):
            encoded = self._html.shift(line, request.direction, context)
            return encoded if encoded != line else None
        return None

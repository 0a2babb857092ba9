from __future__ import annotations
import logging
import re
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from shifter.models.fragment import (
    Direction,
    Replacement,
    SelectionKind,
    SelectionShape,
    ShiftRequest,
    ShiftResult,
    TypeTag,
)
from shifter.models.settings import ShifterSettings
from shifter.services.errors import AmbiguousBlock, MalformedNumber, UserCancelled
from shifter.services.language import is_css_like
from shifter.services.line_sorter import LineSorter
from shifter.services.recognizers import ShiftContext, shift_number
from shifter.services.shift_engine import ShiftEngine
from shifter.services.structural import PhpConcatenation, php_concatenation_applies
from shifter.services.text_utils import (
    char_after,
    char_before,
    contains_any_quotes,
    contains_any_slashes,
    is_comma_separated_list,
    operator_at_offset,
    reapply_selection_case,
    swap_quotes,
    swap_slashes,
    word_at_offset,
)

logger = logging.getLogger(__name__)

PROMPT_REDUCE_DUPLICATES = "Duplicated lines detected. Reduce to single occurrences?"
PROMPT_NUMERIC_BLOCK = "Shift numeric block selection"
PROMPT_ENUMERATION_START = "First number of the enumeration"
NUMERIC_BLOCK_OPTIONS = ("Replace with enumeration", "In-/decrement each")
YES_NO = ("Yes", "No")

# Transforms whose result already fixes the casing of the output
_CASE_DEFINING = frozenset({TypeTag.DICTIONARY_WORD, TypeTag.PHP_VARIABLE})


class EditorAdapter(Protocol):
    """What the shift core needs from the host editor."""

    def read_text(self) -> str: ...

    def caret_offset(self) -> int: ...

    def selection_ranges(self) -> SelectionShape: ...

    def line_bounds(self, offset: int) -> Tuple[int, int]: ...

    def replace_range(self, start: int, end: int, text: str) -> None: ...

    def file_extension(self) -> Optional[str]: ...

    def ask_choice(self, prompt: str, options: Sequence[str]) -> Optional[int]: ...

    def ask_number(self, prompt: str, default: int) -> Optional[int]: ...


class ScopeState(Enum):
    NO_SELECTION = "no_selection"
    SINGLE_TOKEN = "single_token"
    SINGLE_LINE_SELECTION = "single_line_selection"
    MULTI_LINE_SELECTION = "multi_line_selection"
    COLUMNAR_BLOCK = "columnar_block"


_STATE_FOR_SELECTION = {
    SelectionKind.NONE: ScopeState.NO_SELECTION,
    SelectionKind.SINGLE_LINE: ScopeState.SINGLE_LINE_SELECTION,
    SelectionKind.MULTI_LINE: ScopeState.MULTI_LINE_SELECTION,
    SelectionKind.COLUMNAR: ScopeState.COLUMNAR_BLOCK,
}

# (tag, applies, transform) for a selection within one line, in priority order
SelectionTransform = Tuple[
    TypeTag,
    Callable[[str, ShiftContext], bool],
    Callable[[str, ShiftContext], Optional[str]],
]


class ScopeResolver:
    """Decides at which granularity a shift applies and computes the replacements.

    ``resolve`` is pure with respect to the buffer; ``perform`` applies the
    result through the adapter, last replacement first.
    """

    _re_integer = re.compile(r"^-?\d+$")

    def __init__(
        self,
        adapter: EditorAdapter,
        settings: Optional[ShifterSettings] = None,
        engine: Optional[ShiftEngine] = None,
        sorter: Optional[LineSorter] = None,
    ) -> None:
        self.adapter = adapter
        self.settings = settings or (engine.settings if engine else ShifterSettings())
        self.engine = engine or ShiftEngine(self.settings)
        self.sorter = sorter or LineSorter(self.settings.sort_case_mode)

    # ---------- Entry points ----------
    def shift(self, direction: Direction, more: bool = False) -> ShiftResult:
        request = (
            ShiftRequest.more(direction, self.settings) if more else ShiftRequest(direction)
        )
        return self.perform(request)

    def perform(self, request: ShiftRequest) -> ShiftResult:
        try:
            result = self.resolve(request)
        except UserCancelled:
            logger.debug("Shift cancelled by user; buffer left untouched")
            return ShiftResult()
        except AmbiguousBlock as exc:
            logger.debug("Block selection not shiftable: %s", exc.message)
            return ShiftResult()
        for r in sorted(result.replacements, key=lambda r: r.start, reverse=True):
            self.adapter.replace_range(r.start, r.end, r.text)
        return result

    def state(self) -> ScopeState:
        return _STATE_FOR_SELECTION[self.adapter.selection_ranges().kind]

    def resolve(self, request: ShiftRequest) -> ShiftResult:
        shape = self.adapter.selection_ranges()
        state = _STATE_FOR_SELECTION[shape.kind]
        logger.debug("Resolving %s shift in state %s", request.direction.value, state.value)
        text = self.adapter.read_text()
        if state is ScopeState.COLUMNAR_BLOCK:
            return self._shift_block(text, shape.ranges, request)
        if state is ScopeState.MULTI_LINE_SELECTION:
            return self._shift_multi_line(text, shape.ranges[0], request)
        if state is ScopeState.SINGLE_LINE_SELECTION:
            return self._shift_selection(text, shape.ranges[0], request)
        return self._shift_at_caret(text, request)

    # ---------- No selection ----------
    def _context(self, text: str, start: int, end: int) -> ShiftContext:
        line_start, line_end = self.adapter.line_bounds(start)
        return self.engine.context(
            file_extension=self.adapter.file_extension(),
            source_line=text[line_start:line_end],
            buffer_text=text,
            prefix_char=char_before(text, start),
            postfix_char=char_after(text, end),
        )

    def _shift_at_caret(self, text: str, request: ShiftRequest) -> ShiftResult:
        caret = self.adapter.caret_offset()
        token = self._shift_token(text, caret, request)
        if token.changed:
            return token
        line_start, line_end = self.adapter.line_bounds(caret)
        line = text[line_start:line_end]
        shifted = self.engine.shift_line(line, request, self._context(text, line_start, line_end))
        if shifted is None:
            return ShiftResult()
        return ShiftResult([Replacement(line_start, line_end, shifted)], TypeTag.PLAIN_LINE)

    def _shift_token(self, text: str, caret: int, request: ShiftRequest) -> ShiftResult:
        operator = operator_at_offset(text, caret)
        if operator is not None:
            found: Optional[Tuple[int, str]] = operator
        else:
            found = word_at_offset(
                text, caret, allow_hyphens=is_css_like(self.adapter.file_extension())
            )
        if not found:
            return ShiftResult()
        start, word = found
        context = self._context(text, start, start + len(word))
        outcome = self.engine.shift_text(word, request, context)
        if outcome is None and operator is None and word.lower() != word:
            outcome = self.engine.shift_text(word.lower(), request, context)
        if outcome is None:
            return ShiftResult()
        return ShiftResult(
            [Replacement(start, start + len(word), outcome.text)], outcome.fragment.kind
        )

    # ---------- Selection within one line ----------
    def selection_transforms(self, request: ShiftRequest) -> List[SelectionTransform]:
        """Transforms tried on a single-line selection; the first that applies wins."""
        engine = self.engine

        def recognized(tag: TypeTag) -> SelectionTransform:
            recognizer = engine.recognizer_for(tag)
            return (
                tag,
                lambda s, ctx: recognizer is not None and recognizer.matches(s, ctx),
                lambda s, ctx: recognizer.shift(s, request.direction, ctx, request.repeat),
            )

        return [
            recognized(TypeTag.JS_VARIABLE_DECLARATION_LIST),
            recognized(TypeTag.SIZZLE_SELECTOR),
            (
                TypeTag.COMMA_SEPARATED_LIST,
                lambda s, ctx: is_comma_separated_list(s),
                lambda s, ctx: self.sorter.sort_comma_separated(s, request.direction.is_up),
            ),
            (
                TypeTag.PLAIN_LINE,
                php_concatenation_applies,
                lambda s, ctx: PhpConcatenation(s).shifted(),
            ),
            recognized(TypeTag.TERNARY_EXPRESSION),
            recognized(TypeTag.TRAILING_COMMENT),
            (TypeTag.QUOTED_STRING, lambda s, ctx: contains_any_quotes(s), lambda s, ctx: swap_quotes(s)),
            (TypeTag.PLAIN_LINE, lambda s, ctx: contains_any_slashes(s), lambda s, ctx: swap_slashes(s)),
            recognized(TypeTag.LOGICAL_OPERATOR),
            recognized(TypeTag.HTML_ENCODABLE),
        ]

    def _shift_selection(
        self, text: str, span: Tuple[int, int], request: ShiftRequest
    ) -> ShiftResult:
        start, end = span
        selected = text[start:end]
        if not selected.strip():
            return ShiftResult()
        context = self._context(text, start, end)

        fragment = self.engine.classify(selected, context)
        is_php_variable = fragment is not None and fragment.kind is TypeTag.PHP_VARIABLE
        if not is_php_variable:
            for tag, applies, transform in self.selection_transforms(request):
                if not applies(selected, context):
                    continue
                shifted = transform(selected, context)
                if shifted is None or shifted == selected:
                    continue
                logger.debug("Selection transform %s applied", tag.value)
                if tag is TypeTag.TRAILING_COMMENT:
                    line_start, line_end = self.adapter.line_bounds(start)
                    return ShiftResult([Replacement(line_start, line_end, shifted)], tag)
                return ShiftResult([Replacement(start, end, shifted)], tag)

        core = selected.strip()
        lead = selected[: len(selected) - len(selected.lstrip())]
        tail = selected[len(selected.rstrip()):]
        outcome = self.engine.shift_text(core, request, context)
        if outcome is None:
            return ShiftResult()
        shifted = outcome.text
        if outcome.fragment.kind not in _CASE_DEFINING:
            shifted = reapply_selection_case(core, shifted)
        if shifted == core:
            return ShiftResult()
        return ShiftResult(
            [Replacement(start, end, lead + shifted + tail)], outcome.fragment.kind
        )

    # ---------- Multi-line selection ----------
    def _shift_multi_line(
        self, text: str, span: Tuple[int, int], request: ShiftRequest
    ) -> ShiftResult:
        start, end = span
        context = self._context(text, start, end)
        js_declarations = self.engine.recognizer_for(TypeTag.JS_VARIABLE_DECLARATION_LIST)
        selected = text[start:end]
        if js_declarations is not None and js_declarations.matches(selected, context):
            shifted = js_declarations.shift(selected, request.direction, context)
            if shifted is not None and shifted != selected:
                return ShiftResult(
                    [Replacement(start, end, shifted)], TypeTag.JS_VARIABLE_DECLARATION_LIST
                )

        # A selection ending at column 0 does not include that line
        last = end - 1 if end > start and text[end - 1] == "\n" else end
        block_start = self.adapter.line_bounds(start)[0]
        block_end = self.adapter.line_bounds(last)[1]
        lines = text[block_start:block_end].split("\n")
        if len(lines) < 2:
            return self._shift_selection(text, span, request)

        def confirm_reduce() -> Optional[bool]:
            choice = self.adapter.ask_choice(PROMPT_REDUCE_DUPLICATES, YES_NO)
            return None if choice is None else choice == 0

        sorted_lines = self.sorter.sort_and_reduce(lines, request.direction.is_up, confirm_reduce)
        if sorted_lines is None:
            raise UserCancelled("duplicate reduction prompt dismissed")
        replacement = "\n".join(sorted_lines)
        if replacement == text[block_start:block_end]:
            return ShiftResult()
        return ShiftResult([Replacement(block_start, block_end, replacement)], TypeTag.PLAIN_LINE)

    # ---------- Columnar block ----------
    def _shift_block(
        self, text: str, rows: Sequence[Tuple[int, int]], request: ShiftRequest
    ) -> ShiftResult:
        values = [text[s:e] for s, e in rows]
        if all(self._re_integer.match(v) for v in values):
            return self._shift_numeric_block(rows, values, request)
        if len(set(values)) == 1:
            start, end = rows[0]
            outcome = self.engine.shift_text(values[0], request, self._context(text, start, end))
            if outcome is None:
                return ShiftResult()
            return ShiftResult(
                [Replacement(s, e, outcome.text) for s, e in rows], outcome.fragment.kind
            )
        raise AmbiguousBlock("block rows hold mixed values")

    def _shift_numeric_block(
        self,
        rows: Sequence[Tuple[int, int]],
        values: List[str],
        request: ShiftRequest,
    ) -> ShiftResult:
        choice = self.adapter.ask_choice(PROMPT_NUMERIC_BLOCK, NUMERIC_BLOCK_OPTIONS)
        if choice is None:
            raise UserCancelled("numeric block prompt dismissed")
        if choice == 0:
            first = self.adapter.ask_number(PROMPT_ENUMERATION_START, int(values[0]))
            if first is None:
                raise UserCancelled("enumeration start prompt dismissed")
            replacements = [
                Replacement(s, e, str(first + i)) for i, (s, e) in enumerate(rows)
            ]
        else:
            delta = request.direction.step * request.amount
            floor = self.settings.number_floor
            replacements = []
            for (s, e), value in zip(rows, values):
                try:
                    replacements.append(Replacement(s, e, shift_number(value, delta, floor)))
                except MalformedNumber:
                    continue
        return ShiftResult(replacements, TypeTag.NUMERIC)

from __future__ import annotations
from collections import deque
from typing import Iterable, List, Optional, Sequence, Tuple

from shifter.models.fragment import SelectionShape
from shifter.services.language import normalize_extension
from shifter.services.text_utils import line_bounds


class TextBufferAdapter:
    """In-memory editor surface with scripted prompt answers.

    Answers are consumed in order. Once the choices run out a choice prompt
    counts as dismissed; once the numbers run out the suggested default is
    accepted. Asked prompts are recorded in ``prompts``.
    """

    def __init__(
        self,
        text: str,
        caret: int = 0,
        selections: Optional[Iterable[Tuple[int, int]]] = None,
        filename: Optional[str] = None,
        choices: Optional[Iterable[Optional[int]]] = None,
        numbers: Optional[Iterable[Optional[int]]] = None,
    ) -> None:
        self.text = text
        self.caret = caret
        self.selections: List[Tuple[int, int]] = list(selections or [])
        self.filename = filename
        self._choices = deque(choices or [])
        self._numbers = deque(numbers or [])
        self.prompts: List[str] = []

    def read_text(self) -> str:
        return self.text

    def caret_offset(self) -> int:
        return self.caret

    def selection_ranges(self) -> SelectionShape:
        return SelectionShape.from_ranges(self.text, self.selections)

    def line_bounds(self, offset: int) -> Tuple[int, int]:
        return line_bounds(self.text, offset)

    def replace_range(self, start: int, end: int, text: str) -> None:
        self.text = self.text[:start] + text + self.text[end:]

    def file_extension(self) -> Optional[str]:
        if not self.filename or "." not in self.filename:
            return None
        return normalize_extension(self.filename)

    def ask_choice(self, prompt: str, options: Sequence[str]) -> Optional[int]:
        self.prompts.append(prompt)
        if not self._choices:
            return None
        choice = self._choices.popleft()
        if choice is None or not 0 <= choice < len(options):
            return None
        return choice

    def ask_number(self, prompt: str, default: int) -> Optional[int]:
        self.prompts.append(prompt)
        if not self._numbers:
            return default
        return self._numbers.popleft()

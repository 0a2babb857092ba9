from __future__ import annotations
import tkinter as tk
from tkinter import messagebox, simpledialog
from typing import Callable, List, Optional, Sequence, Tuple

from shifter.models.fragment import Direction, SelectionShape, ShiftResult
from shifter.models.settings import ShifterSettings
from shifter.services.language import normalize_extension
from shifter.services.scope_resolver import ScopeResolver
from shifter.services.text_utils import line_bounds


class TkTextAdapter:
    """Editor surface over a Tkinter Text widget.

    Offsets are character counts from the start of the buffer and are
    converted to Tk ``"1.0+Nc"`` indices. Several ``sel`` ranges (added
    programmatically) are reported as a columnar block.
    """

    def __init__(self, text_widget: tk.Text, filename: Optional[str] = None) -> None:
        self.text_widget = text_widget
        self.filename = filename

    def _offset(self, index: str) -> int:
        return len(self.text_widget.get("1.0", index))

    @staticmethod
    def _index(offset: int) -> str:
        return f"1.0+{offset}c"

    def read_text(self) -> str:
        # Tk always appends a trailing newline
        return self.text_widget.get("1.0", "end-1c")

    def caret_offset(self) -> int:
        return self._offset("insert")

    def selection_ranges(self) -> SelectionShape:
        raw = list(self.text_widget.tag_ranges("sel"))
        ranges: List[Tuple[int, int]] = []
        for start, end in zip(raw[0::2], raw[1::2]):
            ranges.append((self._offset(str(start)), self._offset(str(end))))
        return SelectionShape.from_ranges(self.read_text(), ranges)

    def line_bounds(self, offset: int) -> Tuple[int, int]:
        return line_bounds(self.read_text(), offset)

    def replace_range(self, start: int, end: int, text: str) -> None:
        self.text_widget.delete(self._index(start), self._index(end))
        self.text_widget.insert(self._index(start), text)

    def file_extension(self) -> Optional[str]:
        if not self.filename or "." not in self.filename:
            return None
        return normalize_extension(self.filename)

    def ask_choice(self, prompt: str, options: Sequence[str]) -> Optional[int]:
        if len(options) == 2:
            # Yes picks the first option, No the second, Cancel dismisses
            answer = messagebox.askyesnocancel(
                "Shifter", f"{prompt}\n\nYes: {options[0]}\nNo: {options[1]}"
            )
            if answer is None:
                return None
            return 0 if answer else 1
        listing = "\n".join(f"{i + 1}. {option}" for i, option in enumerate(options))
        picked = simpledialog.askinteger(
            "Shifter", f"{prompt}\n\n{listing}", minvalue=1, maxvalue=len(options)
        )
        return None if picked is None else picked - 1

    def ask_number(self, prompt: str, default: int) -> Optional[int]:
        return simpledialog.askinteger("Shifter", prompt, initialvalue=default)


class TkShiftBinder:
    """Binds shift up/down (and "shift more") keys on a Text widget.

    - Control-Alt-Up / Control-Alt-Down shift the word, line or selection.
    - Adding Shift repeats the shift by the configured "more" size.
    """

    def __init__(
        self,
        settings_provider: Optional[Callable[[], ShifterSettings]] = None,
        filename_provider: Optional[Callable[[], Optional[str]]] = None,
    ) -> None:
        self._settings_provider = settings_provider or ShifterSettings
        self._filename_provider = filename_provider or (lambda: None)

    def attach(self, text_widget: tk.Text) -> None:
        bindings = (
            ("<Control-Alt-Up>", Direction.UP, False),
            ("<Control-Alt-Down>", Direction.DOWN, False),
            ("<Control-Alt-Shift-Up>", Direction.UP, True),
            ("<Control-Alt-Shift-Down>", Direction.DOWN, True),
        )
        for sequence, direction, more in bindings:
            text_widget.bind(
                sequence,
                lambda e, d=direction, m=more: self._on_shift(text_widget, d, m),
                add="+",
            )

    def _on_shift(self, text_widget: tk.Text, direction: Direction, more: bool) -> str:
        self.shift(text_widget, direction, more)
        return "break"

    def shift(self, text_widget: tk.Text, direction: Direction, more: bool = False) -> ShiftResult:
        # A fresh settings snapshot per key press; preferences may have changed
        adapter = TkTextAdapter(text_widget, self._filename_provider())
        resolver = ScopeResolver(adapter, self._settings_provider())
        return resolver.shift(direction, more)

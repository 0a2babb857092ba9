from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from shifter.models.settings import SortCaseMode
from shifter.services.text_utils import (
    has_adjacent_duplicates,
    reduce_duplicate_lines,
    split_comma_separated,
)


class DelimiterDetector:
    """Finds a trailing delimiter (``,`` or ``;``) shared by the lines of a block.

    All lines but the last must end with it; whether the last one does too
    is remembered so the sorted block can be delimited the same way.
    """

    DELIMITERS = (",", ";")

    def __init__(self, lines: Sequence[str]) -> None:
        self.delimiter: Optional[str] = None
        self.delimited_last_line = False
        self._detect([line.rstrip() for line in lines])

    def _detect(self, lines: List[str]) -> None:
        if len(lines) < 2:
            return
        for delimiter in self.DELIMITERS:
            if all(line.endswith(delimiter) for line in lines[:-1]):
                self.delimiter = delimiter
                self.delimited_last_line = lines[-1].endswith(delimiter)
                return

    @property
    def found(self) -> bool:
        return self.delimiter is not None

    def strip(self, line: str) -> str:
        stripped = line.rstrip()
        if self.delimiter and stripped.endswith(self.delimiter):
            return stripped[: -len(self.delimiter)]
        return line

    def attach(self, lines: List[str]) -> List[str]:
        if not self.delimiter:
            return lines
        result = []
        last = len(lines) - 1
        for i, line in enumerate(lines):
            if i < last or self.delimited_last_line:
                result.append(line + self.delimiter)
            else:
                result.append(line)
        return result


class LineSorter:
    """Alphabetic sorting of line blocks and comma-separated lists."""

    def __init__(self, case_mode: SortCaseMode = SortCaseMode.CASE_INSENSITIVE) -> None:
        self.case_mode = case_mode

    def _key(self) -> Optional[Callable[[str], str]]:
        return str.lower if self.case_mode is SortCaseMode.CASE_INSENSITIVE else None

    def sort(self, lines: Sequence[str], ascending: bool = True) -> List[str]:
        """Stable sort; descending is the reversed ascending order."""
        detector = DelimiterDetector(lines)
        items = [detector.strip(line) for line in lines] if detector.found else list(lines)
        items.sort(key=self._key())
        if not ascending:
            items.reverse()
        return detector.attach(items)

    def sort_and_reduce(
        self,
        lines: Sequence[str],
        ascending: bool,
        confirm_reduce: Callable[[], Optional[bool]],
    ) -> Optional[List[str]]:
        """Sort, then ask ``confirm_reduce`` whether adjacent duplicates collapse.

        Returns ``None`` when the question was dismissed.
        """
        sorted_lines = self.sort(lines, ascending)
        if not has_adjacent_duplicates(sorted_lines):
            return sorted_lines
        answer = confirm_reduce()
        if answer is None:
            return None
        return reduce_duplicate_lines(sorted_lines) if answer else sorted_lines

    def sort_comma_separated(self, text: str, ascending: bool = True) -> str:
        items = split_comma_separated(text)
        items.sort(key=self._key())
        if not ascending:
            items.reverse()
        return ", ".join(items)

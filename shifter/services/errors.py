"""Failure taxonomy of the shift core.

None of these are fatal: every one of them ends with the buffer left as it
was. Recognizers never let them escape; the scope resolver raises
``UserCancelled`` and ``AmbiguousBlock`` and ``ScopeResolver.perform``
turns them into an empty result.
"""
from __future__ import annotations


class ShiftError(Exception):
    """Base class for shift failures."""

    code: str = "SHIFT_ERROR"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.code
        super().__init__(self.message)


class NotShiftable(ShiftError):
    """No recognizer matched, or the successor equals the input."""

    code = "NOT_SHIFTABLE"


class MalformedNumber(NotShiftable):
    """Text looked numeric but could not be parsed."""

    code = "MALFORMED_NUMBER"


class AmbiguousBlock(NotShiftable):
    """Columnar block rows are neither all numeric nor all identical."""

    code = "AMBIGUOUS_BLOCK"


class UserCancelled(ShiftError):
    """A prompt was dismissed; the whole operation is aborted."""

    code = "USER_CANCELLED"

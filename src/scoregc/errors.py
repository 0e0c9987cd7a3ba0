"""Exception hierarchy shared by the statistics, plotting and IO modules."""

from typing import Optional


class ScoreGCError(Exception):
    """Base class for all errors raised by scoregc."""


class ValidationError(ScoreGCError, ValueError):
    """Missing or invalid argument, unresolved factor, unknown plot type or format."""


class InsufficientDataError(ValidationError):
    """No finite score was available to compute summary statistics."""


class ValueTableIOError(ScoreGCError, OSError):
    """Value table stream could not be opened, written or used in the requested mode."""


class FormatError(ScoreGCError, ValueError):
    """A serialized value table row could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class RenderError(ScoreGCError, RuntimeError):
    """The rendering engine reported a diagnostic while producing the plot."""

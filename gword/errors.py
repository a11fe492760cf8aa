"""
Error kinds raised by gword.

All of these signal precondition violations: the operation is aborted
immediately and nothing is retried.
"""

from typing import Any, Optional, Sequence


class GWordError(Exception):
    """Base class for all gword errors."""


class MismatchedParentError(GWordError, ValueError):
    """Arithmetic or comparison between words of different groups."""

    def __init__(self, left: Any, right: Any, operation: str = "combine"):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Cannot {operation} words from different groups: {left} and {right}"
        )


class InvalidPatternError(GWordError, ValueError):
    """
    A search or replace was given an unusable pattern.

    Raised for needles that are too short for the requested search, and
    by a checked replace_at whose boundary/interior assumptions do not
    hold at the given index.
    """

    def __init__(self, message: str, pattern: Any = None,
                 haystack: Any = None, index: Optional[int] = None):
        self.pattern = pattern
        self.haystack = haystack
        self.index = index
        super().__init__(message)


class CoercionError(GWordError, TypeError):
    """A batch of items cannot be coerced to elements of one group."""

    def __init__(self, message: str, items: Sequence[Any] = ()):
        self.items = list(items)
        super().__init__(message)


class ParseError(GWordError, ValueError):
    """Malformed word text or an unknown generator name."""

    def __init__(self, message: str, text: str = "", position: int = -1):
        self.text = text
        self.position = position
        if position >= 0:
            message = f"{message} (at position {position} in {text!r})"
        super().__init__(message)

"""Exceptions raised by the batch timer core."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for recoverable tracker errors."""


class InvalidRangeError(TrackerError, ValueError):
    """Raised when a random time is requested with ``min > max``."""

    def __init__(self, min_seconds: int, max_seconds: int) -> None:
        super().__init__(
            f"Minimum time ({min_seconds}s) cannot be greater than maximum time ({max_seconds}s)."
        )
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds


class IndexOutOfRangeError(TrackerError, IndexError):
    """Raised when a delete or edit targets a position that does not exist."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} is out of range for {size} item(s).")
        self.index = index
        self.size = size


class ParseError(TrackerError):
    """Raised when a persisted value cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Could not parse stored value for {key!r}: {reason}")
        self.key = key
        self.reason = reason

"""Errors raised by guest log operations."""

from __future__ import annotations


class GuestLogError(Exception):
    """Base class for guest log failures."""


class InvalidJsonError(GuestLogError, ValueError):
    """The append payload is not a valid stream of JSON values."""


class MalformedRecordError(GuestLogError, ValueError):
    """A stored line has no usable ``user.id_str`` identifier."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason

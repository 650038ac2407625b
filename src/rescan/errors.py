"""Exception hierarchy raised by :func:`rescan.scan`."""
from __future__ import annotations

from enum import Enum
from typing import Optional

__all__ = [
    "ErrorKind",
    "ScanError",
    "NotFoundError",
    "InsufficientMatchesError",
    "AbsentGroupError",
    "ParseError",
    "InvalidBooleanError",
    "InvalidNumberError",
    "OutOfRangeError",
    "InvalidTextError",
    "CallbackError",
    "UnsupportedDestinationError",
]


class ErrorKind(str, Enum):
    """Machine readable classification of a scan failure."""

    NOT_FOUND = "not_found"
    INSUFFICIENT_MATCHES = "insufficient_matches"
    ABSENT_GROUP = "absent_group"
    INVALID_BOOLEAN = "invalid_boolean"
    INVALID_NUMBER = "invalid_number"
    OUT_OF_RANGE = "out_of_range"
    INVALID_TEXT = "invalid_text"
    CALLBACK = "callback"
    UNSUPPORTED_DESTINATION = "unsupported_destination"


def _show(raw: bytes | None) -> str:
    if raw is None:
        return ""
    return bytes(raw).decode("utf-8", errors="backslashreplace")


class ScanError(Exception):
    """Base class for every failure reported by the assignment engine."""

    kind: ErrorKind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        raw: bytes | None = None,
        position: Optional[int] = None,
        group: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.raw = None if raw is None else bytes(raw)
        self.position = position
        self.group = group


class NotFoundError(ScanError, LookupError):
    """The pattern did not match anywhere in the input."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, pattern: object) -> None:
        self.pattern = pattern
        super().__init__(f"regular expression {pattern!r}: not found")


class InsufficientMatchesError(ScanError):
    """Fewer capture groups are available than destinations were supplied."""

    kind = ErrorKind.INSUFFICIENT_MATCHES

    def __init__(self, pattern: object, *, available: int, requested: int) -> None:
        self.pattern = pattern
        self.available = available
        self.requested = requested
        super().__init__(
            f"rescan: only got {available} matches from {pattern!r}; need at least {requested}"
        )


class AbsentGroupError(ScanError):
    """A capture group that did not participate was mapped to a value destination."""

    kind = ErrorKind.ABSENT_GROUP

    def __init__(self, *, position: int, group: int, destination: str) -> None:
        super().__init__(
            f"rescan: capture group {group} did not participate in the match "
            f"and cannot be stored into {destination} (destination {position})",
            position=position,
            group=group,
        )


class ParseError(ScanError, ValueError):
    """A sub-match could not be converted to the destination type."""

    def __init__(self, explanation: str, raw: bytes | None, **context: Optional[int]) -> None:
        self.explanation = explanation
        super().__init__(f'rescan: parsing "{_show(raw)}": {explanation}', raw=raw, **context)


class InvalidBooleanError(ParseError):
    kind = ErrorKind.INVALID_BOOLEAN


class InvalidNumberError(ParseError):
    kind = ErrorKind.INVALID_NUMBER


class OutOfRangeError(ParseError):
    """The parsed integer does not fit the destination's width."""

    kind = ErrorKind.OUT_OF_RANGE

    def __init__(self, raw: bytes | None, *, bits: int, signed: bool, **context: Optional[int]) -> None:
        self.bits = bits
        self.signed = signed
        type_name = f"{'int' if signed else 'uint'}{bits}"
        super().__init__(f"out of range for {type_name}", raw, **context)


class InvalidTextError(ParseError):
    """The sub-match is not valid in the configured text encoding."""

    kind = ErrorKind.INVALID_TEXT


class CallbackError(ParseError):
    """A callback destination reported failure by returning ``False``."""

    kind = ErrorKind.CALLBACK


class UnsupportedDestinationError(ScanError, TypeError):
    """A destination is none of the recognised kinds."""

    kind = ErrorKind.UNSUPPORTED_DESTINATION

    def __init__(self, destination: object, *, position: int, group: Optional[int] = None) -> None:
        self.destination = destination
        super().__init__(
            f"rescan: unsupported destination type {type(destination).__name__} at position {position}",
            position=position,
            group=group,
        )

"""Submatch-to-destination assignment engine."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional, Sequence

from .config import ScanSettings, get_settings
from .destinations import (
    Bool,
    Bytes,
    Callback,
    Destination,
    Discard,
    Float,
    Int,
    Span,
    SpanOf,
    Text,
    coerce_destination,
)
from .errors import (
    AbsentGroupError,
    CallbackError,
    InsufficientMatchesError,
    InvalidTextError,
    NotFoundError,
    ScanError,
    UnsupportedDestinationError,
)
from .matcher import BytesLike, MatchOffsets, SearchPattern, compile_pattern, is_text_pattern, locate, locate_text
from .parsers.booleans import parse_bool
from .parsers.numbers import parse_float, parse_int
from .utils.logging import log_event

__all__ = ["assign", "scan", "scan_string"]


LOGGER = logging.getLogger(__name__)

Assigner = Callable[[Any, memoryview, Span, ScanSettings], None]


def _store_text(dest: Text, view: memoryview, span: Span, settings: ScanSettings) -> None:
    encoding = dest.encoding or settings.encoding
    try:
        dest.cell.value = bytes(view).decode(encoding, dest.errors or settings.decode_errors)
    except UnicodeDecodeError as exc:
        raise InvalidTextError(f"invalid {encoding} text: {exc.reason}", view) from exc


def _store_bytes(dest: Bytes, view: memoryview, span: Span, settings: ScanSettings) -> None:
    dest.cell.value = view


def _store_bool(dest: Bool, view: memoryview, span: Span, settings: ScanSettings) -> None:
    dest.cell.value = parse_bool(view)


def _store_int(dest: Int, view: memoryview, span: Span, settings: ScanSettings) -> None:
    dest.cell.value = parse_int(view, bits=dest.bits, signed=dest.signed, base=dest.base)


def _store_float(dest: Float, view: memoryview, span: Span, settings: ScanSettings) -> None:
    dest.cell.value = parse_float(view, bits=dest.bits)


def _store_span(dest: SpanOf, view: memoryview, span: Span, settings: ScanSettings) -> None:
    dest.cell.value = span


def _invoke_callback(dest: Callback, view: memoryview, span: Span, settings: ScanSettings) -> None:
    if dest.fn(view) is False:
        raise CallbackError(f"{dest.describe()} reported failure", view)


def _discard(dest: Discard, view: memoryview, span: Span, settings: ScanSettings) -> None:
    return None


_ASSIGNERS: Dict[type, Assigner] = {
    Discard: _discard,
    Text: _store_text,
    Bytes: _store_bytes,
    Bool: _store_bool,
    Int: _store_int,
    Float: _store_float,
    SpanOf: _store_span,
    Callback: _invoke_callback,
}


def _report(error: BaseException, **fields: Any) -> None:
    if LOGGER.isEnabledFor(logging.DEBUG):
        log_event(
            LOGGER,
            "scan.failed",
            level=logging.DEBUG,
            message=str(error),
            error=type(error).__name__,
            **fields,
        )


def assign(
    offsets: Optional[MatchOffsets],
    data: BytesLike,
    destinations: Sequence[Destination | Callable[[memoryview], Any] | None],
    *,
    pattern: object = None,
    settings: ScanSettings | None = None,
) -> None:
    """Store the capture groups described by ``offsets`` into ``destinations``.

    Destination ``i`` receives capture group ``i + 1``; the whole match is
    never assigned and extra groups are ignored. Processing stops at the
    first failure, leaving earlier destinations written.

    A group that did not participate is skipped by :class:`Discard`, passed as
    an empty view to a :class:`Callback`, and rejected with
    :class:`AbsentGroupError` by every other destination.
    """

    if offsets is None:
        error = NotFoundError(pattern)
        _report(error, kind=error.kind.value)
        raise error

    available = len(offsets) - 1
    if available < len(destinations):
        error = InsufficientMatchesError(pattern, available=available, requested=len(destinations))
        _report(error, kind=error.kind.value, available=available, requested=len(destinations))
        raise error

    settings = settings or get_settings()
    buffer = memoryview(data)
    for position, item in enumerate(destinations):
        group = position + 1
        span = offsets[group]
        dest = coerce_destination(item)
        assigner = _ASSIGNERS.get(type(dest)) if dest is not None else None
        if assigner is None:
            error = UnsupportedDestinationError(item, position=position, group=group)
            _report(error, kind=error.kind.value, position=position, group=group)
            raise error

        if isinstance(dest, Discard):
            continue
        if span.absent and not isinstance(dest, Callback):
            error = AbsentGroupError(position=position, group=group, destination=dest.describe())
            _report(error, kind=error.kind.value, position=position, group=group)
            raise error

        view = buffer[0:0] if span.absent else buffer[span.start:span.end]
        try:
            assigner(dest, view, span, settings)
        except ScanError as exc:
            exc.position = position
            exc.group = group
            _report(exc, kind=exc.kind.value, position=position, group=group, raw=exc.raw)
            raise
        except Exception as exc:
            if not isinstance(dest, Callback):
                raise
            exc.add_note(f"raised by {dest.describe()} for capture group {group} (destination {position})")
            _report(exc, kind="callback", position=position, group=group, raw=view)
            raise


def scan(
    pattern: SearchPattern | str | bytes,
    data: BytesLike,
    destinations: Sequence[Destination | Callable[[memoryview], Any] | None] = (),
    *,
    settings: ScanSettings | None = None,
) -> None:
    """Match ``pattern`` against ``data`` and store its capture groups.

    Raises :class:`~rescan.errors.NotFoundError` when there is no match and
    another :class:`~rescan.errors.ScanError` when a capture group cannot be
    stored into its destination.
    """

    if isinstance(data, str):
        raise TypeError("scan() expects bytes-like input; use scan_string() for text")
    compiled = compile_pattern(pattern)
    offsets = locate(compiled, data)
    assign(offsets, data, destinations, pattern=getattr(compiled, "pattern", compiled), settings=settings)


def scan_string(
    pattern: SearchPattern | str | bytes,
    text: str,
    destinations: Sequence[Destination | Callable[[memoryview], Any] | None] = (),
    *,
    settings: ScanSettings | None = None,
) -> None:
    """Encode ``text`` with the configured encoding and scan it.

    ``str`` patterns are matched against ``text`` itself, so Unicode classes
    and non-ASCII literals behave as they do in :mod:`re`; bytes patterns are
    matched against the encoded text. Offsets stored into
    :class:`~rescan.destinations.SpanOf` cells are byte offsets into the
    encoded text either way.
    """

    settings = settings or get_settings()
    data = text.encode(settings.encoding)
    if not is_text_pattern(pattern):
        scan(pattern, data, destinations, settings=settings)
        return
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    offsets = locate_text(compiled, text, settings.encoding)
    assign(offsets, data, destinations, pattern=compiled.pattern, settings=settings)

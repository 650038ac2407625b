"""Adapter over the regular-expression engine's submatch offsets."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple, Union

from .destinations import Span

__all__ = [
    "ABSENT",
    "BytesLike",
    "MatchOffsets",
    "SearchPattern",
    "compile_pattern",
    "is_text_pattern",
    "locate",
    "locate_text",
]

BytesLike = Union[bytes, bytearray, memoryview]

ABSENT = Span(-1, -1)
"""Offsets reported for a capture group that did not take part in the match."""


class SearchPattern(Protocol):
    """Anything exposing ``search`` and ``groups`` like :class:`re.Pattern`.

    Patterns from the third-party ``regex`` module satisfy this protocol too.
    """

    groups: int

    def search(self, string: Any) -> Any:  # pragma: no cover - protocol definition
        ...


@dataclass(frozen=True)
class MatchOffsets:
    """Offsets of the overall match (index 0) and of every capture group."""

    spans: Tuple[Span, ...]

    @property
    def whole(self) -> Span:
        return self.spans[0]

    @property
    def groups(self) -> Tuple[Span, ...]:
        return self.spans[1:]

    def __len__(self) -> int:
        return len(self.spans)

    def __getitem__(self, index: int) -> Span:
        return self.spans[index]


def compile_pattern(expr: Union[str, bytes, "re.Pattern[Any]", SearchPattern], flags: int = 0) -> SearchPattern:
    """Return a pattern that can be searched against byte input.

    ASCII ``str`` expressions and compiled ``str`` patterns are recompiled as
    bytes patterns; ``re.UNICODE`` is dropped since bytes patterns do not
    support it. A ``str`` pattern with non-ASCII characters has no single byte
    rendition and raises :class:`ValueError`; match it against text with
    :func:`rescan.scan_string` instead. Other pattern objects are returned
    unchanged.
    """

    if isinstance(expr, re.Pattern):
        if isinstance(expr.pattern, bytes):
            return expr
        return re.compile(_ascii_pattern(expr.pattern), expr.flags & ~re.UNICODE)
    if isinstance(expr, str):
        return re.compile(_ascii_pattern(expr), flags & ~re.UNICODE)
    if isinstance(expr, bytes):
        return re.compile(expr, flags)
    return expr


def _ascii_pattern(expr: str) -> bytes:
    if not expr.isascii():
        raise ValueError(
            f"text pattern {expr!r} contains non-ASCII characters; "
            "use scan_string() or a bytes pattern"
        )
    return expr.encode("ascii")


def is_text_pattern(expr: Any) -> bool:
    """Return ``True`` for ``str`` expressions and patterns compiled from one."""

    return isinstance(expr, str) or isinstance(getattr(expr, "pattern", None), str)


def locate(pattern: SearchPattern, data: BytesLike) -> Optional[MatchOffsets]:
    """Find the leftmost match of ``pattern`` in ``data``.

    Returns ``None`` when there is no match. Otherwise the offsets hold one
    entry for the whole match and one per capture group, with :data:`ABSENT`
    for groups that did not participate.
    """

    match = pattern.search(data)
    if match is None:
        return None
    spans = []
    for index in range(pattern.groups + 1):
        start, end = match.span(index)
        spans.append(ABSENT if start < 0 or end < start else Span(start, end))
    return MatchOffsets(spans=tuple(spans))


def locate_text(pattern: SearchPattern, text: str, encoding: str) -> Optional[MatchOffsets]:
    """Match a ``str`` pattern against ``text`` and report byte offsets.

    Character offsets are translated into offsets within ``text`` encoded
    with ``encoding``, so the result can be assigned against the encoded
    bytes.
    """

    offsets = locate(pattern, text)
    if offsets is None:
        return None
    converted: Dict[int, int] = {}

    def to_byte(index: int) -> int:
        if index not in converted:
            converted[index] = len(text[:index].encode(encoding))
        return converted[index]

    spans = tuple(
        ABSENT if span.absent else Span(to_byte(span.start), to_byte(span.end))
        for span in offsets.spans
    )
    return MatchOffsets(spans=spans)

"""Destination kinds that receive converted capture groups.

Each capture group of a match is stored into one destination. Destinations
are a closed set of variants; the caller owns the :class:`Cell` objects they
write into and reads the results back after :func:`rescan.scan` returns.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NamedTuple, Optional, TypeVar, Union

from .config import check_decode_errors, check_encoding
from .parsers.numbers import FLOAT_WIDTHS, INTEGER_WIDTHS

__all__ = [
    "Cell",
    "Span",
    "Destination",
    "Discard",
    "DISCARD",
    "Text",
    "Bytes",
    "Bool",
    "Int",
    "Float",
    "SpanOf",
    "Callback",
    "CallbackFn",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float32",
    "float64",
    "coerce_destination",
]

T = TypeVar("T")

CallbackFn = Callable[[memoryview], Optional[bool]]
"""A callback receives the sub-match; returning ``False`` or raising fails the scan."""


class Span(NamedTuple):
    """Half-open ``[start, end)`` byte range of a match or capture group."""

    start: int
    end: int

    @property
    def absent(self) -> bool:
        return self.start < 0


class Cell(Generic[T]):
    """Mutable slot owned by the caller."""

    __slots__ = ("value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class Destination:
    """Common base of every destination variant."""

    def describe(self) -> str:
        return type(self).__name__.lower()


@dataclass(frozen=True, eq=False)
class Discard(Destination):
    """Skip the capture group, whether or not it participated."""


DISCARD = Discard()


@dataclass(frozen=True, eq=False)
class Text(Destination):
    """Store a decoded ``str`` copy of the capture group.

    ``encoding`` and ``errors`` default to the configured settings and are
    checked against the same rules as :class:`~rescan.config.ScanSettings`.
    """

    cell: Cell[str]
    encoding: Optional[str] = None
    errors: Optional[str] = None

    def __post_init__(self) -> None:
        if self.encoding is not None:
            check_encoding(self.encoding)
        if self.errors is not None:
            check_decode_errors(self.errors)


@dataclass(frozen=True, eq=False)
class Bytes(Destination):
    """Store a ``memoryview`` that aliases the input buffer without copying."""

    cell: Cell[memoryview]


@dataclass(frozen=True, eq=False)
class Bool(Destination):
    cell: Cell[bool]


@dataclass(frozen=True, eq=False)
class Int(Destination):
    """Store an integer of a fixed width and signedness.

    ``base=0`` selects the radix from the literal prefix; ``base=10`` only
    accepts decimal digits.
    """

    cell: Cell[int]
    bits: int = 64
    signed: bool = True
    base: int = 0

    def __post_init__(self) -> None:
        if self.bits not in INTEGER_WIDTHS:
            raise ValueError(f"Unsupported integer width: {self.bits}")
        if self.base != 0 and not 2 <= self.base <= 36:
            raise ValueError(f"Unsupported integer base: {self.base}")

    def describe(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"


@dataclass(frozen=True, eq=False)
class Float(Destination):
    cell: Cell[float]
    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in FLOAT_WIDTHS:
            raise ValueError(f"Unsupported float width: {self.bits}")

    def describe(self) -> str:
        return f"float{self.bits}"


@dataclass(frozen=True, eq=False)
class SpanOf(Destination):
    """Store the capture group's offsets instead of its content."""

    cell: Cell[Span]

    def describe(self) -> str:
        return "span"


@dataclass(frozen=True, eq=False)
class Callback(Destination):
    """Hand the raw capture group to caller supplied conversion logic."""

    fn: CallbackFn

    def describe(self) -> str:
        return f"callback {getattr(self.fn, '__name__', repr(self.fn))}"


# Fixed width constructors -------------------------------------------------


def int8(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=8, signed=True, base=base)


def int16(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=16, signed=True, base=base)


def int32(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=32, signed=True, base=base)


def int64(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=64, signed=True, base=base)


def uint8(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=8, signed=False, base=base)


def uint16(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=16, signed=False, base=base)


def uint32(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=32, signed=False, base=base)


def uint64(cell: Cell[int], *, base: int = 0) -> Int:
    return Int(cell, bits=64, signed=False, base=base)


def float32(cell: Cell[float]) -> Float:
    return Float(cell, bits=32)


def float64(cell: Cell[float]) -> Float:
    return Float(cell, bits=64)


def coerce_destination(item: Union[Destination, CallbackFn, None, Any]) -> Optional[Destination]:
    """Map shorthand entries onto destination variants.

    ``None`` is the discard marker and a bare callable becomes a
    :class:`Callback`. Returns ``None`` when ``item`` is not recognised.
    """

    if item is None:
        return DISCARD
    if isinstance(item, Destination):
        return item
    if callable(item) and not isinstance(item, (type, Cell)):
        return Callback(item)
    return None

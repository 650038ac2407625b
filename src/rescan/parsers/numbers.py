"""Parse integer and floating point literals into fixed-width numeric kinds."""
from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Dict, Tuple, Union

import numpy as np

from ..errors import InvalidNumberError, OutOfRangeError

__all__ = [
    "INTEGER_WIDTHS",
    "FLOAT_WIDTHS",
    "integer_bounds",
    "parse_int",
    "parse_float",
]

RawInput = Union[bytes, bytearray, memoryview, str]

INTEGER_WIDTHS: Tuple[int, ...] = (8, 16, 32, 64)
FLOAT_WIDTHS: Tuple[int, ...] = (32, 64)

_INTEGER_DTYPES: Dict[Tuple[int, bool], type] = {
    (8, True): np.int8,
    (16, True): np.int16,
    (32, True): np.int32,
    (64, True): np.int64,
    (8, False): np.uint8,
    (16, False): np.uint16,
    (32, False): np.uint32,
    (64, False): np.uint64,
}
_FLOAT_DTYPES: Dict[int, type] = {32: np.float32, 64: np.float64}

# Prefix-directed literal: 0x/0o/0b, legacy leading-zero octal, or decimal.
# Underscores may only sit between digits or directly after a prefix.
_BASE0_PATTERN = re.compile(
    r"""
    (?P<sign>[+-])?
    (?:
        0[xX](?P<hex>_?[0-9a-fA-F](?:_?[0-9a-fA-F])*)
      | 0[bB](?P<bin>_?[01](?:_?[01])*)
      | 0[oO](?P<oct>_?[0-7](?:_?[0-7])*)
      | 0(?P<legacy>(?:_?[0-7])*)
      | (?P<dec>[1-9](?:_?[0-9])*)
    )
    """,
    re.VERBOSE,
)
_BASE0_RADIX = {"hex": 16, "bin": 2, "oct": 8, "legacy": 8, "dec": 10}

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _as_ascii(raw: RawInput) -> str | None:
    if isinstance(raw, str):
        return raw if raw.isascii() else None
    try:
        return bytes(raw).decode("ascii")
    except UnicodeDecodeError:
        return None


def _raw_bytes(raw: RawInput) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def integer_bounds(bits: int, signed: bool) -> Tuple[int, int]:
    """Return the inclusive ``(min, max)`` range of an integer kind."""

    try:
        dtype = _INTEGER_DTYPES[(bits, signed)]
    except KeyError:
        raise ValueError(f"Unsupported integer width: {bits}") from None
    info = np.iinfo(dtype)
    return int(info.min), int(info.max)


def _split_base0(text: str) -> Tuple[str, int, str] | None:
    match = _BASE0_PATTERN.fullmatch(text)
    if match is None:
        return None
    for name, radix in _BASE0_RADIX.items():
        digits = match.group(name)
        if digits is not None:
            return match.group("sign") or "", radix, digits.replace("_", "") or "0"
    return None  # pragma: no cover - the pattern always binds one branch


def _split_explicit(text: str, base: int) -> Tuple[str, int, str] | None:
    sign = ""
    body = text
    if body[:1] in {"+", "-"}:
        sign, body = body[0], body[1:]
    allowed = _DIGITS[:base]
    if not body or any(ch not in allowed for ch in body.lower()):
        return None
    return sign, base, body


def parse_int(raw: RawInput, *, bits: int = 64, signed: bool = True, base: int = 0) -> int:
    """Parse ``raw`` as an integer literal that must fit ``bits``/``signed``.

    With ``base=0`` the literal's prefix selects the radix (``0x`` hexadecimal,
    ``0o`` or a bare leading ``0`` octal, ``0b`` binary, decimal otherwise).
    Any other base in ``2..36`` parses plain digits of that radix; ``base=10``
    is the decimal-only contract. A negative literal is out of range for
    unsigned kinds.
    """

    if base != 0 and not 2 <= base <= 36:
        raise ValueError(f"Unsupported integer base: {base}")
    lo, hi = integer_bounds(bits, signed)
    type_name = f"{'int' if signed else 'uint'}{bits}"

    text = _as_ascii(raw)
    parts = None
    if text:
        parts = _split_base0(text) if base == 0 else _split_explicit(text, base)
    if parts is None:
        raise InvalidNumberError(f"invalid syntax for {type_name}", _raw_bytes(raw))
    sign, radix, digits = parts
    value = int(digits, radix)
    if sign == "-":
        value = -value
    if not lo <= value <= hi:
        raise OutOfRangeError(_raw_bytes(raw), bits=bits, signed=signed)
    return value


def parse_float(raw: RawInput, *, bits: int = 64) -> float:
    """Parse a decimal or exponential literal at 32 or 64 bit precision.

    ``inf``, ``infinity`` and ``nan`` are accepted in any case. A finite
    literal that overflows the requested precision is rejected.
    """

    try:
        dtype = _FLOAT_DTYPES[bits]
    except KeyError:
        raise ValueError(f"Unsupported float width: {bits}") from None
    type_name = f"float{bits}"

    text = _as_ascii(raw)
    if not text or _FLOAT_PATTERN.fullmatch(text) is None:
        raise InvalidNumberError(f"invalid syntax for {type_name}", _raw_bytes(raw))

    value = float(text)
    with np.errstate(over="ignore"):
        narrowed = float(dtype(value))
    if math.isinf(narrowed) and not text.lstrip("+-").lower().startswith("inf"):
        raise InvalidNumberError(f"value out of range for {type_name}", _raw_bytes(raw))
    if bits == 32:
        narrowed = _settle_single_precision_tie(text, value, narrowed)
    return narrowed


def _settle_single_precision_tie(text: str, value: float, narrowed: float) -> float:
    """Round ``text`` once to float32 when ``value`` sits halfway between two floats.

    ``value`` is already rounded to float64, so a literal just above or below
    a float32 midpoint can collapse onto it and be sent the wrong way by
    ties-to-even. Comparing the exact decimal picks the right neighbour.
    """

    if narrowed == value or not math.isfinite(value):
        return narrowed
    toward = np.float32(math.inf if value > narrowed else -math.inf)
    neighbour = float(np.nextafter(np.float32(narrowed), toward))
    if (narrowed + neighbour) / 2 != value:
        return narrowed
    exact = Decimal(text)
    if exact == Decimal(value):
        return narrowed
    if exact > Decimal(value):
        return max(narrowed, neighbour)
    return min(narrowed, neighbour)

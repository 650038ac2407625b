"""Literal parsers backing the typed destinations."""

from .booleans import parse_bool
from .numbers import FLOAT_WIDTHS, INTEGER_WIDTHS, integer_bounds, parse_float, parse_int

__all__ = [
    "FLOAT_WIDTHS",
    "INTEGER_WIDTHS",
    "integer_bounds",
    "parse_bool",
    "parse_float",
    "parse_int",
]

r"""rescan – typed extraction of regular expression sub-matches.

:func:`scan` matches a pattern against byte input and stores every capture
group into a caller supplied destination, converting it on the way::

    host, port = Cell(), Cell()
    scan(rb"^https?://([^/:]+):(\d+)/", url, [Text(host), uint16(port)])
"""

from ._version import __version__
from .config import ScanSettings, get_settings, reset_settings
from .destinations import (
    DISCARD,
    Bool,
    Bytes,
    Callback,
    Cell,
    Destination,
    Discard,
    Float,
    Int,
    Span,
    SpanOf,
    Text,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
)
from .engine import assign, scan, scan_string
from .errors import (
    AbsentGroupError,
    CallbackError,
    ErrorKind,
    InsufficientMatchesError,
    InvalidBooleanError,
    InvalidNumberError,
    InvalidTextError,
    NotFoundError,
    OutOfRangeError,
    ParseError,
    ScanError,
    UnsupportedDestinationError,
)
from .matcher import ABSENT, MatchOffsets, compile_pattern, locate

__all__ = [
    "__version__",
    "scan",
    "scan_string",
    "assign",
    "locate",
    "compile_pattern",
    "MatchOffsets",
    "ABSENT",
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
    "ScanSettings",
    "get_settings",
    "reset_settings",
]

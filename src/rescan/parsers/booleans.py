"""Strict boolean literal parsing."""
from __future__ import annotations

from typing import Union

from ..errors import InvalidBooleanError

__all__ = ["TRUE_LITERALS", "FALSE_LITERALS", "parse_bool"]

TRUE_LITERALS = frozenset({"1", "true"})
FALSE_LITERALS = frozenset({"0", "false"})


def parse_bool(raw: Union[bytes, bytearray, memoryview, str]) -> bool:
    """Return the boolean spelled by ``raw``.

    Only ``0``, ``1`` and the words ``true``/``false`` (any case) are accepted;
    surrounding whitespace is not stripped.
    """

    if isinstance(raw, str):
        text = raw
        data = raw.encode("utf-8")
    else:
        data = bytes(raw)
        text = data.decode("ascii", errors="replace")
    lowered = text.lower() if text.isascii() else ""
    if lowered in TRUE_LITERALS:
        return True
    if lowered in FALSE_LITERALS:
        return False
    raise InvalidBooleanError("invalid syntax for bool", data)

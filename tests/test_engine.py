import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from rescan import (
    DISCARD,
    AbsentGroupError,
    Bool,
    Bytes,
    Cell,
    Int,
    NotFoundError,
    ScanError,
    ScanSettings,
    Span,
    SpanOf,
    Text,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    scan,
    scan_string,
    uint8,
    uint16,
    uint32,
    uint64,
)

_FACTORIES: Dict[str, Callable[[Cell], Any]] = {
    "text": Text,
    "bytes": Bytes,
    "bool": Bool,
    "int": int64,
    "uint": uint64,
    "int8": int8,
    "int16": int16,
    "int32": int32,
    "int64": int64,
    "uint8": uint8,
    "uint16": uint16,
    "uint32": uint32,
    "uint64": uint64,
    "float32": float32,
    "float64": float64,
}

Case = Tuple[str, str, bool, Sequence[Tuple[Optional[str], Any]]]


def _run(pattern: str, text: str, kinds: Sequence[Optional[str]]) -> Tuple[List[Optional[Cell]], Optional[ScanError]]:
    cells: List[Optional[Cell]] = []
    destinations = []
    for kind in kinds:
        if kind is None:
            cells.append(None)
            destinations.append(None)
            continue
        cell: Cell = Cell()
        cells.append(cell)
        destinations.append(_FACTORIES[kind](cell))
    try:
        scan(re.compile(pattern.encode()), text.encode(), destinations)
    except ScanError as exc:
        return cells, exc
    return cells, None


CASES: List[Case] = [
    # no extraction
    (r"(\w+):(\d+)", "", False, []),
    (r"(\w+):(\d+)", "host:1234x", True, []),
    (r"(\w+):(\d+)", "-host:1234-", True, []),
    (r"(\w+):(\d+)", "host:x1234", False, []),
    (r"^(\w+):(\d+)$", "host:1234", True, [(None, None), (None, None)]),
    (r"^(\w+):(\d+)$", "host:1234x", False, [(None, None), (None, None)]),
    # not enough groups
    (r"^\w+:\d+$", "host:1234", False, [("text", None)]),
    # missing sub-expression
    (r"^(\w+):((\d+))?", "host:", True, [(None, None), (None, None), (None, None)]),
    (r"^(\w+):((\d+))?", "host:", False, [(None, None), (None, None), ("int", None)]),
    # several destinations
    (r"(\w+):(\d+)", "h:80", True, [("text", "h"), ("int", 80)]),
    # text and bytes
    (r"(.*):\d+", "host:1234", True, [("text", "host")]),
    (r"(.*):\d+", "host:1234", True, [("bytes", b"host")]),
    (r"(.*):\d+", ":1234", True, [("bytes", b"")]),
    # int
    (r"(\d+)", "1234", True, [("int", 1234)]),
    (r"(.*)", "-1234", True, [("int", -1234)]),
    (r"(.*)", "123456789123456789123456789", False, [("int", None)]),
    (r"(.*)", "-123456789123456789123456789", False, [("int", None)]),
    (r"(.*)", "0x10", True, [("int", 16)]),
    (r"(.*)", "010", True, [("int", 8)]),
    # uint
    (r"(\d+)", "1234", True, [("uint", 1234)]),
    (r"(\d+)", "123456789123456789123456789", False, [("uint", None)]),
    # fixed widths
    (r"(.*)", "0", True, [("uint8", 0)]),
    (r"(.*)", "17", True, [("uint8", 17)]),
    (r"(.*)", "255", True, [("uint8", 255)]),
    (r"(.*)", "256", False, [("uint8", None)]),
    (r"(.*)", "x", False, [("uint8", None)]),
    (r"(.*)", "65535", True, [("uint16", 65535)]),
    (r"(.*)", "65536", False, [("uint16", None)]),
    (r"(.*)", "4294967295", True, [("uint32", 4294967295)]),
    (r"(.*)", "4294967296", False, [("uint32", None)]),
    (r"(.*)", "18446744073709551615", True, [("uint64", 18446744073709551615)]),
    (r"(.*)", "18446744073709551616", False, [("uint64", None)]),
    (r"(.*)", "127", True, [("int8", 127)]),
    (r"(.*)", "128", False, [("int8", None)]),
    (r"(.*)", "32767", True, [("int16", 32767)]),
    (r"(.*)", "32768", False, [("int16", None)]),
    (r"(.*)", "2147483647", True, [("int32", 2147483647)]),
    (r"(.*)", "2147483648", False, [("int32", None)]),
    (r"(.*)", "9223372036854775807", True, [("int64", 9223372036854775807)]),
    (r"(.*)", "9223372036854775808", False, [("int64", None)]),
    (r"(.*)", "x", False, [("int64", None)]),
    # floats
    (r"(.*)", "0", True, [("float32", 0.0)]),
    (r"(.*)", "1.25e2", True, [("float32", 125.0)]),
    (r"(.*)", "1e40", False, [("float32", None)]),
    (r"(.*)", "x", False, [("float32", None)]),
    (r"(.*)", "1.25e2", True, [("float64", 125.0)]),
    (r"(.*)", "1e40", True, [("float64", 1e40)]),
    (r"(.*)", "1e400", False, [("float64", None)]),
    (r"(.*)", "x", False, [("float64", None)]),
    # bool
    (r"(\w+)=(\w+)", "debug=TRUE", True, [("text", "debug"), ("bool", True)]),
    (r"(\w+)=(\w+)", "debug=yes", False, [("text", "debug"), ("bool", None)]),
]


@pytest.mark.parametrize("pattern, text, ok, expectations", CASES)
def test_scan_table(pattern: str, text: str, ok: bool, expectations) -> None:
    kinds = [kind for kind, _ in expectations]
    cells, error = _run(pattern, text, kinds)
    if not ok:
        assert error is not None, f"scan({pattern!r}, {text!r}) succeeded unexpectedly"
        return
    assert error is None, f"unexpected error: {error}"
    for cell, (kind, expected) in zip(cells, expectations):
        if cell is None:
            continue
        value = bytes(cell.value) if kind == "bytes" else cell.value
        assert value == expected


def test_scan_example_host_port() -> None:
    host, port = Cell(), Cell()
    scan(re.compile(rb"(\w+):(\d+)"), b"host:1234x", [Text(host), uint32(port)])
    assert host.value == "host"
    assert port.value == 1234


def test_scan_accepts_raw_and_text_patterns() -> None:
    host, port = Cell(), Cell()
    scan(r"(\w+):(\d+)", b"db:5432", [Text(host), Int(port, bits=16, signed=False)])
    assert (host.value, port.value) == ("db", 5432)

    scan(re.compile(r"(\w+):(\d+)"), b"web:80", [Text(host), DISCARD])
    assert host.value == "web"
    assert port.value == 5432


def test_scan_rejects_text_input() -> None:
    with pytest.raises(TypeError):
        scan(rb"(.*)", "not bytes", [None])


def test_scan_string_encodes_input() -> None:
    name, size = Cell(), Cell()
    scan_string(r"(\S+) (\d+)", "größe 42", [Text(name), int32(size)])
    assert name.value == "größe"
    assert size.value == 42


def test_scan_ignores_extra_groups() -> None:
    first = Cell()
    scan(rb"(a)(b)(c)", b"abc", [Text(first)])
    assert first.value == "a"


def test_scan_with_no_destinations_only_checks_match() -> None:
    scan(rb"^\d+$", b"123")
    scan(rb"^\d+$", b"123", [])


def test_decimal_only_integer_contract() -> None:
    value = Cell()
    scan(rb"(\d+)", b"0755", [Int(value, base=10)])
    assert value.value == 755
    scan(rb"(\d+)", b"0755", [Int(value)])
    assert value.value == 0o755


def test_text_destination_honours_encoding() -> None:
    value = Cell()
    scan(rb"(.+)", "déjà".encode("latin-1"), [Text(value, encoding="latin-1")])
    assert value.value == "déjà"

    replaced = Cell()
    scan(rb"(.+)", b"ok\xff", [Text(replaced, errors="replace")])
    assert replaced.value == "ok�"


def test_scan_string_matches_non_ascii_patterns_per_character() -> None:
    accents, where = Cell(), Cell()
    scan_string(r"(é+)", "éé", [Text(accents)])
    assert accents.value == "éé"

    scan_string(r"caf(é)", "un café", [SpanOf(where)])
    assert where.value == Span(6, 8)


def test_scan_string_text_pattern_follows_configured_encoding() -> None:
    accent, where = Cell(), Cell()
    latin = ScanSettings(encoding="latin-1")
    scan_string(r"(é)", "café", [Text(accent), None], settings=latin)
    assert accent.value == "é"
    scan_string(re.compile(r"(é)"), "café", [SpanOf(where)], settings=latin)
    assert where.value == Span(3, 4)


def test_scan_string_unicode_classes_and_absent_groups() -> None:
    word, rest = Cell(), Cell()
    scan_string(r"(\w+)(!)?", "größe", [Text(word), None])
    assert word.value == "größe"
    with pytest.raises(AbsentGroupError):
        scan_string(r"(\w+)(!)?", "größe", [None, Text(rest)])


def test_scan_string_reports_text_pattern_when_not_found() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        scan_string(r"(é)", "cafe", [None])
    assert excinfo.value.pattern == r"(é)"


def test_scan_rejects_non_ascii_text_pattern_for_bytes_input() -> None:
    with pytest.raises(ValueError, match="non-ASCII"):
        scan(r"(é)", "café".encode("utf-8"), [None])

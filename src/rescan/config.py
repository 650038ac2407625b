"""Runtime settings for rescan.

:func:`get_settings` returns the text encoding used by :class:`~rescan.Text`
destinations and :func:`~rescan.scan_string`, plus the package log level.
Values can be customized via environment variables or by pointing
``RESCAN_CONFIG_FILE`` to a TOML/YAML document with a ``[scan]`` section.
"""
from __future__ import annotations

import codecs
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "DECODE_ERROR_HANDLERS",
    "ScanSettings",
    "check_decode_errors",
    "check_encoding",
    "get_settings",
    "reset_settings",
]

_ENV_FIELDS = {
    "encoding": "RESCAN_ENCODING",
    "decode_errors": "RESCAN_DECODE_ERRORS",
    "log_level": "RESCAN_LOG_LEVEL",
}
DECODE_ERROR_HANDLERS = frozenset({"strict", "replace", "ignore", "backslashreplace", "surrogateescape"})

_CONFIG_CACHE: Optional["ScanSettings"] = None
_CONFIG_SOURCE: Optional[Path] = None


def check_encoding(value: str) -> str:
    """Return the canonical codec name for ``value``."""

    try:
        return codecs.lookup(value).name
    except LookupError as exc:
        raise ValueError(f"unknown encoding '{value}'") from exc


def check_decode_errors(value: str) -> str:
    """Accept only the decode error handlers listed in ``DECODE_ERROR_HANDLERS``."""

    if value not in DECODE_ERROR_HANDLERS:
        raise ValueError(f"decode_errors '{value}' is not supported")
    return value


class ScanSettings(BaseModel):
    """Resolved settings shared by every scan call."""

    encoding: str = Field(default="utf-8", description="Codec for text destinations and string input")
    decode_errors: str = Field(default="strict", description="Error handler used when decoding text")
    log_level: str = Field(default="WARNING", description="Level applied to the 'rescan' logger")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        return check_encoding(value)

    @field_validator("decode_errors")
    @classmethod
    def _known_handler(cls, value: str) -> str:
        return check_decode_errors(value)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = str(value).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level '{value}' is not a logging level")
        return level

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level)


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file '{path}' does not exist")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        with path.open("rb") as handle:
            return tomllib.load(handle)
    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
            return loaded or {}
    raise ValueError(f"Unsupported config file format: '{suffix}'")


def _coalesce_mapping(source: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return source


def _build_settings(config_file: Optional[Path]) -> ScanSettings:
    config_data: Mapping[str, Any] = {}
    if config_file is not None:
        config_data = _load_config_file(config_file.expanduser().resolve())

    values = dict(_coalesce_mapping(config_data.get("scan")))
    for field, variable in _ENV_FIELDS.items():
        override = os.environ.get(variable)
        if override:
            values[field] = override
    return ScanSettings(**values)


def get_settings(*, refresh: bool = False) -> ScanSettings:
    """Return cached settings, reloading them when the config source changes.

    Each reload applies ``log_level`` to the ``rescan`` logger.
    """

    global _CONFIG_CACHE, _CONFIG_SOURCE

    raw_source = os.environ.get("RESCAN_CONFIG_FILE")
    source = Path(raw_source) if raw_source else None
    if refresh or _CONFIG_CACHE is None or source != _CONFIG_SOURCE:
        _CONFIG_CACHE = _build_settings(source)
        _CONFIG_SOURCE = source
        logging.getLogger("rescan").setLevel(_CONFIG_CACHE.level)
    return _CONFIG_CACHE


def reset_settings() -> None:
    """Clear the cached settings so the next call re-reads the environment."""

    global _CONFIG_CACHE, _CONFIG_SOURCE
    _CONFIG_CACHE = None
    _CONFIG_SOURCE = None

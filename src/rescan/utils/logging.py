"""JSON Lines logging for scan events.

The engine reports failures as ``scan.failed`` events on ``rescan.engine``.
:func:`configure_json_logger` routes the package logger to a JSONL file where
every record carries the event name plus its structured fields.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

from ..config import get_settings

__all__ = ["JsonLogFormatter", "configure_json_logger", "log_event"]

_PACKAGE_LOGGER = "rescan"


def _jsonable(value: Any) -> Any:
    # Capture groups arrive as bytes or memoryviews of the scanned input.
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="backslashreplace")
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    return value


class JsonLogFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": getattr(record, "event", None) or record.getMessage(),
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, Mapping):
            for key, value in fields.items():
                payload.setdefault(key, _jsonable(value))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_json_logger(log_path: Path | None, level: int | None = None) -> logging.Logger:
    """Send the ``rescan`` logger to ``log_path`` as JSON Lines.

    Settings are resolved first, so a later :func:`~rescan.config.get_settings`
    call does not undo an explicit ``level``. Without ``level`` the
    ``log_level`` setting applies. ``None`` for ``log_path`` installs a
    :class:`logging.NullHandler`.
    """

    settings = get_settings()
    if level is None:
        level = settings.level

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    handler: logging.Handler
    if log_path is None:
        handler = logging.NullHandler()
    else:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(JsonLogFormatter())
    logger.addHandler(handler)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.DEBUG,
    message: str | None = None,
    **fields: Any,
) -> None:
    """Log ``event`` with ``fields`` attached for :class:`JsonLogFormatter`."""

    logger.log(level, message or event, extra={"event": event, "fields": fields})

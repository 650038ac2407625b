"""Shared helpers for rescan."""

from .logging import JsonLogFormatter, configure_json_logger, log_event

__all__ = ["JsonLogFormatter", "configure_json_logger", "log_event"]

"""
Shipgrid Logging

Every module logs through get_logger(__name__). Loggers share one stderr
handler whose format (text or JSON) and level come from settings:

    [SHIPGRID DEBUG] [generator] Generated 3x3 grid for Frigate/railgun ...

JSON output adds any ``extra={...}`` fields passed to the log call:

    logger.warning("Cannot apply placement", extra={"reason": "overlap"})
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from .config import get_settings

LOGGER_PREFIX = "shipgrid"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


class ShipgridFormatter(logging.Formatter):
    """Text or JSON formatter for shipgrid records."""

    def __init__(self, json_output: bool = False) -> None:
        super().__init__()
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        if self.json_output:
            return json.dumps(self._as_dict(record), default=str)

        short_name = record.name.rsplit(".", 1)[-1]
        text = f"[SHIPGRID {record.levelname}] [{short_name}] {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self._exception_text(record)
        return text

    def _as_dict(self, record: logging.LogRecord) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            data["exception"] = self._exception_text(record)
        return data

    @staticmethod
    def _exception_text(record: logging.LogRecord) -> str:
        return "".join(traceback.format_exception(*record.exc_info))


_registry: dict[str, logging.Logger] = {}
_handler: Optional[logging.Handler] = None


def _shared_handler() -> logging.Handler:
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(ShipgridFormatter(json_output=get_settings().log_json))
    return _handler


def get_logger(name: str) -> logging.Logger:
    """
    Return the configured logger for a module.

    Args:
        name: Dotted module name, normally __name__

    Returns:
        Logger writing to the shared shipgrid handler
    """
    logger = _registry.get(name)
    if logger is None:
        logger = logging.getLogger(name)
        logger.setLevel(get_settings().log_level_int)
        logger.addHandler(_shared_handler())
        logger.propagate = False
        _registry[name] = logger
    return logger


def set_log_level(level: int) -> None:
    """Change the level of every logger handed out by get_logger()."""
    for logger in _registry.values():
        logger.setLevel(level)


def debug_enabled() -> bool:
    return get_settings().log_level_int <= logging.DEBUG


def reset_logging() -> None:
    """
    Return shipgrid loggers to stdlib defaults.

    Loggers propagate again at NOTSET and lose the shared handler, so
    pytest's caplog sees their records. Test fixtures call this between
    tests.
    """
    global _handler

    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name == LOGGER_PREFIX or name.startswith(LOGGER_PREFIX + "."):
            logger.propagate = True
            logger.setLevel(logging.NOTSET)
            if _handler is not None:
                logger.removeHandler(_handler)

    _handler = None

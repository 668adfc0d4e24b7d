"""Logging setup for airbook.

Records go to the console as plain text or JSON, and optionally to a
rotating JSON file. Booking code logs through ``ContextLogger`` so every
record of a workflow carries its id.
"""

import logging
import logging.config
from collections.abc import MutableMapping
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from airbook.config.settings import LoggingSettings

LOGGER_NAME = "airbook"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _handlers(level: str, json_format: bool, log_file: str | None) -> dict[str, dict[str, Any]]:
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_format else "plain",
            "level": level,
        }
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
            "encoding": "utf-8",
            "formatter": "json",
            "level": level,
        }
    return handlers


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure the ``airbook`` logger hierarchy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON records on the console
        log_file: Also write JSON records to this rotating file
    """
    handlers = _handlers(level, json_format, log_file)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": PLAIN_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JsonFormatter, "fmt": JSON_FORMAT},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": level,
                    "propagate": False,
                },
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }
    )


def setup_logging_from_settings(settings: LoggingSettings) -> None:
    setup_logging(level=settings.level, json_format=settings.json_format, log_file=settings.file)


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges bound context with per-call ``extra``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


class ContextLogger:
    """Factory for loggers bound to a booking context."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def with_context(self, **context: Any) -> ContextAdapter:
        """
        Bind context to every record logged through the returned adapter.

        Args:
            **context: Context key-value pairs (workflow id, step, ...)
        """
        return ContextAdapter(self.logger, context)

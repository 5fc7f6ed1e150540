"""Logging for Colloquy sessions.

Everything under the ``colloquy`` logger goes to the console. When a log
file is configured, the same records are also written as JSON lines, one
object per record, with the session context as top-level keys.
"""

import logging
import logging.config
from typing import Any

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _json_file_handler(log_file: str, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": log_file,
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "formatter": "json",
        "level": level,
    }


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure the ``colloquy`` logger tree.

    The package logger does not propagate; third-party libraries stay at
    WARNING on the root logger.

    Args:
        level: Log level for Colloquy records (DEBUG, INFO, WARNING, ERROR)
        log_file: Rotating JSON log file, or None for console only
    """
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": level,
        },
    }
    formatters: dict[str, Any] = {
        "console": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
    }
    if log_file is not None:
        formatters["json"] = {"()": "pythonjsonlogger.json.JsonFormatter", "format": JSON_FIELDS}
        handlers["file"] = _json_file_handler(log_file, level)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": handlers,
            "loggers": {
                "colloquy": {"handlers": list(handlers), "level": level, "propagate": False},
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }
    )


class ContextLogger:
    """Source of session-scoped loggers.

    The conversation manager builds one adapter per session so every
    record it writes carries the session id.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def with_context(self, **context: Any) -> logging.LoggerAdapter:
        """Adapter that attaches ``context`` (e.g. ``session_id``) as record extras."""
        return logging.LoggerAdapter(self.logger, context)

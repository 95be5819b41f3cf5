"""JSON logging for the cache node.

Every record is one JSON line. Pipeline logs pass
``extra={"context": {...}}`` with the content id and stage so a failed
announcement can be found and replayed by hand.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

_RECORD_FIELDS = ("levelname", "name", "module", "funcName", "lineno")


class JSONFormatter(logging.Formatter):
    """Render a record and its ``context`` extra as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "message": record.getMessage(),
        }
        entry.update({field: getattr(record, field) for field in _RECORD_FIELDS})

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(log_level: str | None = None, log_file: str | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Level name; falls back to LOG_LEVEL, then INFO.
        log_file: Rotating log file; falls back to LOG_FILE. An empty value
                  keeps logging on stdout only.
    """
    level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if log_file is None:
        log_file = os.getenv("LOG_FILE", "")

    handlers: dict[str, dict] = {
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JSONFormatter}},
            "handlers": handlers,
            "root": {"level": level, "handlers": list(handlers)},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with ``__name__``."""
    return logging.getLogger(name)

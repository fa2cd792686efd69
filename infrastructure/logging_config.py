"""
infrastructure/logging_config.py
----------------------------------
Structured logging configuration.

Engine modules log through `logging.getLogger(__name__)`; the HTTP server
calls setup_logging() once at startup. LOG_FORMAT=json emits one JSON object
per line, LOG_FORMAT=text the usual human-readable line.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import config

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """
    Formats log records as JSON.

    Each entry carries timestamp, level, logger and message; `extra` and
    `exception` are added when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra"):
            log_entry["extra"] = record.extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    log_file: Optional[str] = None,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the engine.

    Args:
        level:       Level name (default config.LOG_LEVEL).
        fmt:         "json" | "text" (default config.LOG_FORMAT).
        log_file:    Optional path; stdout/stderr only when omitted.
        logger_name: Logger to configure; None configures the root logger.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel((level or config.LOG_LEVEL).upper())
    logger.handlers = []

    if (fmt or config.LOG_FORMAT).lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit an INFO record whose `extra` payload holds the event name and fields."""
    if not logger.isEnabledFor(logging.INFO):
        return
    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        "",
        0,
        f"Event: {event}",
        args=(),
        exc_info=None,
    )
    record.extra = {"event": event, **fields}
    logger.handle(record)

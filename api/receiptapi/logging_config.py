"""
Structured logging for the receipt service.

JSON lines on stdout by default; set LOG_JSON=false for a plain formatter
when reading logs locally.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_RESERVED = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}

trace_logger = logging.getLogger("receiptapi.parsers.trace")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extras included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # request_id, user_id, vendor, event fields...
        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_structured_logging(use_json: bool | None = None, log_level: str | None = None):
    """
    Configure the root logger once at app start.

    Args:
        use_json: JSON formatter when True; falls back to LOG_JSON (default true).
        log_level: DEBUG, INFO, ...; falls back to LOG_LEVEL (default INFO).
    """
    if use_json is None:
        use_json = os.getenv("LOG_JSON", "true").lower() == "true"
    level = getattr(logging, (log_level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if use_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return root_logger


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with extra structured fields.

    Example:
        log_with_context(logger, logging.INFO, "Receipt extracted",
                         vendor="maybank", reference_id="12345678")
    """
    logger.log(level, message, extra=dict(context))


def log_observer(event: str, fields: Dict[str, Any]) -> None:
    """Extraction trace hook that forwards parser events to the debug log."""
    if trace_logger.isEnabledFor(logging.DEBUG):
        log_with_context(trace_logger, logging.DEBUG, event, event=event, **fields)

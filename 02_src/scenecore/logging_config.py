"""
JSON logging keyed by trace.

Components log with ``extra={"context": operation_context(op)}`` so every line
can be joined back to the flow that produced it, across services.
"""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_LOG_PATH

if TYPE_CHECKING:
    from .models import Operation

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_KEEP = 5


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    ``trace_id`` and ``trace_op`` are lifted to the top level when the record
    carries an operation context, so a whole flow is one ``grep`` away; the
    full span identity stays under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            for key in ("trace_id", "trace_op"):
                if key in context:
                    entry[key] = context[key]
        if context is not None:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Send JSON records to stdout and a rotating file.

    Args:
        log_level: Root level; falls back to ``LOG_LEVEL``, then INFO.
        log_file: Target file; falls back to ``LOG_FILE``, then 04_logs/app.log.
    """
    level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    path = Path(log_file or os.getenv("LOG_FILE") or DEFAULT_LOG_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "trace_json": {"()": "scenecore.logging_config.JSONFormatter"},
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(path),
                "maxBytes": ROTATE_BYTES,
                "backupCount": ROTATE_KEEP,
                "formatter": "trace_json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "trace_json",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": level, "handlers": ["file", "console"]},
    })


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def operation_context(operation: "Operation") -> dict:
    """Span identity for ``extra={"context": ...}``."""
    return {
        "trace_id": operation.trace_id,
        "span_id": operation.span_id,
        "parent_span_id": operation.parent_span_id,
        "trace_op": operation.trace_op,
    }

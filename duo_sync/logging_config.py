"""Structured JSON logging configuration."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

# Attributes callers attach with ``extra=`` that end up in the JSON line.
EXTRA_FIELDS = (
    "resource_type",
    "operation",
    "records",
    "duration_s",
    "run_id",
    "offset",
    "role_name",
    "admin_id",
    "admin_name",
)


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        return json.dumps(log_entry)


def configure_logging(level: Optional[str] = None) -> None:
    """Set up the duo_sync logger with the JSON formatter on stderr.

    The level defaults to $LOG_LEVEL, then INFO. urllib3 connection chatter is
    routed through the same handler at WARNING.
    """
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger("duo_sync")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    transport = logging.getLogger("urllib3")
    transport.setLevel(logging.WARNING)
    transport.handlers.clear()
    transport.addHandler(handler)
    transport.propagate = False

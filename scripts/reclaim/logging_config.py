"""JSON log lines for reclaim runs.

Each record becomes one JSON object on stderr. Request context passed through
``extra=`` (organization, mannequin, target, manifest line) is copied onto the
object so a batch can be followed row by row.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

CONTEXT_FIELDS = ("service", "org", "mannequin", "target", "status", "line")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Route the ``reclaim`` logger tree to ``stream`` (stderr by default).

    Unknown level names fall back to INFO. Calling it again replaces the handler.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    reclaim_logger = logging.getLogger("reclaim")
    reclaim_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    reclaim_logger.handlers.clear()
    reclaim_logger.addHandler(handler)
    reclaim_logger.propagate = False

"""Log formatting for the command line and for applications that want JSON lines."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import Any

import orjson

from vector_search.observability.context import log_context


_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with engine and span correlation fields."""

    MAX_MESSAGE_LEN = 2000

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE_LEN:
            message = message[: self.MAX_MESSAGE_LEN] + "..."

        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            **log_context(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # extra={...} passed by the caller
        entry.update({key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS})

        return orjson.dumps(entry, default=str).decode("utf-8")


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Replace the root handlers with a single stderr handler.

    stdout is left to command output so search results stay pipeable.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)

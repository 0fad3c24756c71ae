from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_EXTRA_KEYS = ("task_id", "error_code", "path")

# Handlers installed by setup_logging, removed again on re-configuration.
_installed: list[logging.Handler] = []


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


# PUBLIC_INTERFACE
def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """
    Configure the root logger with a single stream handler.

    Calling it again replaces the handler installed by the previous call, so the
    application lifespan can run more than once in one process (tests).

    Args:
        level: log level name, e.g. 'INFO' or 'DEBUG'.
        fmt: 'json' for structured output, anything else for plain text.

    Returns:
        The installed handler.
    """
    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
    _installed.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _installed.append(handler)
    return handler

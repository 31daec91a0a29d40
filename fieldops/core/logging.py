"""
Logging setup for the field service API.

Text output is meant for local runs; ``LOG_FORMAT=json`` emits one object per line for
log shippers.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone

from fieldops.core.config import settings

_RESERVED = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    fmt = (fmt or settings.LOG_FORMAT).lower()

    formatters = {
        "text": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
        "json": {"()": JsonFormatter},
    }
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if fmt == "json" else "text",
                }
            },
            "loggers": {
                "fieldops": {"handlers": ["console"], "level": level, "propagate": True},
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )

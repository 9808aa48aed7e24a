"""Structured JSON logging for the service."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import Any

_LOGGER_NAME = "auctionhouse"


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "time": moment.isoformat(timespec="milliseconds"),
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "fields", {}) or {})
        return json.dumps(payload, default=str)


def _build_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


_log = _build_logger()


def info(message: str, **kwargs: Any) -> None:
    """Log an informational message with extra structured fields."""
    _log.info(message, extra={"fields": kwargs})


def error(message: str, err: BaseException | None, **kwargs: Any) -> None:
    """Log an error message, attaching the error under the ``error`` key."""
    fields = dict(kwargs)
    fields["error"] = None if err is None else str(err)
    _log.error(message, extra={"fields": fields})
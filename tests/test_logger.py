import json
import logging

from auctionhouse import logger
from auctionhouse.logger import JsonFormatter


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.lines = []
        self.setFormatter(JsonFormatter())

    def emit(self, record):
        self.lines.append(self.format(record))


def _capture(action):
    handler = _ListHandler()
    target = logging.getLogger("auctionhouse")
    target.addHandler(handler)
    try:
        action()
    finally:
        target.removeHandler(handler)
    return [json.loads(line) for line in handler.lines]


def test_formatter_emits_json_with_fields():
    record = logging.LogRecord("t", logging.WARNING, __file__, 1, "hello", None, None)
    record.fields = {"auction_id": "abc"}
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "warning"
    assert data["message"] == "hello"
    assert data["auction_id"] == "abc"
    assert "T" in data["time"]


def test_info_writes_message_and_fields():
    records = _capture(lambda: logger.info("started", port=8080))
    data = records[-1]
    assert data["level"] == "info"
    assert data["message"] == "started"
    assert data["port"] == 8080


def test_error_attaches_error_text():
    records = _capture(
        lambda: logger.error(
            "Error trying to insert user", ValueError("duplicate key")
        )
    )
    data = records[-1]
    assert data["level"] == "error"
    assert data["message"] == "Error trying to insert user"
    assert data["error"] == "duplicate key"
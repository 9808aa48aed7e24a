"""Environment-driven settings and the MongoDB connection."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from fractions import Fraction

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from auctionhouse import logger

MONGODB_URL = "MONGODB_URL"
MONGODB_DB = "MONGODB_DB"

_UNIT_MICROSECONDS = {
    "ns": Fraction(1, 1000),
    "us": Fraction(1),
    "µs": Fraction(1),
    "μs": Fraction(1),
    "ms": Fraction(1000),
    "s": Fraction(1_000_000),
    "m": Fraction(60_000_000),
    "h": Fraction(3_600_000_000),
}
_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"300ms"``, ``"1.5h"`` or ``"2h45m"``."""
    body = text
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    position = 0
    while position < len(body):
        match = _COMPONENT.match(body, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise ValueError(f"invalid duration {text!r}")
        value = Fraction(int(whole or "0"))
        if fraction:
            value += Fraction(int(fraction), 10 ** len(fraction))
        total += value * _UNIT_MICROSECONDS[unit]
        position = match.end()

    if negative:
        total = -total
    try:
        return timedelta(microseconds=float(total))
    except OverflowError as exc:
        raise ValueError(f"invalid duration {text!r}") from exc


def env_duration(name: str, default: timedelta) -> timedelta:
    """Read a duration from the environment, falling back to ``default``."""
    try:
        return parse_duration(os.environ.get(name, ""))
    except ValueError:
        return default


def env_int(name: str, default: int) -> int:
    """Read a plain decimal integer from the environment, else ``default``."""
    value = os.environ.get(name, "")
    if _INTEGER.fullmatch(value) is None:
        return default
    return int(value)


def connect_database() -> Database:
    """Connect to MongoDB using the environment and verify it with a ping."""
    url = os.environ.get(MONGODB_URL, "")
    name = os.environ.get(MONGODB_DB, "")
    try:
        client: MongoClient = MongoClient(url)
    except PyMongoError as exc:
        logger.error("Error trying to connect to mongodb database", exc)
        raise
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("Error trying to ping mongodb database", exc)
        raise
    return client[name]
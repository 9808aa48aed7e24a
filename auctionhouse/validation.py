"""Decoding and validation of JSON request bodies into input DTOs.

Bodies given as ``str`` or ``bytes`` are decoded as JSON first; any other
value is taken to be an already-decoded JSON document. Object keys match
field names without regard to case, ``null`` leaves a field at its zero
value, and unknown keys are ignored.
"""

from __future__ import annotations

import json
import math
from typing import Any, Callable

from auctionhouse.auction_usecase import AuctionInputDTO
from auctionhouse.bid_usecase import BidInputDTO
from auctionhouse.rest_err import Cause, bad_request, not_found
from auctionhouse.user_usecase import UserInputDTO

_CONVERT_MESSAGE = "Error trying to convert fields"
_TYPE_MESSAGE = "Invalid type error"
_INVALID_FIELDS_MESSAGE = "Invalid field values"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_JSON_WHITESPACE = " \t\r\n"
_CONDITIONS = (0, 1, 2)


class _TypeMismatch(Exception):
    """A JSON value cannot be stored in the field it was given for."""


def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise _TypeMismatch(value)
    return value


def _as_int64(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _TypeMismatch(value)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise _TypeMismatch(value)
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _TypeMismatch(value)
    try:
        number = float(value)
    except OverflowError as exc:
        raise _TypeMismatch(value) from exc
    if math.isinf(number) or math.isnan(number):
        raise _TypeMismatch(value)
    return number


_Fields = dict[str, tuple[Callable[[Any], Any], Any]]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"invalid JSON constant {token}")


def _decode(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        payload = bytes(payload).decode("utf-8", errors="replace")
    if not isinstance(payload, str):
        return payload
    text = payload.lstrip(_JSON_WHITESPACE)
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    try:
        document, _ = decoder.raw_decode(text)
    except ValueError:
        raise bad_request(_CONVERT_MESSAGE) from None
    return document


def _bind(payload: Any, fields: _Fields) -> dict[str, Any]:
    document = _decode(payload)
    values = {key: zero for key, (_, zero) in fields.items()}
    if document is None:
        return values
    if not isinstance(document, dict):
        raise not_found(_TYPE_MESSAGE)
    by_folded = {key.casefold(): key for key in fields}
    for key, raw in document.items():
        target = by_folded.get(str(key).casefold())
        if target is None or raw is None:
            continue
        convert, _ = fields[target]
        try:
            values[target] = convert(raw)
        except _TypeMismatch:
            raise not_found(_TYPE_MESSAGE) from None
    return values


def _characters(count: int) -> str:
    return f"{count} character" if count == 1 else f"{count} characters"


def _check_text(
    name: str, value: str, minimum: int, maximum: int | None = None
) -> Cause | None:
    if value == "":
        return Cause(name, f"{name} is a required field")
    if len(value) < minimum:
        return Cause(name, f"{name} must be at least {_characters(minimum)} in length")
    if maximum is not None and len(value) > maximum:
        return Cause(
            name, f"{name} must be a maximum of {_characters(maximum)} in length"
        )
    return None


def parse_auction_input(payload: Any) -> AuctionInputDTO:
    """Decode and validate an auction body, raising RestErr when it is unusable."""
    values = _bind(
        payload,
        {
            "product_name": (_as_string, ""),
            "category": (_as_string, ""),
            "description": (_as_string, ""),
            "condition": (_as_int64, 0),
        },
    )
    checks = [
        _check_text("ProductName", values["product_name"], 1),
        _check_text("Category", values["category"], 2),
        _check_text("Description", values["description"], 10, 200),
    ]
    if values["condition"] not in _CONDITIONS:
        allowed = " ".join(str(value) for value in _CONDITIONS)
        checks.append(Cause("Condition", f"Condition must be one of [{allowed}]"))
    causes = [cause for cause in checks if cause is not None]
    if causes:
        raise bad_request(_INVALID_FIELDS_MESSAGE, *causes)
    return AuctionInputDTO(
        product_name=values["product_name"],
        category=values["category"],
        description=values["description"],
        condition=values["condition"],
    )


def parse_bid_input(payload: Any) -> BidInputDTO:
    """Decode a bid body, raising RestErr when it is unusable."""
    values = _bind(
        payload,
        {
            "user_id": (_as_string, ""),
            "auction_id": (_as_string, ""),
            "amount": (_as_float, 0.0),
        },
    )
    return BidInputDTO(
        user_id=values["user_id"],
        auction_id=values["auction_id"],
        amount=values["amount"],
    )


def parse_user_input(payload: Any) -> UserInputDTO:
    """Decode a user body, raising RestErr when it is unusable."""
    values = _bind(payload, {"name": (_as_string, "")})
    return UserInputDTO(name=values["name"])
"""HTTP-facing error values and their conversion from domain errors."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from auctionhouse.errors import InternalError


@dataclass(frozen=True)
class Cause:
    """One field-level reason for a rejected request."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class RestErr(Exception):
    """An error ready to be sent as a JSON response."""

    def __init__(
        self,
        message: str,
        err: str,
        code: int,
        causes: list[Cause] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.err = err
        self.code = code
        self.causes = causes

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "err": self.err,
            "code": self.code,
            "causes": None
            if self.causes is None
            else [cause.to_dict() for cause in self.causes],
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"RestErr({self.message!r}, {self.err!r}, {self.code})"


def bad_request(message: str, *args: Cause) -> RestErr:
    """A 400 error, optionally carrying field causes."""
    return RestErr(
        message, "bad_request", int(HTTPStatus.BAD_REQUEST), list(args) or None
    )


def internal_server(message: str) -> RestErr:
    """A 500 error."""
    return RestErr(message, "internal_server", int(HTTPStatus.INTERNAL_SERVER_ERROR))


def not_found(message: str) -> RestErr:
    """A 404 error."""
    return RestErr(message, "not_found", int(HTTPStatus.NOT_FOUND))


def convert_error(error: InternalError) -> RestErr:
    """Map a domain error onto the matching HTTP error."""
    if error.err == "bad_request":
        return bad_request(str(error))
    if error.err == "not_found":
        return not_found(str(error))
    return internal_server(str(error))
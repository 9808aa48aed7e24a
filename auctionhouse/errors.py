"""Domain errors raised by entities, use cases and repositories."""

from __future__ import annotations


class InternalError(Exception):
    """Base domain error: a message plus a machine-readable kind."""

    err = "internal_server_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(InternalError):
    """The requested resource does not exist."""

    err = "not_found"


class InternalServerError(InternalError):
    """Something failed on the server side."""

    err = "internal_server_error"


class BadRequestError(InternalError):
    """The input given by the caller is invalid."""

    err = "bad_request"
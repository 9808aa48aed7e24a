import pytest

from auctionhouse.errors import (
    BadRequestError,
    InternalError,
    InternalServerError,
    NotFoundError,
)


@pytest.mark.parametrize(
    "cls, kind",
    [
        (NotFoundError, "not_found"),
        (InternalServerError, "internal_server_error"),
        (BadRequestError, "bad_request"),
    ],
)
def test_kind_and_message(cls, kind):
    error = cls("something happened")
    assert error.err == kind
    assert error.message == "something happened"
    assert str(error) == "something happened"


def test_subclasses_are_internal_errors():
    error = NotFoundError("missing")
    assert isinstance(error, InternalError)
    assert error.err == "not_found"
    assert str(error) == "missing"


def test_base_error_defaults_to_server_kind():
    error = InternalError("boom")
    assert error.err == "internal_server_error"
    assert str(error) == "boom"
import json

from auctionhouse.errors import BadRequestError, InternalServerError, NotFoundError
from auctionhouse.rest_err import (
    Cause,
    RestErr,
    bad_request,
    convert_error,
    internal_server,
    not_found,
)


def test_bad_request_without_causes():
    err = bad_request("invalid")
    assert err.code == 400
    assert err.err == "bad_request"
    assert err.causes is None
    assert str(err) == "invalid"


def test_bad_request_with_causes_serialises():
    cause = Cause(field="auctionId", message="Invalid UUID value")
    err = bad_request("Invalid fields", cause)
    assert err.causes == [cause]
    assert err.to_dict() == {
        "message": "Invalid fields",
        "err": "bad_request",
        "code": 400,
        "causes": [{"field": "auctionId", "message": "Invalid UUID value"}],
    }


def test_not_found_and_internal_server():
    assert (not_found("x").code, not_found("x").err) == (404, "not_found")
    assert (internal_server("y").code, internal_server("y").err) == (
        500,
        "internal_server",
    )


def test_to_dict_is_json_serialisable():
    encoded = json.dumps(not_found("gone").to_dict())
    assert json.loads(encoded)["causes"] is None


def test_convert_error_maps_kinds():
    assert convert_error(BadRequestError("b")).code == 400
    assert convert_error(NotFoundError("n")).code == 404
    converted = convert_error(InternalServerError("i"))
    assert converted.code == 500
    assert converted.message == "i"


def test_rest_err_is_an_exception():
    result = bad_request("nope")
    assert isinstance(result, RestErr)
    assert isinstance(result, Exception)
    assert result.message == "nope"
    assert str(result) == "nope"
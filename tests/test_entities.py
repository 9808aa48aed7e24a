import uuid

import pytest

from auctionhouse.entities import (
    Auction,
    AuctionStatus,
    Bid,
    ProductCondition,
    User,
    is_valid_uuid,
)
from auctionhouse.errors import BadRequestError

LONG_DESCRIPTION = "A well kept product in its box"


@pytest.mark.parametrize(
    "code, condition",
    [
        (1, ProductCondition.NEW),
        (2, ProductCondition.USED),
        (3, ProductCondition.REFURBISHED),
    ],
)
def test_condition_codes_match_storage_values(code, condition):
    auction = Auction.create("Phone", "Electronics", "short", code)
    assert auction.condition is condition
    assert auction.condition.value == code
    assert auction.status.value == 0


def test_create_auction_is_active_with_fresh_id():
    auction = Auction.create("Phone", "Electronics", LONG_DESCRIPTION, 1)
    assert auction.status is AuctionStatus.ACTIVE
    assert auction.condition is ProductCondition.NEW
    assert is_valid_uuid(auction.id)
    assert auction.product_name == "Phone"
    assert auction.timestamp.tzinfo is not None
    other = Auction.create("Phone", "Electronics", LONG_DESCRIPTION, 1)
    assert other.id != auction.id and other.product_name == auction.product_name


@pytest.mark.parametrize(
    "name, category",
    [("P", "Electronics"), ("Phone", "El"), ("", "")],
)
def test_create_auction_rejects_short_fields(name, category):
    with pytest.raises(BadRequestError, match="invalid auction object"):
        Auction.create(name, category, LONG_DESCRIPTION, 1)


def test_short_description_needs_known_condition():
    with pytest.raises(BadRequestError):
        Auction.create("Phone", "Electronics", "short", 0)
    auction = Auction.create("Phone", "Electronics", "short", 3)
    assert auction.condition is ProductCondition.REFURBISHED


def test_long_description_allows_unknown_condition():
    auction = Auction.create("Phone", "Electronics", LONG_DESCRIPTION, 0)
    assert auction.condition == 0


def test_create_bid_valid():
    user_id, auction_id = str(uuid.uuid4()), str(uuid.uuid4())
    bid = Bid.create(user_id, auction_id, 10.5)
    assert (bid.user_id, bid.auction_id, bid.amount) == (user_id, auction_id, 10.5)
    assert is_valid_uuid(bid.id)


@pytest.mark.parametrize(
    "user_id, auction_id, amount, message",
    [
        ("nope", str(uuid.uuid4()), 1.0, "UserId is not a valid id"),
        (str(uuid.uuid4()), "nope", 1.0, "AuctionId is not a valid id"),
        (str(uuid.uuid4()), str(uuid.uuid4()), 0.0, "Amount is not a valid value"),
        (str(uuid.uuid4()), str(uuid.uuid4()), -3.0, "Amount is not a valid value"),
        ("nope", "nope", -1.0, "UserId is not a valid id"),
    ],
)
def test_create_bid_rejects(user_id, auction_id, amount, message):
    with pytest.raises(BadRequestError) as info:
        Bid.create(user_id, auction_id, amount)
    assert str(info.value) == message


def test_is_valid_uuid_forms():
    value = uuid.uuid4()
    assert is_valid_uuid(str(value))
    assert is_valid_uuid(str(value).upper())
    assert is_valid_uuid("{" + str(value) + "}")
    assert is_valid_uuid("urn:uuid:" + str(value))
    assert is_valid_uuid("URN:UUID:" + str(value))
    assert is_valid_uuid(value.hex)


@pytest.mark.parametrize(
    "text",
    ["", "abc", "(" + "0" * 36 + ")", "g" * 32, "0" * 35, "xxx:uuid:" + "0" * 36],
)
def test_is_valid_uuid_rejects(text):
    assert is_valid_uuid(text) is False


def test_is_valid_uuid_rejects_misplaced_hyphens():
    value = str(uuid.uuid4()).replace("-", "")
    shuffled = value[:4] + "-" + value[4:8] + value[8:12] + "-" + value[12:] + "--"
    assert len(shuffled) == 36
    assert is_valid_uuid(shuffled) is False


def test_user_holds_fields():
    user = User(id="1", name="Ana")
    assert (user.id, user.name) == ("1", "Ana")
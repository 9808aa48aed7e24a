"""Core domain entities: auctions, bids and users."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from auctionhouse.errors import BadRequestError

_HEX36 = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_HEX32 = re.compile(r"[0-9a-fA-F]{32}")


class ProductCondition(IntEnum):
    NEW = 1
    USED = 2
    REFURBISHED = 3


class AuctionStatus(IntEnum):
    ACTIVE = 0
    COMPLETED = 1


def is_valid_uuid(value: object) -> bool:
    """Accept the plain, braced, URN and hyphen-less textual UUID forms."""
    if not isinstance(value, str):
        return False
    if len(value) == 45:
        if value[:9].lower() != "urn:uuid:":
            return False
        value = value[9:]
    elif len(value) == 38:
        if value[0] != "{" or value[-1] != "}":
            return False
        value = value[1:-1]
    if len(value) == 36:
        return _HEX36.fullmatch(value) is not None
    if len(value) == 32:
        return _HEX32.fullmatch(value) is not None
    return False


def _condition(value: int) -> int:
    try:
        return ProductCondition(value)
    except ValueError:
        return int(value)


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Auction:
    """An item put up for bidding."""

    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: AuctionStatus = AuctionStatus.ACTIVE
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def create(
        cls, product_name: str, category: str, description: str, condition: int
    ) -> Auction:
        """Build a new active auction, raising BadRequestError when invalid."""
        auction = cls(
            id=str(uuid.uuid4()),
            product_name=product_name,
            category=category,
            description=description,
            condition=_condition(condition),
            status=AuctionStatus.ACTIVE,
            timestamp=_now(),
        )
        auction.validate()
        return auction

    def validate(self) -> None:
        known_condition = self.condition in tuple(ProductCondition)
        if (
            _byte_length(self.product_name) <= 1
            or _byte_length(self.category) <= 2
            or (_byte_length(self.description) <= 10 and not known_condition)
        ):
            raise BadRequestError("invalid auction object")


@dataclass
class Bid:
    """An offer made by a user on an auction."""

    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def create(cls, user_id: str, auction_id: str, amount: float) -> Bid:
        """Build a new bid, raising BadRequestError when invalid."""
        bid = cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            auction_id=auction_id,
            amount=amount,
            timestamp=_now(),
        )
        bid.validate()
        return bid

    def validate(self) -> None:
        if not is_valid_uuid(self.user_id):
            raise BadRequestError("UserId is not a valid id")
        if not is_valid_uuid(self.auction_id):
            raise BadRequestError("AuctionId is not a valid id")
        if self.amount <= 0:
            raise BadRequestError("Amount is not a valid value")


@dataclass
class User:
    """A registered bidder."""

    id: str
    name: str
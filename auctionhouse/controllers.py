"""HTTP-agnostic request handlers returning a status code and a JSON body."""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any

from auctionhouse.auction_usecase import AuctionUseCase
from auctionhouse.bid_usecase import BidUseCase
from auctionhouse.entities import is_valid_uuid
from auctionhouse.errors import InternalError
from auctionhouse.rest_err import Cause, RestErr, bad_request, convert_error
from auctionhouse.user_usecase import UserUseCase
from auctionhouse.validation import (
    parse_auction_input,
    parse_bid_input,
    parse_user_input,
)

Reply = tuple[int, Any]
"""A status code and a JSON-ready body; a None body means an empty response."""

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def _error(err: RestErr) -> Reply:
    return err.code, err.to_dict()


def _invalid_id(field: str) -> Reply:
    return _error(bad_request("Invalid fields", Cause(field, "Invalid UUID value")))


def _parse_status(text: str | None) -> int | None:
    if text is None or _DECIMAL.fullmatch(text) is None:
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


class AuctionController:
    """Handlers for the auction endpoints."""

    def __init__(self, auction_usecase: AuctionUseCase) -> None:
        self.auction_usecase = auction_usecase

    def create_auction(self, payload: Any) -> Reply:
        try:
            auction_input = parse_auction_input(payload)
        except RestErr as err:
            return _error(err)
        try:
            self.auction_usecase.create_auction(auction_input)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.CREATED), None

    def find_auction_by_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            auction = self.auction_usecase.find_auction_by_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), auction.to_dict()

    def find_auctions(
        self, status: str | None, category: str = "", product_name: str = ""
    ) -> Reply:
        status_number = _parse_status(status)
        if status_number is None:
            return _error(
                bad_request("Error trying to validate auction status param")
            )
        try:
            auctions = self.auction_usecase.find_auctions(
                status_number, category or "", product_name or ""
            )
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), [auction.to_dict() for auction in auctions]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            winning = self.auction_usecase.find_winning_bid_by_auction_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), winning.to_dict()


class BidController:
    """Handlers for the bid endpoints."""

    def __init__(self, bid_usecase: BidUseCase) -> None:
        self.bid_usecase = bid_usecase

    def create_bid(self, payload: Any) -> Reply:
        try:
            bid_input = parse_bid_input(payload)
        except RestErr as err:
            return _error(err)
        try:
            self.bid_usecase.create_bid(bid_input)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.CREATED), None

    def find_bid_by_auction_id(self, auction_id: str) -> Reply:
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            bids = self.bid_usecase.find_bid_by_auction_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), [bid.to_dict() for bid in bids]


class UserController:
    """Handlers for the user endpoints."""

    def __init__(self, user_usecase: UserUseCase) -> None:
        self.user_usecase = user_usecase

    def create_user(self, payload: Any) -> Reply:
        try:
            user_input = parse_user_input(payload)
        except RestErr as err:
            return _error(err)
        try:
            user = self.user_usecase.create_user(user_input)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.CREATED), user.to_dict()

    def find_users(self) -> Reply:
        try:
            users = self.user_usecase.find_users()
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), [user.to_dict() for user in users]

    def find_user_by_id(self, user_id: str) -> Reply:
        if not is_valid_uuid(user_id):
            return _invalid_id("userId")
        try:
            user = self.user_usecase.find_user_by_id(user_id)
        except InternalError as err:
            return _error(convert_error(err))
        return int(HTTPStatus.OK), user.to_dict()
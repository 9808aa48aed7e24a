"""Auction use cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from auctionhouse import logger
from auctionhouse.bid_usecase import BidOutputDTO
from auctionhouse.entities import Auction, Bid
from auctionhouse.errors import InternalError


class _AuctionRepository(Protocol):
    def create_auction(self, auction: Auction) -> None: ...

    def find_auction_by_id(self, auction_id: str) -> Auction: ...

    def find_auctions(
        self, status: int, category: str, product_name: str
    ) -> list[Auction]: ...


class _WinningBidRepository(Protocol):
    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


@dataclass(frozen=True)
class AuctionInputDTO:
    """An auction as submitted by a client."""

    product_name: str
    category: str
    description: str
    condition: int


@dataclass(frozen=True)
class AuctionOutputDTO:
    """An auction as returned to a client."""

    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: int
    timestamp: datetime

    @classmethod
    def from_entity(cls, auction: Auction) -> AuctionOutputDTO:
        return cls(
            id=auction.id,
            product_name=auction.product_name,
            category=auction.category,
            description=auction.description,
            condition=int(auction.condition),
            status=int(auction.status),
            timestamp=auction.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_name": self.product_name,
            "category": self.category,
            "description": self.description,
            "condition": self.condition,
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class WinningInfoOutputDTO:
    """An auction together with its highest bid, if any."""

    auction: AuctionOutputDTO
    bid: BidOutputDTO | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"auction": self.auction.to_dict()}
        if self.bid is not None:
            data["bid"] = self.bid.to_dict()
        return data


class AuctionUseCase:
    """Create and look up auctions and their winners."""

    def __init__(
        self,
        auction_repository: _AuctionRepository,
        bid_repository: _WinningBidRepository,
    ) -> None:
        self.auction_repository = auction_repository
        self.bid_repository = bid_repository

    def create_auction(self, auction_input: AuctionInputDTO) -> None:
        auction = Auction.create(
            auction_input.product_name,
            auction_input.category,
            auction_input.description,
            auction_input.condition,
        )
        self.auction_repository.create_auction(auction)

    def find_auction_by_id(self, auction_id: str) -> AuctionOutputDTO:
        return AuctionOutputDTO.from_entity(
            self.auction_repository.find_auction_by_id(auction_id)
        )

    def find_auctions(
        self, status: int, category: str, product_name: str
    ) -> list[AuctionOutputDTO]:
        auctions = self.auction_repository.find_auctions(status, category, product_name)
        return [AuctionOutputDTO.from_entity(auction) for auction in auctions]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> WinningInfoOutputDTO:
        """The auction and its winning bid; the bid is None when none is found."""
        auction = self.auction_repository.find_auction_by_id(auction_id)
        auction_output = AuctionOutputDTO.from_entity(auction)
        try:
            winning = self.bid_repository.find_winning_bid_by_auction_id(auction.id)
        except InternalError as exc:
            logger.error("", exc)
            return WinningInfoOutputDTO(auction=auction_output, bid=None)
        return WinningInfoOutputDTO(
            auction=auction_output, bid=BidOutputDTO.from_entity(winning)
        )
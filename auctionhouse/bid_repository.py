"""MongoDB storage for bids."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.auction_repository import AuctionRepository, auction_interval_from_env
from auctionhouse.entities import AuctionStatus, Bid
from auctionhouse.errors import InternalError, InternalServerError


def _to_document(bid: Bid) -> dict[str, Any]:
    return {
        "_id": bid.id,
        "user_id": bid.user_id,
        "auction_id": bid.auction_id,
        "amount": bid.amount,
        "timestamp": int(bid.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Bid:
    return Bid(
        id=document["_id"],
        user_id=document["user_id"],
        auction_id=document["auction_id"],
        amount=document["amount"],
        timestamp=datetime.fromtimestamp(document["timestamp"], timezone.utc),
    )


class BidRepository:
    """Stores bids, accepting them only while their auction is still open."""

    def __init__(
        self,
        database: Any,
        auction_repository: AuctionRepository,
        auction_interval: timedelta | None = None,
    ) -> None:
        self.collection = database["bids"]
        self.auction_repository = auction_repository
        self.auction_interval = (
            auction_interval_from_env() if auction_interval is None else auction_interval
        )
        self._status: dict[str, int] = {}
        self._end_time: dict[str, datetime] = {}
        self._status_lock = threading.Lock()
        self._end_time_lock = threading.Lock()

    def create_bid(self, bids: list[Bid]) -> None:
        """Store each bid concurrently; bids on closed auctions are dropped."""
        workers = [
            threading.Thread(target=self._store, args=(bid,), daemon=True)
            for bid in bids
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    def _insert(self, bid: Bid) -> None:
        try:
            self.collection.insert_one(_to_document(bid))
        except PyMongoError as exc:
            logger.error("Error trying to insert bid", exc)

    def _store(self, bid: Bid) -> None:
        with self._status_lock:
            status = self._status.get(bid.auction_id)
        with self._end_time_lock:
            end_time = self._end_time.get(bid.auction_id)

        if status is not None and end_time is not None:
            if status == AuctionStatus.COMPLETED or datetime.now(timezone.utc) > end_time:
                return
            self._insert(bid)
            return

        try:
            auction = self.auction_repository.find_auction_by_id(bid.auction_id)
        except InternalError as exc:
            logger.error("Error trying to find auction by id", exc)
            return
        if auction.status == AuctionStatus.COMPLETED:
            return

        with self._status_lock:
            self._status[bid.auction_id] = auction.status
        with self._end_time_lock:
            self._end_time[bid.auction_id] = auction.timestamp + self.auction_interval

        self._insert(bid)

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]:
        message = f"Error trying to find bids by auctionId {auction_id}"
        try:
            cursor = self.collection.find({"auctionId": auction_id})
        except PyMongoError as exc:
            logger.error(message, exc)
            raise InternalServerError(message) from exc
        try:
            return [_from_document(document) for document in cursor]
        except (PyMongoError, LookupError, ValueError, TypeError) as exc:
            logger.error(message, exc)
            raise InternalServerError(message) from exc

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid:
        """The bid with the highest amount on the given auction."""
        try:
            document = self.collection.find_one(
                {"auction_id": auction_id}, sort=[("amount", -1)]
            )
            if document is None:
                raise LookupError(f"no bids for auction {auction_id}")
            return _from_document(document)
        except (PyMongoError, LookupError, ValueError, TypeError) as exc:
            logger.error("Error trying to find the auction winner", exc)
            raise InternalServerError("Error trying to find the auction winner") from exc
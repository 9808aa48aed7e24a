"""MongoDB storage for auctions."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.config import env_duration
from auctionhouse.entities import Auction, AuctionStatus, ProductCondition
from auctionhouse.errors import InternalServerError

DEFAULT_AUCTION_INTERVAL = timedelta(minutes=5)


def auction_interval_from_env() -> timedelta:
    """How long an auction stays open, from ``AUCTION_INTERVAL`` or five minutes."""
    return env_duration("AUCTION_INTERVAL", DEFAULT_AUCTION_INTERVAL)


def _condition(value: Any) -> int:
    try:
        return ProductCondition(value)
    except ValueError:
        return int(value)


def _status(value: Any) -> int:
    try:
        return AuctionStatus(value)
    except ValueError:
        return int(value)


def _to_document(auction: Auction) -> dict[str, Any]:
    return {
        "_id": auction.id,
        "product_name": auction.product_name,
        "category": auction.category,
        "description": auction.description,
        "condition": int(auction.condition),
        "status": int(auction.status),
        "timestamp": int(auction.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Auction:
    return Auction(
        id=document["_id"],
        product_name=document["product_name"],
        category=document["category"],
        description=document["description"],
        condition=_condition(document["condition"]),
        status=_status(document["status"]),
        timestamp=datetime.fromtimestamp(document["timestamp"], timezone.utc),
    )


class AuctionRepository:
    """Stores auctions and closes each one once its interval has passed."""

    def __init__(self, database: Any, auction_interval: timedelta | None = None) -> None:
        self.collection = database["auctions"]
        self.auction_interval = (
            auction_interval_from_env() if auction_interval is None else auction_interval
        )
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def create_auction(self, auction: Auction) -> None:
        """Insert an auction and schedule it to be marked completed."""
        try:
            self.collection.insert_one(_to_document(auction))
        except PyMongoError as exc:
            logger.error("Error trying to insert auction", exc)
            raise InternalServerError("Error trying to insert auction") from exc

        auction_id = auction.id
        timer = threading.Timer(
            self.auction_interval.total_seconds(),
            lambda: self._complete(auction_id, timer),
        )
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def _complete(self, auction_id: str, timer: threading.Timer) -> None:
        with self._lock:
            self._timers.discard(timer)
        try:
            self.collection.update_one(
                {"_id": auction_id},
                {"$set": {"status": int(AuctionStatus.COMPLETED)}},
            )
        except PyMongoError as exc:
            logger.error("Error trying to update auction status to completed", exc)

    def find_auction_by_id(self, auction_id: str) -> Auction:
        try:
            document = self.collection.find_one({"_id": auction_id})
            if document is None:
                raise LookupError(f"no auction with id {auction_id}")
            return _from_document(document)
        except (PyMongoError, LookupError, ValueError, TypeError) as exc:
            logger.error(f"Error trying to find auction by id = {auction_id}", exc)
            raise InternalServerError("Error trying to find auction by id") from exc

    def find_auctions(
        self, status: int, category: str, product_name: str
    ) -> list[Auction]:
        """Auctions matching the given filters; empty filters match everything."""
        query: dict[str, Any] = {}
        if status != 0:
            query["status"] = int(status)
        if category:
            query["category"] = category
        if product_name:
            query["productName"] = {"$regex": product_name, "$options": "i"}

        try:
            cursor = self.collection.find(query)
        except PyMongoError as exc:
            logger.error("Error finding auctions", exc)
            raise InternalServerError("Error finding auctions") from exc

        try:
            return [_from_document(document) for document in cursor]
        except (PyMongoError, LookupError, ValueError, TypeError) as exc:
            logger.error("Error decoding auctions", exc)
            raise InternalServerError("Error decoding auctions") from exc
        finally:
            close = getattr(cursor, "close", None)
            if callable(close):
                close()

    def close(self) -> None:
        """Cancel every pending status update."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
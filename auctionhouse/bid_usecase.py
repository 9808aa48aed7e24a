"""Bid use cases, including the background batch writer for new bids."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

from auctionhouse import logger
from auctionhouse.config import env_duration, env_int
from auctionhouse.entities import Bid

DEFAULT_MAX_BATCH_SIZE = 5
DEFAULT_BATCH_INSERT_INTERVAL = timedelta(minutes=3)

_STOP = object()


class _BidRepository(Protocol):
    def create_bid(self, bids: list[Bid]) -> None: ...

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]: ...

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


def max_batch_size_from_env() -> int:
    """The batch size from ``MAX_BATCH_SIZE``, or 5."""
    return env_int("MAX_BATCH_SIZE", DEFAULT_MAX_BATCH_SIZE)


def batch_interval_from_env() -> timedelta:
    """The flush interval from ``BATCH_INSERT_INTERVAL``, or three minutes."""
    return env_duration("BATCH_INSERT_INTERVAL", DEFAULT_BATCH_INSERT_INTERVAL)


@dataclass(frozen=True)
class BidInputDTO:
    """A bid as submitted by a client."""

    user_id: str
    auction_id: str
    amount: float


@dataclass(frozen=True)
class BidOutputDTO:
    """A bid as returned to a client."""

    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime

    @classmethod
    def from_entity(cls, bid: Bid) -> BidOutputDTO:
        return cls(
            id=bid.id,
            user_id=bid.user_id,
            auction_id=bid.auction_id,
            amount=bid.amount,
            timestamp=bid.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "auction_id": self.auction_id,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
        }


class BidUseCase:
    """Accepts bids and writes them to the repository in batches.

    A batch is written when it reaches ``max_batch_size`` bids or when
    ``batch_insert_interval`` has passed since the last write.
    """

    def __init__(
        self,
        repository: _BidRepository,
        max_batch_size: int | None = None,
        batch_insert_interval: timedelta | None = None,
    ) -> None:
        self.repository = repository
        self.max_batch_size = (
            max_batch_size_from_env() if max_batch_size is None else max_batch_size
        )
        if self.max_batch_size < 0:
            raise ValueError("max_batch_size must not be negative")
        self.batch_insert_interval = (
            batch_interval_from_env()
            if batch_insert_interval is None
            else batch_insert_interval
        )
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=max(self.max_batch_size, 1))
        self._lock = threading.Lock()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run, name="bid-batch-writer", daemon=True
        )
        self._worker.start()

    def __enter__(self) -> BidUseCase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _flush(self, batch: list[Bid]) -> None:
        if not batch:
            return
        try:
            self.repository.create_bid(list(batch))
        except Exception as exc:  # keep the writer alive whatever the store does
            logger.error("error trying to process bid batch list", exc)

    def _run(self) -> None:
        interval = self.batch_insert_interval.total_seconds()
        clock = threading.Event()
        batch: list[Bid] = []
        deadline = _monotonic() + interval
        while True:
            timeout = max(0.0, deadline - _monotonic())
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                self._flush(batch)
                batch = []
                deadline = _monotonic() + interval
                if interval <= 0:
                    clock.wait(0.001)
                continue
            if item is _STOP:
                self._flush(batch)
                return
            batch.append(item)
            if len(batch) >= self.max_batch_size:
                self._flush(batch)
                batch = []
                deadline = _monotonic() + interval

    def create_bid(self, bid_input: BidInputDTO) -> None:
        """Validate a bid and queue it for writing."""
        bid = Bid.create(bid_input.user_id, bid_input.auction_id, bid_input.amount)
        with self._lock:
            if self._closed:
                raise RuntimeError("bid use case is closed")
            self._queue.put(bid)

    def find_bid_by_auction_id(self, auction_id: str) -> list[BidOutputDTO]:
        return [
            BidOutputDTO.from_entity(bid)
            for bid in self.repository.find_bid_by_auction_id(auction_id)
        ]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> BidOutputDTO:
        return BidOutputDTO.from_entity(
            self.repository.find_winning_bid_by_auction_id(auction_id)
        )

    def close(self) -> None:
        """Stop accepting bids, write what is pending and stop the writer."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._worker.join()


def _monotonic() -> float:
    import time

    return time.monotonic()
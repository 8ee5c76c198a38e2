"""Telemetry record types."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any


class HbEventType(str, Enum):
    """Kind of header-bidding observation carried by a record."""
    INIT = "init"
    REQUEST = "request"
    RESPONSE = "response"
    TIMEOUT = "timeout"
    END = "end"


class AuctionEvent(str, Enum):
    """Auction engine events the adapter subscribes to."""
    AUCTION_INIT = "auctionInit"
    BID_REQUESTED = "bidRequested"
    BID_RESPONSE = "bidResponse"
    BID_TIMEOUT = "bidTimeout"
    AUCTION_END = "auctionEnd"


def now_ms() -> int:
    """Wall clock in integer milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class TelemetryRecord:
    """
    A single observation sent to the collection endpoint.

    Serialized sparsely: a field that is unset (or falsy) is left out of
    the wire form entirely rather than sent as null.
    """
    event: HbEventType

    # Who / where
    bidder: str | None = None
    slot_id: str | None = None
    auction_id: str | None = None

    # Milliseconds
    time_to_respond: int | None = None

    # Forward-compatible payload
    extra: Any = None

    @classmethod
    def create(
        cls,
        event: HbEventType,
        bidder: str | None = None,
        slot_id: str | None = None,
        auction_id: str | None = None,
        time_to_respond: int | None = None,
        extra: Any = None,
    ) -> TelemetryRecord:
        """Factory that normalizes the event kind and latency."""
        if time_to_respond is not None:
            time_to_respond = max(int(time_to_respond), 0)
        return cls(
            event=HbEventType(event),
            bidder=bidder,
            slot_id=slot_id,
            auction_id=auction_id,
            time_to_respond=time_to_respond,
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the endpoint's compact wire form."""
        ev: dict[str, Any] = {"ev": self.event.value}
        if self.bidder:
            ev["n"] = self.bidder
        if self.slot_id:
            ev["sid"] = self.slot_id
        if self.auction_id:
            ev["aid"] = self.auction_id
        if self.time_to_respond:
            ev["ttr"] = self.time_to_respond
        if self.extra:
            ev["args"] = self.extra
        return ev


@dataclass(slots=True)
class AuctionSession:
    """
    Start time of the most recently initialized auction.

    Only one slot is kept: a new auctionInit overwrites it regardless of
    auction id, so overlapping auctions share one start time.
    """
    started_at: int | None = None

    def start(self, now: int) -> None:
        self.started_at = now

    def elapsed(self, now: int) -> int | None:
        """Milliseconds since start, or None if no auction was seen."""
        if self.started_at is None:
            return None
        return now - self.started_at

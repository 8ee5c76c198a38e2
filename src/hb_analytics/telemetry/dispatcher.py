"""Maps auction engine events to telemetry records and delivers them."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Callable

from .events import AuctionEvent, AuctionSession, HbEventType, TelemetryRecord, now_ms
from .transports.base import Transport

if TYPE_CHECKING:
    from ..adapter import AdapterContext


logger = logging.getLogger(__name__)

ENDPOINT_PATH = "/commercial/api/hb"

Translator = Callable[[Any, AuctionSession, int], list[TelemetryRecord]]


# =============================================================================
# Translation functions
# =============================================================================

def track_auction_init(args: Any, session: AuctionSession, now: int) -> list[TelemetryRecord]:
    session.start(now)
    return [TelemetryRecord.create(HbEventType.INIT, auction_id=args.get("auctionId"))]


def track_bid_request(args: Any, session: AuctionSession, now: int) -> list[TelemetryRecord]:
    bidder = args.get("bidderCode")
    return [
        TelemetryRecord.create(HbEventType.REQUEST, bidder=bidder, slot_id=bid.get("adUnitCode"))
        for bid in args["bids"]
    ]


def track_bid_response(args: Any, session: AuctionSession, now: int) -> list[TelemetryRecord]:
    return [TelemetryRecord.create(
        HbEventType.RESPONSE,
        bidder=args.get("bidderCode"),
        slot_id=args.get("adUnitCode"),
        time_to_respond=args.get("timeToRespond"),
    )]


def track_bid_timeout(args: Any, session: AuctionSession, now: int) -> list[TelemetryRecord]:
    """One record per timed-out bid, all stamped with time since auction start."""
    elapsed = session.elapsed(now)
    return [
        TelemetryRecord.create(
            HbEventType.TIMEOUT,
            bidder=bid.get("bidder"),
            slot_id=bid.get("adUnitCode"),
            time_to_respond=elapsed,
        )
        for bid in args
    ]


def track_auction_end(args: Any, session: AuctionSession, now: int) -> list[TelemetryRecord]:
    return [TelemetryRecord.create(
        HbEventType.END,
        auction_id=args.get("auctionId"),
        time_to_respond=session.elapsed(now),
    )]


HANDLERS: dict[AuctionEvent, Translator] = {
    AuctionEvent.AUCTION_INIT: track_auction_init,
    AuctionEvent.BID_REQUESTED: track_bid_request,
    AuctionEvent.BID_RESPONSE: track_bid_response,
    AuctionEvent.BID_TIMEOUT: track_bid_timeout,
    AuctionEvent.AUCTION_END: track_auction_end,
}


# =============================================================================
# Dispatcher
# =============================================================================

class EventDispatcher:
    """
    Translates engine events into records and feeds the activation's queue.

    auctionEnd forces an immediate flush of everything buffered so far;
    all other events wait for the queue's idle timer.
    """

    def __init__(
        self,
        context: AdapterContext,
        transport: Transport,
        clock: Callable[[], int] = now_ms,
    ):
        self.context = context
        self.transport = transport
        self.clock = clock
        self._stats = {
            "tracked": 0,
            "ignored": 0,
            "dropped": 0,
            "deliveries": 0,
            "records_sent": 0,
        }

    @property
    def endpoint_url(self) -> str:
        return f"{self.context.ajax_url}{ENDPOINT_PATH}"

    def track(self, event_type: str, args: Any) -> None:
        """Handle one engine event. Never raises."""
        try:
            kind = AuctionEvent(event_type)
        except ValueError:
            self._stats["ignored"] += 1
            return

        queue = self.context.queue
        if kind is AuctionEvent.AUCTION_INIT and queue is not None:
            queue.init()

        try:
            records = HANDLERS[kind](args, self.context.session, self.clock())
        except (KeyError, TypeError, AttributeError, ValueError, OverflowError) as e:
            logger.debug(f"Dropping malformed {kind.value} payload: {e!r}")
            self._stats["dropped"] += 1
            records = None

        if records is not None:
            self._stats["tracked"] += 1
            if queue is not None:
                queue.push(records)

        if kind is AuctionEvent.AUCTION_END:
            self.send_all()

    def send_all(self) -> None:
        """Drain the queue and hand the batch to the transport, if any."""
        queue = self.context.queue
        if queue is None:
            return

        records = queue.pop_all()
        if not records:
            return

        payload = {**self.context.request_template, "hb_ev": [r.to_dict() for r in records]}
        try:
            body = json.dumps(payload, default=str)
        except ValueError as e:
            logger.warning(f"Cannot serialize {len(records)} analytics records: {e}")
            return

        self._stats["deliveries"] += 1
        self._stats["records_sent"] += len(records)
        self.transport.transmit(self.endpoint_url, body)

    @property
    def stats(self) -> dict:
        """Get dispatcher statistics."""
        return dict(self._stats)

"""Telemetry - auction event records, batching queue and delivery."""

from .events import AuctionEvent, AuctionSession, HbEventType, TelemetryRecord
from .queue import ExpiringQueue
from .dispatcher import EventDispatcher

__all__ = [
    "AuctionEvent",
    "AuctionSession",
    "HbEventType",
    "TelemetryRecord",
    "ExpiringQueue",
    "EventDispatcher",
]

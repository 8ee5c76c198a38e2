"""In-process auction event bus."""

from __future__ import annotations

import logging
from typing import Any, Callable


logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]


class AuctionEventBus:
    """
    Delivers auction engine events to subscribers.

    Delivery is synchronous and in subscription order. A subscriber that
    raises is logged and skipped; the remaining subscribers still receive
    the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._stats = {
            "emitted": 0,
            "errors": 0,
        }

    def subscribe(self, callback: Subscriber) -> None:
        """Register ``callback(event_type, args)``."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, event_type: str, args: Any = None) -> None:
        """Deliver one event to every subscriber."""
        self._stats["emitted"] += 1
        for subscriber in list(self._subscribers):
            try:
                subscriber(event_type, args)
            except Exception as e:
                logger.error(f"Subscriber error on {event_type}: {e}")
                self._stats["errors"] += 1

    @property
    def stats(self) -> dict:
        """Get bus statistics."""
        return {
            **self._stats,
            "subscribers": len(self._subscribers),
        }

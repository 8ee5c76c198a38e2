"""Base transport interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Transport(ABC):
    """
    Abstract base class for outbound delivery.

    A transport receives an already-serialized payload and a destination
    URL. ``transmit`` is fire-and-forget: it must return promptly, must not
    raise, and reports nothing back to the caller.
    """

    @abstractmethod
    def transmit(self, url: str, body: str) -> None:
        """Send ``body`` to ``url`` without waiting for the outcome."""
        ...

    async def drain(self) -> None:
        """Wait for in-flight sends, if the transport has any."""
        pass

    async def aclose(self) -> None:
        """Release resources (called on shutdown)."""
        pass

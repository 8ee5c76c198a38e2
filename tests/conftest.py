"""Shared test fixtures for the analytics adapter tests."""

import json
import sys
from pathlib import Path

import pytest

# Allow running from a source checkout without installing
_REPO_ROOT = Path(__file__).parent.parent
if (_REPO_ROOT / "src" / "hb_analytics").exists():
    sys.path.insert(0, str(_REPO_ROOT / "src"))

from hb_analytics.adapter import AdapterContext, AnalyticsAdapter
from hb_analytics.telemetry.dispatcher import EventDispatcher
from hb_analytics.telemetry.events import AuctionSession
from hb_analytics.telemetry.queue import ExpiringQueue
from hb_analytics.telemetry.transports.base import Transport


AJAX_URL = "https://api.example.com"
PV = "pv-123"

# Short idle window so timer tests stay fast
TTL = 0.1


class RecordingTransport(Transport):
    """Transport that keeps every delivery in memory."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.closed = False

    def transmit(self, url: str, body: str) -> None:
        self.sent.append((url, body))

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(body) for _, body in self.sent]

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = 1_000_000):
        self.now = now

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def options() -> dict:
    """Complete adapter options, as the host page would pass them."""
    return {"options": {"ajaxUrl": AJAX_URL, "pv": PV, "queueTimeout": TTL}}


@pytest.fixture
def adapter(transport, clock) -> AnalyticsAdapter:
    """Adapter that has not been enabled yet."""
    return AnalyticsAdapter(transport=transport, clock=clock)


@pytest.fixture
def context() -> AdapterContext:
    return AdapterContext(
        ajax_url=AJAX_URL,
        pv=PV,
        request_template={"pv": PV},
        session=AuctionSession(),
    )


@pytest.fixture
def dispatcher(context, transport, clock) -> EventDispatcher:
    """Dispatcher wired to a queue with a long TTL (no idle flush during a test)."""
    dispatcher = EventDispatcher(context, transport, clock=clock)
    context.queue = ExpiringQueue(dispatcher.send_all, ttl_seconds=60.0)
    yield dispatcher
    context.queue.close()

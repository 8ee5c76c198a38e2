"""Tests for the in-process auction event bus."""

from hb_analytics.bus import AuctionEventBus


class TestAuctionEventBus:
    def test_delivers_in_subscription_order(self):
        bus = AuctionEventBus()
        received = []
        bus.subscribe(lambda t, a: received.append(("first", t, a)))
        bus.subscribe(lambda t, a: received.append(("second", t, a)))

        bus.emit("auctionInit", {"auctionId": "A1"})

        assert received == [
            ("first", "auctionInit", {"auctionId": "A1"}),
            ("second", "auctionInit", {"auctionId": "A1"}),
        ]

    def test_failing_subscriber_isolated(self):
        bus = AuctionEventBus()
        received = []

        def broken(event_type, args):
            raise ValueError("bad subscriber")

        bus.subscribe(broken)
        bus.subscribe(lambda t, a: received.append(t))

        bus.emit("auctionEnd")

        assert received == ["auctionEnd"]
        assert bus.stats["errors"] == 1
        assert bus.stats["emitted"] == 1

    def test_unsubscribe(self):
        bus = AuctionEventBus()
        received = []

        def subscriber(event_type, args):
            received.append(event_type)

        bus.subscribe(subscriber)
        bus.unsubscribe(subscriber)
        bus.unsubscribe(subscriber)
        bus.emit("auctionInit")

        assert received == []
        assert bus.stats["subscribers"] == 0

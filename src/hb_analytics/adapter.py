"""Analytics adapter: activation, event routing and delivery wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .bus import AuctionEventBus
from .config import AnalyticsConfig, TransportConfig
from .telemetry.dispatcher import EventDispatcher
from .telemetry.events import AuctionSession, now_ms
from .telemetry.queue import ExpiringQueue
from .telemetry.transports import ConsoleTransport, HttpTransport, Transport


logger = logging.getLogger(__name__)

ADAPTER_CODE = "gu"
ANALYTICS_TYPE = "endpoint"


@dataclass
class AdapterContext:
    """State owned by one activation of the adapter."""
    ajax_url: str
    pv: str | int
    request_template: dict[str, Any]
    session: AuctionSession = field(default_factory=AuctionSession)
    queue: ExpiringQueue | None = None


def build_request_template(pv: str | int) -> dict[str, Any]:
    return {"pv": pv}


def create_transport(config: TransportConfig) -> Transport:
    """Create the outbound transport named by config."""
    if config.type == "http":
        options = {"timeout_seconds": config.timeout_seconds, **config.options}
        return HttpTransport(**options)
    if config.type == "console":
        return ConsoleTransport(**config.options)
    logger.warning(f"Unknown transport type {config.type!r}, using http")
    return HttpTransport(timeout_seconds=config.timeout_seconds)


class AnalyticsAdapter:
    """
    Endpoint analytics adapter.

    Starts Inactive. ``enable_analytics`` validates the options and, if
    they are complete, creates the activation's context, queue and
    dispatcher. While Inactive every tracked event is a no-op.

    Usage:
        adapter = AnalyticsAdapter()
        adapter.enable_analytics({"options": {"ajaxUrl": url, "pv": pv}}, bus=bus)
    """

    code = ADAPTER_CODE
    analytics_type = ANALYTICS_TYPE

    def __init__(
        self,
        transport: Transport | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.transport = transport
        self.clock = clock
        self.context: AdapterContext | None = None
        self.dispatcher: EventDispatcher | None = None

    @property
    def is_active(self) -> bool:
        return self.context is not None

    def enable_analytics(
        self,
        config: AnalyticsConfig | dict,
        bus: AuctionEventBus | None = None,
    ) -> bool:
        """
        Activate the adapter.

        Returns False (and stays Inactive) if ajaxUrl or pv is missing.
        An already active adapter is left as is and also returns False.
        """
        if self.is_active:
            logger.warning(f"Analytics adapter '{self.code}' is already enabled")
            return False

        if isinstance(config, dict):
            config = AnalyticsConfig.from_dict(config)
        options = config.options

        if not options.ajax_url:
            logger.error("ajaxUrl is not defined. Analytics won't work")
            return False
        if not options.pv:
            logger.error("pv is not defined. Analytics won't work")
            return False

        if self.transport is None:
            self.transport = create_transport(config.transport)

        context = AdapterContext(
            ajax_url=options.ajax_url,
            pv=options.pv,
            request_template=build_request_template(options.pv),
        )
        dispatcher = EventDispatcher(context, self.transport, clock=self.clock)
        context.queue = ExpiringQueue(dispatcher.send_all, options.queue_timeout_seconds)

        self.context = context
        self.dispatcher = dispatcher

        if bus is not None:
            bus.subscribe(self.track)

        logger.info(
            f"Analytics adapter '{self.code}' enabled "
            f"(endpoint={dispatcher.endpoint_url}, ttl={options.queue_timeout_seconds}s)"
        )
        return True

    def track(self, event_type: str, args: Any = None) -> None:
        """Route one engine event; ignored while Inactive."""
        if self.dispatcher is None:
            return
        self.dispatcher.track(event_type, args)

    async def aclose(self) -> None:
        """Release the timer and transport. Buffered records are not sent."""
        if self.context is not None and self.context.queue is not None:
            self.context.queue.close()
        if self.transport is not None:
            await self.transport.aclose()

#!/usr/bin/env python3
"""
CLI tool for exercising the analytics adapter.

Usage:
    hb-analytics validate config.yaml
    hb-analytics replay events.jsonl --config config.yaml
    hb-analytics replay events.jsonl --config config.yaml --dry-run --speed 10

Event logs are JSON lines of the form:
    {"eventType": "auctionInit", "args": {"auctionId": "A1"}, "delay": 0.2}
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from colorama import Fore, Style, init as colorama_init

from .adapter import AnalyticsAdapter
from .bus import AuctionEventBus
from .config import AnalyticsConfig, ConfigError
from .telemetry.transports import ConsoleTransport


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def load_events(path: str) -> list[dict[str, Any]]:
    """Read a JSONL event log, skipping blank lines."""
    events = []
    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: invalid JSON: {e}") from e
            if not isinstance(entry, dict) or "eventType" not in entry:
                raise ValueError(f"{path}:{lineno}: expected an object with 'eventType'")
            events.append(entry)
    return events


def _load_config(path: str) -> AnalyticsConfig | None:
    try:
        return AnalyticsConfig.from_file(path)
    except ConfigError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return None


async def cmd_validate(args) -> int:
    """Check that a config would activate the adapter."""
    config = _load_config(args.config)
    if config is None:
        return 1

    adapter = AnalyticsAdapter(transport=ConsoleTransport())
    if not adapter.enable_analytics(config):
        print(colorize("Invalid: adapter would stay inactive", Fore.RED))
        return 1

    print(colorize("\nProvider:", Style.BRIGHT), config.provider)
    print(colorize("Endpoint:", Style.BRIGHT), adapter.dispatcher.endpoint_url)
    print(colorize("pv:", Style.BRIGHT), config.options.pv)
    print(colorize("Queue timeout:", Style.BRIGHT), f"{config.options.queue_timeout_seconds}s")
    print(colorize("Transport:", Style.BRIGHT), config.transport.type)
    print(colorize("\nOK", Fore.GREEN))
    await adapter.aclose()
    return 0


async def cmd_replay(args) -> int:
    """Feed a recorded event log through the adapter."""
    config = _load_config(args.config)
    if config is None:
        return 1

    try:
        events = load_events(args.events)
    except (OSError, ValueError) as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1

    transport = ConsoleTransport(stream="stderr") if args.dry_run else None
    adapter = AnalyticsAdapter(transport=transport)
    bus = AuctionEventBus()
    if not adapter.enable_analytics(config, bus=bus):
        return 1

    speed = args.speed if args.speed > 0 else 1.0
    for entry in events:
        delay = float(entry.get("delay", 0) or 0)
        if delay > 0:
            await asyncio.sleep(delay / speed)
        bus.emit(entry["eventType"], entry.get("args"))

    # Give the idle window a chance to flush the tail of the log
    queue = adapter.context.queue
    if len(queue):
        await asyncio.sleep(queue.ttl_seconds + 0.1)

    await adapter.transport.drain()
    await adapter.aclose()

    stats = adapter.dispatcher.stats
    print(colorize("\nEvents:", Style.BRIGHT), len(events))
    print(colorize("Tracked:", Style.BRIGHT), stats["tracked"])
    print(colorize("Ignored:", Style.BRIGHT), stats["ignored"])
    print(colorize("Dropped:", Style.BRIGHT), stats["dropped"])
    print(colorize("Deliveries:", Style.BRIGHT), stats["deliveries"])
    print(colorize("Records sent:", Style.BRIGHT), stats["records_sent"])
    return 0


def main(argv: list[str] | None = None) -> int:
    colorama_init()

    parser = argparse.ArgumentParser(
        description="CLI tool for the header-bidding analytics adapter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Check an adapter config")
    validate_parser.add_argument("config", help="Config file (YAML or JSON)")

    # replay command
    replay_parser = subparsers.add_parser("replay", help="Replay a JSONL event log")
    replay_parser.add_argument("events", help="Event log (JSON lines)")
    replay_parser.add_argument("--config", required=True, help="Config file (YAML or JSON)")
    replay_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print deliveries instead of sending them",
    )
    replay_parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Divide recorded delays by this factor",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "validate":
        return asyncio.run(cmd_validate(args))
    elif args.command == "replay":
        return asyncio.run(cmd_replay(args))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

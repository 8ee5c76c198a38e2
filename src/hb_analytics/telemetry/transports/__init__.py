"""Transports - outbound delivery of telemetry payloads."""

from .base import Transport
from .console import ConsoleTransport
from .http import HttpTransport

__all__ = [
    "Transport",
    "ConsoleTransport",
    "HttpTransport",
]

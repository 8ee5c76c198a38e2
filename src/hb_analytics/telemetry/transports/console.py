"""Console transport for development/debugging."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from .base import Transport


@dataclass
class ConsoleTransport(Transport):
    """
    Transport that writes each delivery to console instead of the network.

    Useful for development and dry runs of the replay CLI.
    """
    # Output destination
    stream: str = "stdout"  # stdout | stderr

    # Prefix for each line
    prefix: str = "[HB] "

    method: str = "PUT"

    def transmit(self, url: str, body: str) -> None:
        out = sys.stdout if self.stream == "stdout" else sys.stderr
        print(f"{self.prefix}{self.method} {url} {body}", file=out)

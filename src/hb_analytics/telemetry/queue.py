"""Expiring queue: buffers records and flushes them after an idle window."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 4.0


class ExpiringQueue(Generic[T]):
    """
    Append-only record buffer with a self-resetting idle timer.

    Every push (and every pop_all) cancels the pending timer and schedules
    a new one ``ttl_seconds`` from now, so auto-flush is a debounce: a
    steady stream of pushes closer together than the TTL keeps postponing
    it until the stream goes quiet.

    When the timer fires against a non-empty buffer, ``on_idle_flush`` is
    called with no arguments; it is expected to call ``pop_all()`` and
    deliver the result. Against an empty buffer the timer is a no-op and
    nothing is rescheduled.

    The buffer is unbounded.
    """

    def __init__(
        self,
        on_idle_flush: Callable[[], None],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.on_idle_flush = on_idle_flush
        self.ttl_seconds = ttl_seconds
        self._loop = loop
        self._buffer: list[T] = []
        self._timer: asyncio.TimerHandle | None = None
        self._stats = {
            "pushed": 0,
            "popped": 0,
            "idle_flushes": 0,
        }

    def push(self, records: T | Sequence[T]) -> None:
        """
        Append one record or an ordered sequence of records.

        Only lists and tuples are unpacked; any other value, iterators
        included, is stored as a single record.
        """
        if isinstance(records, (list, tuple)):
            self._buffer.extend(records)
            self._stats["pushed"] += len(records)
        else:
            self._buffer.append(records)
            self._stats["pushed"] += 1
        self.reset()

    def pop_all(self) -> list[T]:
        """Remove and return everything buffered, oldest first."""
        result = self._buffer
        self._buffer = []
        self._stats["popped"] += len(result)
        self.reset()
        return result

    def peek_all(self) -> list[T]:
        """
        Current buffer contents, not removed.

        For tests and debugging only.
        """
        return self._buffer

    def reset(self) -> None:
        """(Re)start the idle window without touching the buffer."""
        self._cancel_timer()

        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("No running event loop, idle flush not scheduled")
                return

        self._timer = loop.call_later(self.ttl_seconds, self._expire)

    init = reset

    def close(self) -> None:
        """Cancel the pending timer. Buffered records are left in place."""
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self) -> None:
        self._timer = None
        if not self._buffer:
            return

        self._stats["idle_flushes"] += 1
        try:
            self.on_idle_flush()
        except Exception as e:
            logger.error(f"Idle flush callback failed: {e}")

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def stats(self) -> dict:
        """Get queue statistics."""
        return {
            **self._stats,
            "buffer_size": len(self._buffer),
        }

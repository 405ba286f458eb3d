"""Per-client request throttling for the chat endpoint.

The chat service only depends on the :class:`RateLimiter` protocol.  The
in-memory :class:`FixedWindowRateLimiter` keeps its counters in a plain
dict for the lifetime of the process, which is only correct for a single
server instance; a multi-instance deployment would supply an
implementation backed by a shared store such as Redis.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

from loguru import logger


class RateLimiter(Protocol):
    """Capability consulted once per chat request."""

    def check(self, client_id: str) -> bool:
        """Record a request from ``client_id`` and return whether it is allowed."""
        ...


@dataclass
class RateEntry:
    """Counter for one client within the current window."""

    count: int
    window_start: float


class FixedWindowRateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each client id.

    Denied requests still increment the counter.  Entries are never
    evicted.
    """

    def __init__(
        self,
        max_requests: int = 8,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: dict[str, RateEntry] = {}

    def check(self, client_id: str) -> bool:
        now = self._clock()
        entry = self._entries.get(client_id)
        if entry is None or now - entry.window_start > self.window_seconds:
            entry = RateEntry(count=1, window_start=now)
            self._entries[client_id] = entry
        else:
            entry.count += 1

        allowed = entry.count <= self.max_requests
        if not allowed:
            logger.debug(
                "Rate limit hit for client={} ({} requests in window)",
                client_id,
                entry.count,
            )
        return allowed

    def entry(self, client_id: str) -> RateEntry | None:
        """Return the current counter for ``client_id``, if any."""
        return self._entries.get(client_id)

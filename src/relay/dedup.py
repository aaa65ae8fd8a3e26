"""Bounded-lifetime dedup marks for inbound events and per-destination deliveries.

Chat platforms deliver events at least once, so the same message can arrive
twice within a few seconds. Each mark lives for a fixed TTL from first
insertion and is then removed by a timer scheduled on the running loop.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable, Hashable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


class TtlSet:
    """Set whose entries expire ``ttl`` seconds after insertion.

    Args:
        ttl: Lifetime of each entry in seconds.
        clock: Monotonic time source. Membership honours it directly, so a
            fake clock drives expiry in tests without waiting for timers.
    """

    def __init__(self, ttl: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._deadlines: dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            deadline = self._deadlines.get(key)
        return deadline is not None and deadline > self._clock()

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for d in self._deadlines.values() if d > now)

    def add_if_absent(self, key: Hashable) -> bool:
        """Insert ``key``. Returns False if it is already present and unexpired."""
        now = self._clock()
        deadline = now + self._ttl
        with self._lock:
            current = self._deadlines.get(key)
            if current is not None and current > now:
                return False
            self._deadlines[key] = deadline
        self._schedule_expiry(key, deadline, now)
        return True

    def _schedule_expiry(self, key: Hashable, deadline: float, now: float) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to own a timer (sync callers): sweep instead
            self._purge(now)
            return
        loop.call_later(self._ttl, self._expire, key, deadline)

    def _expire(self, key: Hashable, deadline: float) -> None:
        with self._lock:
            # A re-insert after expiry carries a newer deadline and its own timer
            if self._deadlines.get(key) == deadline:
                del self._deadlines[key]

    def _purge(self, now: float) -> None:
        with self._lock:
            expired = [k for k, d in self._deadlines.items() if d <= now]
            for k in expired:
                del self._deadlines[k]

    def clear(self) -> None:
        with self._lock:
            self._deadlines.clear()


class DedupGuard:
    """Suppresses re-processing of events and re-delivery to a destination.

    Both checks mark on first call: the first caller within the TTL window
    gets True, every later caller gets False until the mark expires.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._events = TtlSet(ttl, clock=clock)
        self._deliveries = TtlSet(ttl, clock=clock)

    def should_process(self, event_key: Hashable) -> bool:
        """True the first time ``event_key`` is seen within the window."""
        accepted = self._events.add_if_absent(event_key)
        if not accepted:
            logger.debug("Duplicate event suppressed: %s", event_key)
        return accepted

    def should_deliver(self, event_key: Hashable, destination_channel_id: str) -> bool:
        """True the first time this event is delivered to this destination."""
        accepted = self._deliveries.add_if_absent((event_key, destination_channel_id))
        if not accepted:
            logger.debug(
                "Duplicate delivery suppressed: %s → %s", event_key, destination_channel_id
            )
        return accepted

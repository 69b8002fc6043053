"""Time-bounded cache in front of the log fetcher."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from flowguess.interfaces.fetcher import LogFetcher
from flowguess.models.events import ContractLog
from flowguess.models.stats import CacheStatus

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


@dataclass(frozen=True)
class CacheEntry:
    data: tuple[ContractLog, ...]
    timestamp: float  # clock reading when the fetch completed


class LogCache:
    """Memoizes the full contract log history for ``ttl_seconds``.

    Holds at most one entry, replaced whole after each successful fetch.
    Expiry is checked lazily on read. Concurrent misses share a single
    in-flight fetch; a failed fetch leaves the previous entry in place.

    ``clear()`` and ``get(use_cache=False)`` start a new generation: later
    reads never join a fetch begun before them, and such a fetch no longer
    writes the entry when it completes.
    """

    def __init__(
        self,
        fetcher: LogFetcher,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._ttl = ttl_seconds
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._generation = 0
        self._inflight: asyncio.Task[tuple[ContractLog, ...]] | None = None
        self._inflight_generation = -1

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def is_fresh(self) -> bool:
        return self._fresh_entry() is not None

    def _fresh_entry(self) -> CacheEntry | None:
        entry = self._entry
        if entry is not None and (self._clock() - entry.timestamp) < self._ttl:
            return entry
        return None

    async def get(self, use_cache: bool = True) -> tuple[ContractLog, ...]:
        """Return cached logs if fresh, otherwise fetch and replace the entry."""
        if use_cache:
            entry = self._fresh_entry()
            if entry is not None:
                log.debug("Using cached logs (%d entries)", len(entry.data))
                return entry.data
        else:
            self._generation += 1

        task = self._inflight
        if task is None or self._inflight_generation != self._generation:
            log.info("Fetching fresh logs (use_cache=%s)", use_cache)
            task = asyncio.get_running_loop().create_task(self._refresh(self._generation))
            task.add_done_callback(_consume_exception)
            self._inflight = task
            self._inflight_generation = self._generation
        else:
            log.debug("Joining in-flight fetch")

        # Shielded so one cancelled waiter does not abort the shared fetch
        return await asyncio.shield(task)

    def clear(self) -> None:
        """Discard the cached entry and any fetch begun before this call."""
        self._entry = None
        self._generation += 1
        log.debug("Cache cleared")

    def status(self) -> CacheStatus:
        """Report whether an entry exists and its age. Never fetches."""
        entry = self._entry
        if entry is None:
            return CacheStatus(cached=False)
        age_ms = int((self._clock() - entry.timestamp) * 1000)
        return CacheStatus(cached=True, age_ms=age_ms)

    async def _refresh(self, generation: int) -> tuple[ContractLog, ...]:
        try:
            data = await self._fetcher.fetch_all_logs()
            if generation == self._generation:
                self._entry = CacheEntry(data=data, timestamp=self._clock())
            else:
                log.debug("Discarding logs from superseded fetch")
            return data
        finally:
            if self._inflight_generation == generation:
                self._inflight = None


def _consume_exception(task: asyncio.Task) -> None:
    # Waiters re-raise the error; this only marks it retrieved when every
    # waiter was cancelled first.
    if not task.cancelled():
        task.exception()

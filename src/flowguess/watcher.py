"""Leaderboard watch loop - periodic refresh with stale-data fallback."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Callable

from flowguess.api.data_api import LeaderboardAggregator
from flowguess.errors import NetworkError
from flowguess.interfaces.data_api import DataAPI
from flowguess.leaderboard.service import LeaderboardService
from flowguess.models.config import ServiceConfig
from flowguess.models.snapshots import LeaderboardSnapshot
from flowguess.models.stats import SortBy

log = logging.getLogger(__name__)


class LeaderboardWatcher:
    """Keeps a leaderboard snapshot current.

    Each iteration reads through the service cache, so the explorer is hit
    at most once per cache TTL. When a refresh fails the previous snapshot
    stays available through ``latest``.
    """

    def __init__(
        self,
        service: LeaderboardService,
        sort_by: SortBy | str = SortBy.WINS,
        refresh_interval: float = 60,
        error_backoff: float = 30,
        on_update: Callable[[LeaderboardSnapshot], None] | None = None,
    ) -> None:
        self._service = service
        self._data_api: DataAPI = LeaderboardAggregator(service)
        self._sort_by = SortBy(sort_by)
        self._refresh_interval = refresh_interval
        self._error_backoff = error_backoff
        self._on_update = on_update
        self._running = False
        self.latest: LeaderboardSnapshot | None = None
        self.last_error: str | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def refresh(self) -> LeaderboardSnapshot | None:
        """Run one refresh. Returns the new snapshot, or None on failure."""
        try:
            snapshot = await self._data_api.get_leaderboard(self._sort_by)
        except NetworkError as exc:
            self.last_error = str(exc)
            if self.latest is not None:
                log.warning("Refresh failed, serving previous snapshot: %s", exc)
            else:
                log.error("Refresh failed with no previous snapshot: %s", exc)
            return None

        self.latest = snapshot
        self.last_error = None
        if snapshot.rows:
            leader = snapshot.rows[0]
            log.info(
                "Leaderboard refreshed: %d players, leader %s (%d wins, %s)",
                len(snapshot.rows), leader.player, leader.total_wins,
                leader.total_prizes_won_flow,
            )
        else:
            log.info("Leaderboard refreshed: no players yet")

        if self._on_update is not None:
            self._on_update(snapshot)
        return snapshot

    async def run(self) -> None:
        """Refresh until stop() is called or the task is cancelled."""
        log.info(
            "Starting leaderboard watcher (sort=%s, interval=%ss)",
            self._sort_by.value, self._refresh_interval,
        )
        self._running = True
        try:
            while self._running:
                snapshot = await self.refresh()
                delay = self._refresh_interval if snapshot is not None else self._error_backoff
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            log.info("Watcher cancelled")
        finally:
            self._running = False
            log.info("Watcher stopped")

    async def stop(self) -> None:
        log.info("Stop requested")
        self._running = False


async def run_watcher(
    cfg: ServiceConfig,
    sort_by: SortBy | str | None = None,
    on_update: Callable[[LeaderboardSnapshot], None] | None = None,
) -> None:
    """Entry point for running the watcher until SIGINT/SIGTERM."""
    service = LeaderboardService.from_config(cfg)
    watcher = LeaderboardWatcher(
        service,
        sort_by=sort_by or cfg.default_sort,
        refresh_interval=cfg.refresh_interval,
        error_backoff=cfg.error_backoff,
        on_update=on_update,
    )

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()

    def _signal_handler() -> None:
        # Cancel so a sleeping loop exits immediately
        if task is not None:
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await watcher.run()

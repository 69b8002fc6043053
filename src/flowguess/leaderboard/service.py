"""Leaderboard service - wires fetcher, cache, processor and builder."""

from __future__ import annotations

import logging
import time
from typing import Callable

from flowguess.errors import NetworkError
from flowguess.explorer.fetcher import BlockscoutLogFetcher
from flowguess.interfaces.fetcher import LogFetcher
from flowguess.leaderboard.builder import build_leaderboard
from flowguess.leaderboard.cache import LogCache
from flowguess.leaderboard.processor import process_logs
from flowguess.models.config import ServiceConfig
from flowguess.models.events import ContractLog
from flowguess.models.stats import CacheStatus, LeaderboardEntry, PlayerStats, SortBy

log = logging.getLogger(__name__)


class LeaderboardService:
    """Leaderboard queries over the game contract's event history.

    Each service owns its cache, so independent instances never share
    state. Aggregation is rebuilt from the (possibly cached) logs on
    every call.
    """

    def __init__(
        self,
        fetcher: LogFetcher,
        cache_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._cache = LogCache(fetcher, ttl_seconds=cache_ttl, clock=clock)

    @classmethod
    def from_config(cls, cfg: ServiceConfig) -> LeaderboardService:
        fetcher = BlockscoutLogFetcher(
            base_url=cfg.base_url,
            contract_address=cfg.contract_address,
            request_timeout=cfg.request_timeout,
            fetch_retries=cfg.fetch_retries,
            retry_backoff=cfg.retry_backoff,
            page_delay=cfg.page_delay,
        )
        return cls(fetcher, cache_ttl=cfg.cache_ttl)

    @property
    def cache(self) -> LogCache:
        return self._cache

    # ── Queries ────────────────────────────────────────────

    async def fetch_all_logs(self, use_cache: bool = True) -> tuple[ContractLog, ...]:
        """All decoded contract logs; ``use_cache=False`` forces a re-fetch."""
        return await self._cache.get(use_cache)

    async def get_all_player_stats(self, use_cache: bool = True) -> dict[str, PlayerStats]:
        logs = await self.fetch_all_logs(use_cache)
        return process_logs(logs)

    async def get_leaderboard(
        self,
        sort_by: SortBy | str = SortBy.WINS,
        use_cache: bool = True,
    ) -> list[LeaderboardEntry]:
        """Ranked leaderboard. NetworkError from the fetch propagates unchanged."""
        sort_key = SortBy(sort_by)
        try:
            stats = await self.get_all_player_stats(use_cache)
        except NetworkError as exc:
            log.error("Error generating leaderboard: %s", exc)
            raise
        return build_leaderboard(stats, sort_key)

    async def get_top_players(
        self,
        sort_by: SortBy | str = SortBy.WINS,
        limit: int = 5,
        use_cache: bool = True,
    ) -> list[LeaderboardEntry]:
        entries = await self.get_leaderboard(sort_by, use_cache)
        return entries[:max(0, limit)]

    async def get_player_stats(
        self, address: str, use_cache: bool = True,
    ) -> PlayerStats | None:
        """Stats for one address (case-insensitive), None if it never played."""
        try:
            stats = await self.get_all_player_stats(use_cache)
        except NetworkError as exc:
            log.error("Error getting player stats: %s", exc)
            raise
        return stats.get(address.lower())

    # ── Cache control ──────────────────────────────────────

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_status(self) -> CacheStatus:
        return self._cache.status()

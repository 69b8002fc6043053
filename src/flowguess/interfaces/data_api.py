"""DataAPI protocol - leaderboard snapshots for UI clients."""

from __future__ import annotations

from typing import Protocol

from flowguess.models.snapshots import (
    CacheSnapshot,
    LeaderboardRowSnapshot,
    LeaderboardSnapshot,
    OverviewSnapshot,
    PlayerSnapshot,
)
from flowguess.models.stats import SortBy


class DataAPI(Protocol):
    """Leaderboard state for frontend clients.

    All methods return JSON-serializable dataclasses.
    """

    async def get_leaderboard(
        self,
        sort_by: SortBy | str = SortBy.WINS,
        use_cache: bool = True,
        force_refresh: bool = False,
    ) -> LeaderboardSnapshot:
        """Ranked rows plus overview counters and cache state."""
        ...

    async def get_player(self, address: str, use_cache: bool = True) -> PlayerSnapshot | None:
        """One player's statistics, or None if the address never played."""
        ...

    async def get_top_players(
        self, sort_by: SortBy | str = SortBy.WINS, limit: int = 5,
    ) -> list[LeaderboardRowSnapshot]:
        """First ``limit`` rows, for compact widgets."""
        ...

    async def get_overview(self, use_cache: bool = True) -> OverviewSnapshot:
        ...

    def get_cache(self) -> CacheSnapshot:
        ...

"""Data API aggregator - builds UI snapshots from leaderboard state."""

from __future__ import annotations

import logging
from decimal import Decimal, localcontext

from flowguess.leaderboard.builder import build_leaderboard
from flowguess.leaderboard.service import LeaderboardService
from flowguess.models.snapshots import (
    CacheSnapshot,
    LeaderboardRowSnapshot,
    LeaderboardSnapshot,
    OverviewSnapshot,
    PlayerSnapshot,
)
from flowguess.models.stats import (
    WEI_PER_FLOW,
    LeaderboardEntry,
    PlayerStats,
    SortBy,
)

log = logging.getLogger(__name__)


def format_flow(wei: int, places: int | None = None) -> str:
    """Format a wei amount as FLOW, e.g. ``1500000000000000000`` -> ``"1.5 FLOW"``.

    With ``places`` the value is rounded to that many decimals, otherwise
    trailing zeros are trimmed.
    """
    with localcontext() as ctx:
        ctx.prec = 100  # exact for any uint256 amount
        value = Decimal(wei) / Decimal(WEI_PER_FLOW)
        if places is not None:
            text = f"{value:.{places}f}"
        else:
            text = f"{value:f}"
            if "." in text:
                text = text.rstrip("0").rstrip(".")
    return f"{text} FLOW"


def _pct(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def _row(rank: int, entry: LeaderboardEntry) -> LeaderboardRowSnapshot:
    return LeaderboardRowSnapshot(
        rank=rank,
        player=entry.player,
        total_wins=entry.total_wins,
        total_prizes_won=str(entry.total_prizes_won),
        total_prizes_won_flow=format_flow(entry.total_prizes_won),
        total_guesses=entry.total_guesses,
        win_rate=entry.win_rate,
        win_rate_pct=_pct(entry.win_rate),
        challenges_created=entry.challenges_created,
        last_activity=entry.last_activity,
    )


def _overview(stats: dict[str, PlayerStats]) -> OverviewSnapshot:
    prizes = sum(s.total_prizes_won for s in stats.values())
    return OverviewSnapshot(
        total_players=len(stats),
        total_prizes_awarded=str(prizes),
        total_prizes_awarded_flow=format_flow(prizes),
        total_guesses=sum(s.total_guesses for s in stats.values()),
        total_correct_guesses=sum(s.correct_guesses for s in stats.values()),
        total_challenges=sum(s.challenges_created for s in stats.values()),
    )


class LeaderboardAggregator:
    """Builds JSON-serializable leaderboard snapshots for UI clients."""

    def __init__(self, service: LeaderboardService) -> None:
        self._service = service

    async def get_leaderboard(
        self,
        sort_by: SortBy | str = SortBy.WINS,
        use_cache: bool = True,
        force_refresh: bool = False,
    ) -> LeaderboardSnapshot:
        """Full leaderboard view. ``force_refresh`` drops the cache first."""
        sort_key = SortBy(sort_by)
        if force_refresh:
            log.info("Forced leaderboard refresh")
            self._service.clear_cache()
            use_cache = False

        stats = await self._service.get_all_player_stats(use_cache)
        entries = build_leaderboard(stats, sort_key)
        return LeaderboardSnapshot(
            sort_by=sort_key.value,
            rows=[_row(i, e) for i, e in enumerate(entries, start=1)],
            overview=_overview(stats),
            cache=self.get_cache(),
        )

    async def get_top_players(
        self,
        sort_by: SortBy | str = SortBy.WINS,
        limit: int = 5,
    ) -> list[LeaderboardRowSnapshot]:
        entries = await self._service.get_top_players(sort_by, limit)
        return [_row(i, e) for i, e in enumerate(entries, start=1)]

    async def get_player(self, address: str, use_cache: bool = True) -> PlayerSnapshot | None:
        stats = await self._service.get_all_player_stats(use_cache)
        key = address.lower()
        player = stats.get(key)
        if player is None:
            return None

        ranked = build_leaderboard(stats, SortBy.WINS)
        rank = next((i for i, e in enumerate(ranked, start=1) if e.player == key), None)
        return PlayerSnapshot(
            player=key,
            rank=rank,
            total_wins=player.total_wins,
            total_prizes_won=str(player.total_prizes_won),
            total_prizes_won_flow=format_flow(player.total_prizes_won),
            total_guesses=player.total_guesses,
            correct_guesses=player.correct_guesses,
            win_rate=player.win_rate,
            win_rate_pct=_pct(player.win_rate),
            challenges_created=player.challenges_created,
            last_activity=player.last_activity,
        )

    async def get_overview(self, use_cache: bool = True) -> OverviewSnapshot:
        stats = await self._service.get_all_player_stats(use_cache)
        return _overview(stats)

    def get_cache(self) -> CacheSnapshot:
        status = self._service.get_cache_status()
        if not status.cached or status.age_ms is None:
            return CacheSnapshot(cached=False)
        if status.age_ms == 0:
            return CacheSnapshot(cached=True, age_ms=0, age_seconds=0)
        seconds = status.age_ms // 1000
        return CacheSnapshot(
            cached=True,
            age_ms=status.age_ms,
            age_seconds=seconds,
            label=f"Updated {seconds}s ago",
        )

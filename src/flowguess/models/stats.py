"""Per-player statistics and leaderboard rows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

WEI_PER_FLOW = 10**18

# Players need at least this many guesses to rank on win rate
MIN_GUESSES_FOR_WIN_RATE = 5


class SortBy(str, Enum):
    """Leaderboard ordering policy."""

    WINS = "wins"
    PRIZES = "prizes"
    WIN_RATE = "winRate"
    ACTIVITY = "activity"


@dataclass
class PlayerStats:
    """Accumulated statistics for one address.

    Correct guesses and wins are the same quantity; ``total_wins`` reads
    ``correct_guesses``.
    """

    total_prizes_won: int = 0  # wei
    total_guesses: int = 0
    correct_guesses: int = 0
    challenges_created: int = 0
    last_activity: int = 0  # highest block number seen

    @property
    def total_wins(self) -> int:
        return self.correct_guesses

    @property
    def win_rate(self) -> float:
        if self.total_guesses == 0:
            return 0.0
        return self.correct_guesses / self.total_guesses

    def touch(self, block_number: int) -> None:
        """Record activity at ``block_number``."""
        if block_number > self.last_activity:
            self.last_activity = block_number


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked leaderboard row."""

    player: str
    total_wins: int
    total_prizes_won: int  # wei
    total_guesses: int
    win_rate: float
    challenges_created: int
    last_activity: int

    @classmethod
    def from_stats(cls, player: str, stats: PlayerStats) -> LeaderboardEntry:
        return cls(
            player=player,
            total_wins=stats.total_wins,
            total_prizes_won=stats.total_prizes_won,
            total_guesses=stats.total_guesses,
            win_rate=stats.win_rate,
            challenges_created=stats.challenges_created,
            last_activity=stats.last_activity,
        )


@dataclass(frozen=True)
class CacheStatus:
    cached: bool
    age_ms: int | None = None

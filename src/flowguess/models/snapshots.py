"""JSON-serializable snapshot models for UI clients."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any


def to_dict(obj: Any) -> dict:
    """Recursively convert a snapshot dataclass to a plain dict."""
    return asdict(obj)


@dataclass
class CacheSnapshot:
    cached: bool
    age_ms: int | None = None
    age_seconds: int | None = None
    label: str = "Real-time"  # "Updated 42s ago" once the entry has aged


@dataclass
class LeaderboardRowSnapshot:
    rank: int
    player: str
    total_wins: int
    total_prizes_won: str  # wei, as a decimal string (exceeds JS safe ints)
    total_prizes_won_flow: str  # "1.5 FLOW"
    total_guesses: int
    win_rate: float
    win_rate_pct: str  # "42.9%"
    challenges_created: int
    last_activity: int


@dataclass
class OverviewSnapshot:
    total_players: int = 0
    total_prizes_awarded: str = "0"  # wei
    total_prizes_awarded_flow: str = "0 FLOW"
    total_guesses: int = 0
    total_correct_guesses: int = 0
    total_challenges: int = 0


@dataclass
class LeaderboardSnapshot:
    sort_by: str
    rows: list[LeaderboardRowSnapshot] = field(default_factory=list)
    overview: OverviewSnapshot = field(default_factory=OverviewSnapshot)
    cache: CacheSnapshot = field(default_factory=lambda: CacheSnapshot(cached=False))


@dataclass
class PlayerSnapshot:
    player: str
    rank: int | None  # position on the wins leaderboard
    total_wins: int
    total_prizes_won: str
    total_prizes_won_flow: str
    total_guesses: int
    correct_guesses: int
    win_rate: float
    win_rate_pct: str
    challenges_created: int
    last_activity: int

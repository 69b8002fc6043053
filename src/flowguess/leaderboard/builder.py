"""Ranks player statistics under the leaderboard ordering policies."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Callable, Mapping

from flowguess.models.stats import (
    MIN_GUESSES_FOR_WIN_RATE,
    LeaderboardEntry,
    PlayerStats,
    SortBy,
)

# Win rates closer than this are treated as equal
WIN_RATE_TOLERANCE = 0.001

Comparator = Callable[[LeaderboardEntry, LeaderboardEntry], int]


def _desc(a: int, b: int) -> int:
    """Compare for descending order: negative when ``a`` ranks first."""
    return (a < b) - (a > b)


def _desc_rate(a: float, b: float) -> int:
    if abs(a - b) > WIN_RATE_TOLERANCE:
        return -1 if a > b else 1
    return 0


def _by_wins(a: LeaderboardEntry, b: LeaderboardEntry) -> int:
    return (
        _desc(a.total_wins, b.total_wins)
        or _desc_rate(a.win_rate, b.win_rate)
        or _desc(a.total_guesses, b.total_guesses)
    )


def _by_prizes(a: LeaderboardEntry, b: LeaderboardEntry) -> int:
    return (
        _desc(a.total_prizes_won, b.total_prizes_won)
        or _desc(a.total_wins, b.total_wins)
        or _desc_rate(a.win_rate, b.win_rate)
    )


def _by_win_rate(a: LeaderboardEntry, b: LeaderboardEntry) -> int:
    # Players below the guess minimum always rank after qualified players
    a_qualified = a.total_guesses >= MIN_GUESSES_FOR_WIN_RATE
    b_qualified = b.total_guesses >= MIN_GUESSES_FOR_WIN_RATE
    return (
        _desc(int(a_qualified), int(b_qualified))
        or _desc_rate(a.win_rate, b.win_rate)
        or _desc(a.total_wins, b.total_wins)
        or _desc(a.total_guesses, b.total_guesses)
    )


def _by_activity(a: LeaderboardEntry, b: LeaderboardEntry) -> int:
    return (
        _desc(a.last_activity, b.last_activity)
        or _desc(a.total_guesses, b.total_guesses)
        or _desc(a.total_wins, b.total_wins)
    )


_POLICIES: dict[SortBy, Comparator] = {
    SortBy.WINS: _by_wins,
    SortBy.PRIZES: _by_prizes,
    SortBy.WIN_RATE: _by_win_rate,
    SortBy.ACTIVITY: _by_activity,
}


def build_leaderboard(
    stats: Mapping[str, PlayerStats],
    sort_by: SortBy | str = SortBy.WINS,
) -> list[LeaderboardEntry]:
    """Derive one entry per player and sort by the chosen policy.

    Rows equal under the policy keep address order, so output is
    reproducible for identical input.
    """
    policy = _POLICIES[SortBy(sort_by)]
    entries = [
        LeaderboardEntry.from_stats(player, s)
        for player, s in sorted(stats.items())
    ]
    return sorted(entries, key=cmp_to_key(policy))

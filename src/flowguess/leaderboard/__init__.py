"""Leaderboard aggregation - cache, event processing and ranking."""

from flowguess.leaderboard.builder import build_leaderboard
from flowguess.leaderboard.cache import LogCache
from flowguess.leaderboard.processor import process_logs
from flowguess.leaderboard.service import LeaderboardService

__all__ = ["LeaderboardService", "LogCache", "build_leaderboard", "process_logs"]

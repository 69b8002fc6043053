"""Data models for flowguess."""

from flowguess.models.events import (
    ChallengeCreated,
    ContractLog,
    FeeDistributed,
    GameEvent,
    GuessMade,
    LogParameter,
    PrizeAwarded,
    UnknownEvent,
)
from flowguess.models.stats import (
    CacheStatus,
    LeaderboardEntry,
    PlayerStats,
    SortBy,
)
from flowguess.models.config import ServiceConfig
from flowguess.models.snapshots import (
    CacheSnapshot,
    LeaderboardRowSnapshot,
    LeaderboardSnapshot,
    OverviewSnapshot,
    PlayerSnapshot,
)

__all__ = [
    "ContractLog", "LogParameter", "GameEvent",
    "PrizeAwarded", "GuessMade", "ChallengeCreated", "FeeDistributed", "UnknownEvent",
    "CacheStatus", "LeaderboardEntry", "PlayerStats", "SortBy",
    "ServiceConfig",
    "CacheSnapshot", "LeaderboardRowSnapshot", "LeaderboardSnapshot",
    "OverviewSnapshot", "PlayerSnapshot",
]

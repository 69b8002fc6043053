"""API components - snapshot aggregator for UI clients."""

from flowguess.api.data_api import LeaderboardAggregator, format_flow

__all__ = ["LeaderboardAggregator", "format_flow"]

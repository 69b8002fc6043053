"""flowguess - leaderboard aggregation for the Flow prompt-guessing game."""

__version__ = "0.1.0"

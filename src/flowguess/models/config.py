"""Configuration models for the leaderboard service."""

from __future__ import annotations

from dataclasses import dataclass

from flowguess.models.stats import SortBy

DEFAULT_BASE_URL = "https://evm-testnet.flowscan.io/api/v2"
DEFAULT_CONTRACT_ADDRESS = "0x3300a0e41F13117788Cfb1D9C215d10890c623d9"


@dataclass
class ServiceConfig:
    """Complete service configuration."""

    # Explorer
    base_url: str = DEFAULT_BASE_URL
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    request_timeout: float = 30.0  # seconds per page request
    fetch_retries: int = 3  # attempts per page
    retry_backoff: float = 1.0  # seconds between attempts
    page_delay: float = 0.2  # seconds between pages

    # Cache
    cache_ttl: float = 300.0  # seconds

    # Leaderboard
    default_sort: SortBy = SortBy.WINS
    top_limit: int = 5

    # Watch loop
    refresh_interval: int = 60  # seconds
    error_backoff: int = 30  # seconds

    log_level: str = "info"

"""Protocol interfaces for flowguess components."""

from flowguess.interfaces.fetcher import LogFetcher
from flowguess.interfaces.data_api import DataAPI

__all__ = ["LogFetcher", "DataAPI"]

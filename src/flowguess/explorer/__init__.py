"""Block explorer integration - log fetching and event decoding."""

from flowguess.explorer.fetcher import BlockscoutLogFetcher
from flowguess.explorer.decoder import decode_event

__all__ = ["BlockscoutLogFetcher", "decode_event"]

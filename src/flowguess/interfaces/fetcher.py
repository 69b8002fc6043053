"""LogFetcher protocol - pulls every decoded contract log from an explorer."""

from __future__ import annotations

from typing import Protocol

from flowguess.models.events import ContractLog


class LogFetcher(Protocol):
    """Fetches the complete decoded log history of one contract."""

    async def fetch_all_logs(self) -> tuple[ContractLog, ...]:
        """Walk every page and return all decoded logs in request order.

        Raises NetworkError if any page fails; no partial result is returned.
        """
        ...

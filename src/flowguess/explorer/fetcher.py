"""Blockscout log fetcher - walks the paginated logs API for one contract."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from flowguess.errors import NetworkError
from flowguess.models.events import ContractLog

log = logging.getLogger(__name__)

# Keys of next_page_params forwarded as query parameters
_CURSOR_KEYS = ("block_number", "index", "items_count")


def _cursor_params(cursor: dict[str, Any] | None) -> dict[str, str]:
    if not cursor:
        return {}
    return {k: str(cursor[k]) for k in _CURSOR_KEYS if cursor.get(k) is not None}


class BlockscoutLogFetcher:
    """Fetches every decoded log of a contract from a Blockscout v2 API.

    Pages are requested strictly in order, each one using the
    ``next_page_params`` cursor of the previous response. Logs the explorer
    could not decode are dropped. Any failed page aborts the whole fetch
    with NetworkError.
    """

    def __init__(
        self,
        base_url: str,
        contract_address: str,
        request_timeout: float = 30.0,
        fetch_retries: int = 3,
        retry_backoff: float = 1.0,
        page_delay: float = 0.2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._contract_address = contract_address
        self._timeout = request_timeout
        self._fetch_retries = max(1, fetch_retries)
        self._retry_backoff = retry_backoff
        self._page_delay = page_delay
        self._transport = transport

    @property
    def logs_url(self) -> str:
        return f"{self._base_url}/addresses/{self._contract_address}/logs"

    async def fetch_all_logs(self) -> tuple[ContractLog, ...]:
        """Fetch all pages and return decoded logs in request order."""
        log.info("Fetching contract logs from %s", self.logs_url)
        start = time.monotonic()

        logs: list[ContractLog] = []
        cursor: dict[str, Any] | None = None
        page = 0

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=10),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            while True:
                page += 1
                body = await self._get_page(client, cursor, page)
                decoded = self._decode_items(body, page)
                logs.extend(decoded)
                cursor = body.get("next_page_params")

                log.debug(
                    "Fetched page %d: %d items, %d decoded",
                    page, len(body["items"]), len(decoded),
                )

                if not cursor:
                    break
                # Throttle between pages to stay under the explorer rate limit
                if self._page_delay > 0:
                    await asyncio.sleep(self._page_delay)

        duration = int((time.monotonic() - start) * 1000)
        log.info("Fetched %d decoded logs over %d pages in %dms", len(logs), page, duration)
        return tuple(logs)

    async def _get_page(
        self,
        client: httpx.AsyncClient,
        cursor: dict[str, Any] | None,
        page: int,
    ) -> dict[str, Any]:
        """GET one page, retrying timeouts, transport errors and 5xx/429."""
        url = self.logs_url
        params = _cursor_params(cursor)

        for attempt in range(1, self._fetch_retries + 1):
            try:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                body = resp.json()

            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                retryable = status >= 500 or status == 429
                if retryable and attempt < self._fetch_retries:
                    log.warning(
                        "Page %d returned HTTP %d (attempt %d/%d)",
                        page, status, attempt, self._fetch_retries,
                    )
                    await self._backoff()
                    continue
                log.error("Error fetching page %d: HTTP %d", page, status)
                raise NetworkError(
                    f"Failed to fetch logs: HTTP {status} {exc.response.reason_phrase}",
                    url=str(exc.request.url),
                    status_code=status,
                ) from exc

            except httpx.TransportError as exc:
                kind = "timeout" if isinstance(exc, httpx.TimeoutException) else "transport error"
                if attempt < self._fetch_retries:
                    log.warning(
                        "Page %d %s (attempt %d/%d): %s",
                        page, kind, attempt, self._fetch_retries, exc,
                    )
                    await self._backoff()
                    continue
                log.error("Error fetching page %d: %s: %s", page, kind, exc)
                raise NetworkError(
                    f"Failed to fetch logs: {kind} after {self._fetch_retries} attempts",
                    url=url,
                ) from exc

            except ValueError as exc:
                log.error("Error fetching page %d: invalid JSON body", page)
                raise NetworkError("Failed to fetch logs: invalid JSON body", url=url) from exc

            if not isinstance(body, dict) or not isinstance(body.get("items"), list):
                raise NetworkError("Failed to fetch logs: response has no items list", url=url)
            return body

        # Unreachable: the final attempt either returns or raises
        raise NetworkError("Failed to fetch logs", url=url)

    def _decode_items(self, body: dict[str, Any], page: int) -> list[ContractLog]:
        decoded: list[ContractLog] = []
        for item in body["items"]:
            if not isinstance(item, dict):
                raise NetworkError(f"Failed to fetch logs: malformed item on page {page}")
            try:
                parsed = ContractLog.from_api(item)
            except (AttributeError, TypeError, ValueError) as exc:
                raise NetworkError(
                    f"Failed to fetch logs: malformed item on page {page}: {exc}",
                ) from exc
            if parsed is not None:
                decoded.append(parsed)
        return decoded

    async def _backoff(self) -> None:
        if self._retry_backoff > 0:
            await asyncio.sleep(self._retry_backoff)

"""Shared fixtures for flowguess tests."""

from __future__ import annotations

import pytest
from aiohttp import web
from pytest_metadata.plugin import metadata_key

from flowguess.explorer.fetcher import BlockscoutLogFetcher
from flowguess.leaderboard.service import LeaderboardService
from flowguess.models.config import DEFAULT_CONTRACT_ADDRESS, ServiceConfig

from tests.mocks import ExplorerStub, FakeClock, MockFetcher

EXPLORER_BASE = "https://evm-testnet.flowscan.io"
STUB_PORT = 9310


def explorer_link(kind: str, id: str, label: str | None = None) -> str:
    """Build an HTML anchor to the Flow EVM explorer for the report."""
    url = f"{EXPLORER_BASE}/{kind}/{id}"
    text = label or f"{id[:8]}...{id[-4:]}"
    return f'<a href="{url}" target="_blank">{text}</a>'


# ── Report metadata & explorer links ─────────────────────────────


def pytest_configure(config):
    """Add network info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Flow EVM Testnet"
    meta["Game Contract"] = DEFAULT_CONTRACT_ADDRESS


def pytest_html_results_summary(prefix, summary, postfix):
    """Inject a clickable contract link into the report summary."""
    prefix.append(
        '<div style="margin:8px 0;padding:10px;background:#f8f9fa;border:1px solid #dee2e6;'
        'border-radius:4px;font-family:monospace;font-size:13px;">'
        "<strong>Flow EVM Explorer</strong><br/>"
        f'Game contract: {explorer_link("address", DEFAULT_CONTRACT_ADDRESS, DEFAULT_CONTRACT_ADDRESS)}'
        "</div>"
    )


def make_test_config(**overrides) -> ServiceConfig:
    """Build a ServiceConfig suitable for testing."""
    defaults = dict(
        base_url=f"http://127.0.0.1:{STUB_PORT}/api/v2",
        contract_address=DEFAULT_CONTRACT_ADDRESS,
        request_timeout=5.0,
        fetch_retries=1,
        retry_backoff=0.0,
        page_delay=0.0,
        cache_ttl=300.0,
        refresh_interval=1,
        error_backoff=1,
    )
    defaults.update(overrides)
    return ServiceConfig(**defaults)


@pytest.fixture
def test_config():
    """Default ServiceConfig for tests."""
    return make_test_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_fetcher():
    return MockFetcher()


@pytest.fixture
def service(mock_fetcher, clock):
    """LeaderboardService over a mock fetcher and a manual clock."""
    return LeaderboardService(mock_fetcher, cache_ttl=300.0, clock=clock)


@pytest.fixture
async def explorer_stub():
    """Local Blockscout stub server. Yields the ExplorerStub driving it."""
    stub = ExplorerStub()
    app = web.Application()
    app.router.add_get("/api/v2/addresses/{address}/logs", stub.handle_logs)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", STUB_PORT)
    await site.start()
    yield stub
    await runner.cleanup()


@pytest.fixture
def stub_fetcher(test_config):
    """Real BlockscoutLogFetcher pointed at the local stub."""
    return BlockscoutLogFetcher(
        base_url=test_config.base_url,
        contract_address=test_config.contract_address,
        request_timeout=test_config.request_timeout,
        fetch_retries=test_config.fetch_retries,
        retry_backoff=test_config.retry_backoff,
        page_delay=test_config.page_delay,
    )

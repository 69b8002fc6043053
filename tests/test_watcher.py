"""Leaderboard watcher: refresh, stale fallback and lifecycle."""

from __future__ import annotations

import asyncio

import pytest

from flowguess.leaderboard.service import LeaderboardService
from flowguess.watcher import LeaderboardWatcher

from tests.factories import ALICE, BOB, make_guess_made
from tests.mocks import MockFetcher


@pytest.fixture
def fetcher():
    return MockFetcher([
        make_guess_made(guesser=ALICE, is_correct=True),
        make_guess_made(guesser=BOB),
    ])


@pytest.fixture
def service(fetcher, clock):
    return LeaderboardService(fetcher, cache_ttl=300.0, clock=clock)


async def test_refresh_publishes_snapshot(service):
    updates = []
    watcher = LeaderboardWatcher(service, "wins", on_update=updates.append)

    snapshot = await watcher.refresh()

    assert snapshot is not None
    assert watcher.latest is snapshot
    assert updates == [snapshot]
    assert snapshot.rows[0].player == ALICE.lower()
    assert watcher.last_error is None


async def test_failed_refresh_keeps_previous_snapshot(service, fetcher):
    updates = []
    watcher = LeaderboardWatcher(service, on_update=updates.append)
    first = await watcher.refresh()

    service.clear_cache()
    fetcher.fail_with("explorer down")
    assert await watcher.refresh() is None

    assert watcher.latest is first
    assert watcher.last_error == "explorer down"
    assert updates == [first]

    fetcher.succeed()
    assert await watcher.refresh() is not None
    assert watcher.last_error is None


async def test_failure_without_snapshot(service, fetcher):
    fetcher.fail_with()
    watcher = LeaderboardWatcher(service)
    assert await watcher.refresh() is None
    assert watcher.latest is None


async def test_refresh_reads_through_cache(service, fetcher):
    watcher = LeaderboardWatcher(service)
    await watcher.refresh()
    await watcher.refresh()
    assert fetcher.calls == 1


async def test_run_until_stopped(service):
    seen = []
    watcher = LeaderboardWatcher(service, refresh_interval=0.01, error_backoff=0.01)

    def on_update(snapshot):
        seen.append(snapshot)
        if len(seen) == 3:
            asyncio.get_running_loop().create_task(watcher.stop())

    watcher._on_update = on_update
    await asyncio.wait_for(watcher.run(), timeout=5)

    assert len(seen) >= 3
    assert not watcher.running


async def test_run_exits_cleanly_on_cancel(service):
    watcher = LeaderboardWatcher(service, refresh_interval=60)
    task = asyncio.create_task(watcher.run())

    for _ in range(50):
        if watcher.latest is not None:
            break
        await asyncio.sleep(0.01)
    assert watcher.running

    task.cancel()
    await task  # CancelledError is absorbed by the loop
    assert not watcher.running


async def test_run_backs_off_after_failure(service, fetcher, monkeypatch):
    delays = []
    watcher = LeaderboardWatcher(service, refresh_interval=60, error_backoff=7)
    fetcher.fail_with()

    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)
        if len(delays) == 1:
            fetcher.succeed()
        else:
            await watcher.stop()

    monkeypatch.setattr("flowguess.watcher.asyncio.sleep", fake_sleep)
    await watcher.run()

    assert delays == [7, 60]

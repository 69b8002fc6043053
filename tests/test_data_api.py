"""Data API aggregator snapshots and FLOW formatting."""

from __future__ import annotations

import json
import logging

import pytest

from flowguess.api.data_api import LeaderboardAggregator, format_flow
from flowguess.errors import NetworkError
from flowguess.leaderboard.service import LeaderboardService
from flowguess.models.snapshots import CacheSnapshot, to_dict

from tests.factories import (
    ALICE,
    BOB,
    CAROL,
    ONE_FLOW,
    make_challenge_created,
    make_guess_made,
    make_prize_awarded,
)
from tests.mocks import MockFetcher


@pytest.mark.parametrize(
    "wei, places, expected",
    [
        (0, None, "0 FLOW"),
        (ONE_FLOW, None, "1 FLOW"),
        (ONE_FLOW * 3 // 2, None, "1.5 FLOW"),
        (1, None, "0.000000000000000001 FLOW"),
        (10**30 + 1, None, "1000000000000.000000000000000001 FLOW"),
        (ONE_FLOW * 3 // 2, 2, "1.50 FLOW"),
        (1234567890123456789, 4, "1.2346 FLOW"),
    ],
)
def test_format_flow(wei, places, expected):
    assert format_flow(wei, places) == expected


@pytest.fixture
def fetcher():
    return MockFetcher([
        make_challenge_created(creator=CAROL, block_number=1),
        make_guess_made(guesser=ALICE, is_correct=True, block_number=2),
        make_guess_made(guesser=ALICE, block_number=3),
        make_prize_awarded(winner=ALICE, amount=ONE_FLOW * 5 // 2, block_number=3),
        make_guess_made(guesser=BOB, block_number=4),
        make_guess_made(guesser=BOB, is_correct=True, block_number=5),
        make_guess_made(guesser=BOB, is_correct=True, block_number=6),
    ])


@pytest.fixture
def data_api(fetcher, clock):
    return LeaderboardAggregator(LeaderboardService(fetcher, clock=clock))


async def test_leaderboard_snapshot_rows(data_api):
    snap = await data_api.get_leaderboard("wins")

    assert snap.sort_by == "wins"
    assert [r.rank for r in snap.rows] == [1, 2, 3]
    assert [r.player for r in snap.rows] == [BOB.lower(), ALICE.lower(), CAROL.lower()]

    alice = snap.rows[1]
    assert alice.total_prizes_won == str(ONE_FLOW * 5 // 2)
    assert alice.total_prizes_won_flow == "2.5 FLOW"
    assert alice.win_rate_pct == "50.0%"
    assert snap.rows[0].win_rate_pct == "66.7%"


async def test_leaderboard_overview(data_api):
    o = (await data_api.get_leaderboard()).overview
    assert o.total_players == 3
    assert o.total_guesses == 5
    assert o.total_correct_guesses == 3
    assert o.total_challenges == 1
    assert o.total_prizes_awarded_flow == "2.5 FLOW"
    assert o == await data_api.get_overview()


async def test_snapshot_is_json_serializable(data_api):
    snap = await data_api.get_leaderboard("prizes")
    data = json.loads(json.dumps(to_dict(snap)))
    assert data["rows"][0]["player"] == ALICE.lower()
    assert data["cache"]["cached"] is True


async def test_top_players(data_api):
    rows = await data_api.get_top_players("prizes", limit=1)
    assert len(rows) == 1
    assert rows[0].rank == 1
    assert rows[0].player == ALICE.lower()


async def test_player_snapshot_ranked_by_wins(data_api):
    snap = await data_api.get_player(ALICE.upper().replace("0X", "0x"))
    assert snap is not None
    assert snap.player == ALICE.lower()
    assert snap.rank == 2
    assert snap.correct_guesses == 1
    assert snap.total_prizes_won_flow == "2.5 FLOW"


async def test_unknown_player(data_api):
    assert await data_api.get_player("0x" + "f" * 40) is None


async def test_force_refresh_refetches(data_api, fetcher, caplog):
    caplog.set_level(logging.INFO, logger="flowguess")
    await data_api.get_leaderboard()
    await data_api.get_leaderboard()
    assert fetcher.calls == 1

    await data_api.get_leaderboard(force_refresh=True)
    assert fetcher.calls == 2
    assert "Forced leaderboard refresh" in caplog.text


async def test_cache_label(data_api, clock):
    assert data_api.get_cache() == CacheSnapshot(cached=False)
    assert data_api.get_cache().label == "Real-time"

    await data_api.get_overview()
    clock.advance(42.5)
    cache = data_api.get_cache()
    assert cache.cached is True
    assert cache.age_ms == 42_500
    assert cache.age_seconds == 42
    assert cache.label == "Updated 42s ago"


async def test_cache_label_real_time_for_new_entry(data_api):
    await data_api.get_overview()
    cache = data_api.get_cache()
    assert cache.cached is True
    assert cache.age_ms == 0
    assert cache.label == "Real-time"


async def test_network_error_propagates(data_api, fetcher):
    fetcher.fail_with("explorer down")
    with pytest.raises(NetworkError, match="explorer down"):
        await data_api.get_leaderboard()

"""Folds contract logs into per-player statistics."""

from __future__ import annotations

import logging
from typing import Iterable

from flowguess.errors import MalformedEventError
from flowguess.explorer.decoder import decode_event
from flowguess.models.events import (
    ChallengeCreated,
    ContractLog,
    FeeDistributed,
    GuessMade,
    PrizeAwarded,
)
from flowguess.models.stats import PlayerStats

log = logging.getLogger(__name__)


def process_logs(logs: Iterable[ContractLog]) -> dict[str, PlayerStats]:
    """Aggregate stats keyed by lowercase player address.

    Counters are plain sums and ``last_activity`` is a max, so the result
    does not depend on log order. Logs with missing parameters are skipped.
    """
    stats: dict[str, PlayerStats] = {}
    skipped = 0

    def _player(address: str) -> PlayerStats:
        key = address.lower()
        if key not in stats:
            stats[key] = PlayerStats()
        return stats[key]

    for entry in logs:
        try:
            event = decode_event(entry)
        except MalformedEventError as exc:
            skipped += 1
            log.debug("Skipping log %s#%d: %s", entry.transaction_hash, entry.log_index, exc)
            continue

        if isinstance(event, PrizeAwarded):
            player = _player(event.winner)
            player.total_prizes_won += event.amount
            player.touch(event.block_number)

        elif isinstance(event, GuessMade):
            player = _player(event.guesser)
            player.total_guesses += 1
            if event.is_correct:
                player.correct_guesses += 1
            player.touch(event.block_number)

        elif isinstance(event, ChallengeCreated):
            player = _player(event.creator)
            player.challenges_created += 1
            player.touch(event.block_number)

        elif isinstance(event, FeeDistributed):
            _player(event.creator).touch(event.block_number)

    if skipped:
        log.info("Skipped %d malformed logs", skipped)
    return stats

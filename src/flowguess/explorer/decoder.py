"""Turns decoded explorer logs into typed game events."""

from __future__ import annotations

import logging

from flowguess.errors import MalformedEventError
from flowguess.models.events import (
    SIG_CHALLENGE_CREATED,
    SIG_FEE_DISTRIBUTED,
    SIG_GUESS_MADE,
    SIG_PRIZE_AWARDED,
    ChallengeCreated,
    ContractLog,
    FeeDistributed,
    GameEvent,
    GuessMade,
    PrizeAwarded,
    UnknownEvent,
)

log = logging.getLogger(__name__)


def _required(entry: ContractLog, name: str) -> str:
    value = entry.param(name)
    if not value:
        raise MalformedEventError(entry.method_signature, name)
    return value


def _required_int(entry: ContractLog, name: str) -> int:
    value = _required(entry, name)
    try:
        number = int(value)
    except ValueError:
        raise MalformedEventError(
            entry.method_signature, name, f"not an integer: {value!r}",
        ) from None
    if number < 0:
        raise MalformedEventError(entry.method_signature, name, f"negative: {number}")
    return number


def _optional_int(entry: ContractLog, name: str) -> int | None:
    value = entry.param(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        log.debug("Ignoring non-integer %s=%r in %s", name, value, entry.transaction_hash)
        return None


def decode_event(entry: ContractLog) -> GameEvent:
    """Map a decoded log onto its game event type.

    Signatures are matched exactly. Unrecognized signatures yield
    UnknownEvent. Raises MalformedEventError when a parameter the event
    needs for stats is missing.
    """
    sig = entry.method_signature
    block = entry.block_number

    if sig == SIG_PRIZE_AWARDED:
        return PrizeAwarded(
            challenge_id=_optional_int(entry, "challengeId"),
            winner=_required(entry, "winner"),
            amount=_required_int(entry, "amount"),
            block_number=block,
        )

    elif sig == SIG_GUESS_MADE:
        return GuessMade(
            challenge_id=_optional_int(entry, "challengeId"),
            guesser=_required(entry, "guesser"),
            guess=entry.param("guessString") or "",
            is_correct=entry.param("isCorrect") == "true",
            block_number=block,
        )

    elif sig == SIG_CHALLENGE_CREATED:
        return ChallengeCreated(
            challenge_id=_optional_int(entry, "challengeId"),
            creator=_required(entry, "creator"),
            image_url=entry.param("imageUrl") or "",
            initial_prize_pool=_optional_int(entry, "initialPrizePool"),
            block_number=block,
        )

    elif sig == SIG_FEE_DISTRIBUTED:
        return FeeDistributed(
            challenge_id=_optional_int(entry, "challengeId"),
            creator=_required(entry, "creator"),
            creator_amount=_optional_int(entry, "creatorAmount"),
            platform=entry.param("platform"),
            platform_amount=_optional_int(entry, "platformAmount"),
            block_number=block,
        )

    return UnknownEvent(signature=sig, block_number=block)

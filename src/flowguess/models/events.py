"""Contract log models parsed from the Blockscout logs API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

# Canonical signatures as reported by Blockscout in decoded.method_call
SIG_PRIZE_AWARDED = "PrizeAwarded(uint256 indexed challengeId, address indexed winner, uint256 amount)"
SIG_GUESS_MADE = (
    "GuessMade(uint256 indexed challengeId, address indexed guesser, string guessString, bool isCorrect)"
)
SIG_CHALLENGE_CREATED = (
    "ChallengeCreated(uint256 indexed challengeId, address indexed creator, "
    "string imageUrl, uint256 initialPrizePool)"
)
SIG_FEE_DISTRIBUTED = (
    "FeeDistributed(uint256 indexed challengeId, address indexed creator, "
    "uint256 creatorAmount, address indexed platform, uint256 platformAmount)"
)


@dataclass(frozen=True)
class LogParameter:
    """One decoded event argument."""

    name: str
    value: str  # decimal integer, 0x address, or raw string
    type: str
    indexed: bool = False


@dataclass(frozen=True)
class ContractLog:
    """A single decoded log emitted by the game contract."""

    transaction_hash: str
    block_number: int
    log_index: int
    method_signature: str
    method_id: str = ""
    parameters: tuple[LogParameter, ...] = ()
    topics: tuple[str | None, ...] = ()
    data: str = ""

    def param(self, name: str) -> str | None:
        """Return the value of the named parameter, or None if absent."""
        for p in self.parameters:
            if p.name == name:
                return p.value
        return None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ContractLog | None:
        """Build from one Blockscout ``items[]`` entry.

        Returns None when the explorer could not decode the log.
        """
        decoded = item.get("decoded")
        if not decoded or not decoded.get("method_call"):
            return None

        params = tuple(
            LogParameter(
                name=str(p.get("name", "")),
                value=_value_str(p.get("value")),
                type=str(p.get("type", "")),
                indexed=bool(p.get("indexed", False)),
            )
            for p in decoded.get("parameters") or []
        )
        return cls(
            transaction_hash=item.get("transaction_hash") or "",
            block_number=int(item.get("block_number") or 0),
            log_index=int(item.get("index") or 0),
            method_signature=decoded["method_call"],
            method_id=decoded.get("method_id") or "",
            parameters=params,
            topics=tuple(item.get("topics") or ()),
            data=item.get("data") or "",
        )


def _value_str(value: Any) -> str:
    """Normalize a decoded parameter value to its string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


# ---------------------------------------------------------------------------
# Decoded game events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrizeAwarded:
    """Prize pool paid out to the winner of a challenge."""

    challenge_id: int | None
    winner: str
    amount: int  # wei
    block_number: int


@dataclass(frozen=True)
class GuessMade:
    """A paid guess against a challenge."""

    challenge_id: int | None
    guesser: str
    guess: str
    is_correct: bool
    block_number: int


@dataclass(frozen=True)
class ChallengeCreated:
    challenge_id: int | None
    creator: str
    image_url: str
    initial_prize_pool: int | None  # wei
    block_number: int


@dataclass(frozen=True)
class FeeDistributed:
    """Guess fee split between challenge creator and platform.

    Only counts as activity for the creator; balances are not tracked.
    """

    challenge_id: int | None
    creator: str
    creator_amount: int | None
    platform: str | None
    platform_amount: int | None
    block_number: int


@dataclass(frozen=True)
class UnknownEvent:
    """Any signature the game does not define. Ignored by the processor."""

    signature: str
    block_number: int


GameEvent = Union[PrizeAwarded, GuessMade, ChallengeCreated, FeeDistributed, UnknownEvent]

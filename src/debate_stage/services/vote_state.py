"""Pure vote transition logic.

Given the caller's existing vote on a target (if any) and the requested
direction, decide what happens to the ledger and to the target's counters.
Nothing here touches the database, so every target type shares it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from debate_stage.models.enums import VoteDirection


class LedgerAction(StrEnum):
    """Mutation to apply to the caller's vote record."""

    CREATE = "create"
    DELETE = "delete"
    SWITCH = "switch"


@dataclass(frozen=True)
class CounterDelta:
    """Signed change to a target's up/down counters."""

    upvotes: int = 0
    downvotes: int = 0

    @classmethod
    def for_direction(cls, direction: VoteDirection, amount: int) -> CounterDelta:
        if direction is VoteDirection.UP:
            return cls(upvotes=amount)
        return cls(downvotes=amount)

    def __add__(self, other: CounterDelta) -> CounterDelta:
        return CounterDelta(
            upvotes=self.upvotes + other.upvotes,
            downvotes=self.downvotes + other.downvotes,
        )


@dataclass(frozen=True)
class VoteTransition:
    """Outcome of one vote request."""

    action: LedgerAction
    delta: CounterDelta
    resulting: VoteDirection | None

    @property
    def is_new_vote(self) -> bool:
        return self.action is LedgerAction.CREATE


def decide_vote(existing: VoteDirection | None, requested: VoteDirection) -> VoteTransition:
    """Return the ledger mutation and counter delta for a vote request.

    Casting the direction already on record withdraws the vote; casting the
    opposite direction moves the vote from one counter to the other.
    """
    if existing is None:
        return VoteTransition(
            action=LedgerAction.CREATE,
            delta=CounterDelta.for_direction(requested, 1),
            resulting=requested,
        )

    if existing is requested:
        return VoteTransition(
            action=LedgerAction.DELETE,
            delta=CounterDelta.for_direction(existing, -1),
            resulting=None,
        )

    return VoteTransition(
        action=LedgerAction.SWITCH,
        delta=CounterDelta.for_direction(existing, -1) + CounterDelta.for_direction(requested, 1),
        resulting=requested,
    )

"""Vote casting across claims, evidence, perspectives and replies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from debate_stage.core.errors import NotFoundError, NotificationError
from debate_stage.models.enums import VoteDirection, VoteTargetType
from debate_stage.repositories.ledger import VoteLedger
from debate_stage.services.identity import Identity
from debate_stage.services.notifications import (
    NotificationMessage,
    get_notification_dispatcher,
    vote_received,
)
from debate_stage.services.scoring import ClaimScoreAggregator, get_claim_score_aggregator
from debate_stage.services.targets import (
    VOTE_TARGETS,
    VoteCounters,
    VoteTargetAdapter,
    parse_target_id,
)
from debate_stage.services.vote_state import LedgerAction, VoteTransition, decide_vote

logger = logging.getLogger(__name__)

# A losing concurrent first vote hits the unique constraint once, then sees the winner's row.
_MAX_ATTEMPTS = 2


class Notifier(Protocol):
    def enqueue(self, message: NotificationMessage) -> None: ...


@dataclass(frozen=True)
class ClaimScore:
    id: int
    total_score: float


@dataclass(frozen=True)
class VoteOutcome:
    """What the caller learns after voting."""

    target_type: VoteTargetType
    counters: VoteCounters
    user_vote: VoteDirection | None
    # Present only for evidence/perspective votes whose claim recompute succeeded.
    claim: ClaimScore | None = None


@dataclass(frozen=True)
class _AppliedVote:
    transition: VoteTransition
    counters: VoteCounters
    claim_id: int | None
    author_id: int


class VoteService:
    """Drives the vote state machine against the ledger and the counter store."""

    def __init__(
        self,
        aggregator: ClaimScoreAggregator | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.aggregator = aggregator or get_claim_score_aggregator()
        self.notifier = notifier or get_notification_dispatcher()

    def cast_vote(
        self,
        db: Session,
        target_type: VoteTargetType,
        raw_target_id: str | int,
        identity: Identity,
        direction: VoteDirection,
    ) -> VoteOutcome:
        """Record, switch or withdraw the caller's vote on a target.

        The ledger change and the counter update commit together. The claim
        score cascade and the author notification run afterwards and never
        fail the vote.

        Raises:
            ValidationError: If the target id is malformed.
            NotFoundError: If the target does not exist.
        """
        adapter = VOTE_TARGETS[target_type]
        target_id = parse_target_id(raw_target_id, adapter.label)

        applied: _AppliedVote | None = None
        for attempt in range(1, _MAX_ATTEMPTS + 1):
            try:
                applied = self._apply(db, adapter, target_id, identity.user_id, direction)
                db.commit()
                break
            except IntegrityError:
                db.rollback()
                if attempt == _MAX_ATTEMPTS:
                    raise
                logger.info(
                    "Concurrent vote on %s %d by user %d; retrying",
                    target_type,
                    target_id,
                    identity.user_id,
                )
            except SQLAlchemyError:
                db.rollback()
                raise
        assert applied is not None

        logger.info(
            "User %d %s vote on %s %d (up=%d down=%d)",
            identity.user_id,
            applied.transition.action,
            target_type,
            target_id,
            applied.counters.upvotes,
            applied.counters.downvotes,
        )

        claim: ClaimScore | None = None
        if applied.claim_id is not None:
            total = self.aggregator.refresh_claim_score(db, applied.claim_id)
            if total is not None:
                claim = ClaimScore(id=applied.claim_id, total_score=total)

        if (
            adapter.notifies_author
            and applied.transition.is_new_vote
            and applied.author_id != identity.user_id
        ):
            self._notify(vote_received(applied.author_id, identity.username, direction))

        return VoteOutcome(
            target_type=target_type,
            counters=applied.counters,
            user_vote=applied.transition.resulting,
            claim=claim,
        )

    def _apply(
        self,
        db: Session,
        adapter: VoteTargetAdapter,
        target_id: int,
        user_id: int,
        direction: VoteDirection,
    ) -> _AppliedVote:
        target = adapter.load_target(db, target_id)
        if target is None:
            raise NotFoundError(f"{adapter.label.capitalize()} not found")

        ledger = VoteLedger(db)
        record = ledger.get(adapter.target_type, target_id, user_id)
        existing = VoteDirection(record.direction) if record is not None else None
        transition = decide_vote(existing, direction)

        if transition.action is LedgerAction.CREATE:
            ledger.create(adapter.target_type, target_id, user_id, direction)
        elif transition.action is LedgerAction.DELETE:
            ledger.remove(record)
        else:
            ledger.set_direction(record, direction)

        counters = adapter.apply_delta(db, target, transition.delta)
        return _AppliedVote(
            transition=transition,
            counters=counters,
            claim_id=adapter.parent_claim_id(target),
            author_id=adapter.author_id(target),
        )

    def get_user_vote(
        self,
        db: Session,
        target_type: VoteTargetType,
        raw_target_id: str | int,
        user_id: int,
    ) -> VoteDirection | None:
        """Return the caller's current vote on a target, or None."""
        adapter = VOTE_TARGETS[target_type]
        target_id = parse_target_id(raw_target_id, adapter.label)
        record = VoteLedger(db).get(target_type, target_id, user_id)
        return VoteDirection(record.direction) if record is not None else None

    def _notify(self, message: NotificationMessage) -> None:
        try:
            self.notifier.enqueue(message)
        except NotificationError as err:
            logger.warning("Could not enqueue notification for user %d: %s", message.user_id, err)

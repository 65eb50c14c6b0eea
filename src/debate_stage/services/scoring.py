"""Claim score aggregation.

A claim's ``total_score`` is always recomputed from scratch by re-reading the
counters of its score-eligible evidence and perspectives, never adjusted by
deltas, so any drift in an earlier write is corrected on the next recompute.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from debate_stage.core.errors import AggregationError
from debate_stage.core.settings import settings
from debate_stage.models import Claim, Evidence, Perspective
from debate_stage.models.enums import Position

logger = logging.getLogger(__name__)

ChildKind = Literal["evidence", "perspective"]


@dataclass(frozen=True)
class ChildTally:
    """Counters of one eligible child as read by the aggregator."""

    kind: ChildKind
    position: str
    upvotes: int
    downvotes: int

    @property
    def net_votes(self) -> int:
        return self.upvotes - self.downvotes


ScoringPolicy = Callable[[ChildTally], float]


def net_votes_policy(child: ChildTally) -> float:
    """Each child contributes its own score, evidence and perspectives alike."""
    return float(child.net_votes)


def weighted_position_policy(
    evidence_weight: float,
    perspective_weight: float,
    vote_threshold: int,
) -> ScoringPolicy:
    """Build a policy where each child adds a fixed weight signed by its position.

    Children with more than ``vote_threshold`` total votes count double.
    """

    def _policy(child: ChildTally) -> float:
        weight = evidence_weight if child.kind == "evidence" else perspective_weight
        if child.position != Position.FOR:
            weight = -weight
        if child.upvotes + child.downvotes > vote_threshold:
            weight *= 2
        return weight

    return _policy


def policy_from_settings() -> ScoringPolicy:
    """Return the scoring policy selected by ``CLAIM_SCORE_POLICY``."""
    if settings.claim_score_policy == "weighted_position":
        return weighted_position_policy(
            settings.evidence_position_weight,
            settings.perspective_position_weight,
            settings.weighted_vote_threshold,
        )
    return net_votes_policy


class ClaimScoreAggregator:
    """Recomputes and stores a claim's total score.

    Eligibility is owned by moderation and injected as a set of statuses; only
    children in one of those statuses contribute.
    """

    def __init__(
        self,
        eligible_statuses: Iterable[str] | None = None,
        policy: ScoringPolicy | None = None,
    ) -> None:
        statuses = (
            settings.score_eligible_statuses if eligible_statuses is None else eligible_statuses
        )
        self.eligible_statuses = frozenset(str(status) for status in statuses)
        self.policy = policy or policy_from_settings()

    def is_eligible(self, status: str) -> bool:
        """Return True if a child in ``status`` counts toward its claim."""
        return str(status) in self.eligible_statuses

    def _eligible_children(self, db: Session, claim_id: int) -> list[ChildTally]:
        statuses = sorted(self.eligible_statuses)
        children: list[ChildTally] = []
        for kind, model in (("evidence", Evidence), ("perspective", Perspective)):
            rows = db.execute(
                select(model.position, model.upvotes, model.downvotes)
                .where(model.claim_id == claim_id, model.status.in_(statuses))
                .order_by(model.id)
            ).all()
            children.extend(
                ChildTally(kind=kind, position=position, upvotes=up, downvotes=down)
                for position, up, down in rows
            )
        return children

    def compute_claim_score(self, db: Session, claim_id: int) -> float:
        """Return the score the claim should have without writing it."""
        return float(sum(self.policy(child) for child in self._eligible_children(db, claim_id)))

    def recompute_claim_score(self, db: Session, claim_id: int) -> float:
        """Recompute, persist and return the claim's total score.

        Raises:
            AggregationError: If the claim does not exist or the store fails.
        """
        try:
            claim = db.get(Claim, claim_id)
            if claim is None:
                raise AggregationError(f"Claim with ID {claim_id} not found")
            total = self.compute_claim_score(db, claim_id)
            claim.total_score = total
            db.commit()
        except SQLAlchemyError as err:
            raise AggregationError(f"Failed to recompute score for claim {claim_id}") from err
        logger.debug("Claim %d total score recomputed to %s", claim_id, total)
        return total

    def refresh_claim_score(self, db: Session, claim_id: int) -> float | None:
        """Recompute the claim score, logging and swallowing any failure.

        The caller's own change is already committed; a failure here leaves the
        claim's stored total stale until the next successful recompute.
        """
        try:
            return self.recompute_claim_score(db, claim_id)
        except AggregationError as err:
            db.rollback()
            logger.warning("Claim score aggregation failed: %s", err, exc_info=True)
            return None


class _AggregatorSingleton:
    """Singleton wrapper for ClaimScoreAggregator."""

    _instance: ClaimScoreAggregator | None = None

    @classmethod
    def get_instance(cls) -> ClaimScoreAggregator:
        if cls._instance is None:
            cls._instance = ClaimScoreAggregator()
        return cls._instance


def get_claim_score_aggregator() -> ClaimScoreAggregator:
    """Return the process-wide aggregator configured from settings."""
    return _AggregatorSingleton.get_instance()

"""Content lifecycle operations that move a claim's total score.

Creating a perspective, moving evidence or a perspective into or out of a
score-eligible status, and deleting evidence all change which children feed a
claim. Each commits its own change first and then asks the aggregator for a
fresh total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from debate_stage.core.errors import NotFoundError, PermissionDeniedError
from debate_stage.core.settings import settings
from debate_stage.models import Claim, Evidence, Perspective
from debate_stage.models.enums import ContentStatus, FollowTargetType, Position, VoteTargetType
from debate_stage.repositories.ledger import FollowLedger, VoteLedger
from debate_stage.services.identity import Identity
from debate_stage.services.scoring import ClaimScoreAggregator, get_claim_score_aggregator
from debate_stage.services.targets import parse_target_id
from debate_stage.services.votes import ClaimScore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentOutcome:
    """Entity touched by a lifecycle operation and the claim score it produced."""

    entity: Any
    claim: ClaimScore | None = None


def purge_target(db: Session, target_type: str, target_id: int) -> tuple[int, int]:
    """Delete every vote and follow record pointing at a removed target.

    Returns the number of vote and follow records deleted. Does not commit.
    """
    votes = follows = 0
    if target_type in VoteTargetType.__members__.values():
        votes = VoteLedger(db).purge_target(VoteTargetType(target_type), target_id)
    if target_type in FollowTargetType.__members__.values():
        follows = FollowLedger(db).purge_target(FollowTargetType(target_type), target_id)
    return votes, follows


class ContentService:
    """Perspective creation, moderation status changes and evidence removal."""

    def __init__(self, aggregator: ClaimScoreAggregator | None = None) -> None:
        self.aggregator = aggregator or get_claim_score_aggregator()

    def create_perspective(
        self,
        db: Session,
        raw_claim_id: str | int,
        identity: Identity,
        body: str,
        position: Position,
        title: str | None = None,
    ) -> ContentOutcome:
        """Attach a perspective to a claim and recompute the claim's score."""
        claim_id = parse_target_id(raw_claim_id, "claim")
        if db.get(Claim, claim_id) is None:
            raise NotFoundError("Claim not found")

        status = (
            ContentStatus.APPROVED if settings.perspective_auto_approve else ContentStatus.PENDING
        )
        perspective = Perspective(
            claim_id=claim_id,
            author_id=identity.user_id,
            position=position,
            title=title,
            body=body,
            status=status,
        )
        try:
            db.add(perspective)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(perspective)
        logger.info(
            "User %d added perspective %d to claim %d",
            identity.user_id,
            perspective.id,
            claim_id,
        )

        return ContentOutcome(entity=perspective, claim=self._refresh(db, claim_id))

    def set_perspective_status(
        self,
        db: Session,
        raw_perspective_id: str | int,
        identity: Identity,
        status: ContentStatus,
    ) -> ContentOutcome:
        return self._set_status(
            db, Perspective, "perspective", raw_perspective_id, identity, status
        )

    def set_evidence_status(
        self,
        db: Session,
        raw_evidence_id: str | int,
        identity: Identity,
        status: ContentStatus,
    ) -> ContentOutcome:
        return self._set_status(db, Evidence, "evidence", raw_evidence_id, identity, status)

    def _set_status(
        self,
        db: Session,
        model: type[Evidence] | type[Perspective],
        label: str,
        raw_id: str | int,
        identity: Identity,
        status: ContentStatus,
    ) -> ContentOutcome:
        """Change a child's moderation status.

        The claim is recomputed only when the child crosses the eligibility
        boundary; other transitions cannot change the total.

        Raises:
            PermissionDeniedError: If the caller is not a moderator or admin.
        """
        if not identity.is_moderator:
            raise PermissionDeniedError("Moderator or admin role required")

        target_id = parse_target_id(raw_id, label)
        entity = db.get(model, target_id)
        if entity is None:
            raise NotFoundError(f"{label.capitalize()} not found")

        was_eligible = self.aggregator.is_eligible(entity.status)
        entity.status = status
        claim_id = entity.claim_id
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(entity)
        logger.info("User %d set %s %d status to %s", identity.user_id, label, target_id, status)

        claim: ClaimScore | None = None
        if was_eligible != self.aggregator.is_eligible(status):
            claim = self._refresh(db, claim_id)
        return ContentOutcome(entity=entity, claim=claim)

    def delete_evidence(
        self,
        db: Session,
        raw_evidence_id: str | int,
        identity: Identity,
    ) -> ContentOutcome:
        """Remove evidence with its vote and follow records, then recompute its claim.

        Raises:
            PermissionDeniedError: If the caller is neither the author nor an admin.
        """
        evidence_id = parse_target_id(raw_evidence_id, "evidence")
        evidence = db.get(Evidence, evidence_id)
        if evidence is None:
            raise NotFoundError("Evidence not found")
        if evidence.author_id != identity.user_id and not identity.is_admin:
            raise PermissionDeniedError("Only the author or an admin can delete evidence")

        claim_id = evidence.claim_id
        try:
            votes, follows = purge_target(db, VoteTargetType.EVIDENCE, evidence_id)
            db.delete(evidence)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info(
            "User %d deleted evidence %d (%d votes, %d follows purged)",
            identity.user_id,
            evidence_id,
            votes,
            follows,
        )

        return ContentOutcome(entity=None, claim=self._refresh(db, claim_id))

    def _refresh(self, db: Session, claim_id: int) -> ClaimScore | None:
        total = self.aggregator.refresh_claim_score(db, claim_id)
        if total is None:
            return None
        return ClaimScore(id=claim_id, total_score=total)

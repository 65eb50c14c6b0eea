"""Per-target-type capabilities and the denormalized counter store.

Each votable or followable content type is described once by a small adapter
(how to load it, read its counters, and apply a counter delta). The vote and
follow services stay type-agnostic and look adapters up by target type.

Counter changes are issued as single ``UPDATE`` statements that add the delta
in the database and clamp at zero, so concurrent requests never overwrite each
other's increments the way a read-modify-write would.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from debate_stage.core.errors import ValidationError
from debate_stage.models import Claim, Evidence, Perspective, Reply, User
from debate_stage.models.enums import FollowTargetType, VoteTargetType
from debate_stage.services.vote_state import CounterDelta

# Primary keys are 32-bit INTEGER columns; anything above cannot be stored.
_MAX_ID = 2**31 - 1


@dataclass(frozen=True)
class VoteCounters:
    """Counter snapshot returned to callers after a vote."""

    id: int
    upvotes: int
    downvotes: int
    score: int | None = None


def _clamped(column: Any, delta: int) -> Any:
    """SQL expression for ``max(column + delta, 0)`` that works on every backend."""
    return case((column + delta < 0, 0), else_=column + delta)


def parse_target_id(raw: str | int, label: str) -> int:
    """Validate a path identifier.

    Raises:
        ValidationError: If ``raw`` is not a positive integer.
    """
    if isinstance(raw, int):
        value = raw
    else:
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid {label} ID format")
        value = int(text)
    if value <= 0 or value > _MAX_ID:
        raise ValidationError(f"Invalid {label} ID format")
    return value


@dataclass(frozen=True)
class VoteTargetAdapter:
    """Capabilities the vote service needs from one content type."""

    target_type: VoteTargetType
    model: type[Any]
    label: str
    tracks_score: bool
    # Evidence and perspectives feed their claim's total score.
    feeds_claim_score: bool
    # Reply authors hear about new votes on their replies.
    notifies_author: bool

    def load_target(self, db: Session, target_id: int) -> Any | None:
        return db.get(self.model, target_id)

    def get_counters(self, target: Any) -> VoteCounters:
        return VoteCounters(
            id=target.id,
            upvotes=target.upvotes,
            downvotes=target.downvotes,
            score=target.score if self.tracks_score else None,
        )

    def apply_delta(self, db: Session, target: Any, delta: CounterDelta) -> VoteCounters:
        """Atomically add ``delta`` to the target's counters and refresh it."""
        model = self.model
        new_up = _clamped(model.upvotes, delta.upvotes)
        new_down = _clamped(model.downvotes, delta.downvotes)
        values: dict[str, Any] = {"upvotes": new_up, "downvotes": new_down}
        if self.tracks_score:
            # Right-hand sides see pre-update values, so score is derived from the same clamps.
            values["score"] = new_up - new_down
        db.execute(
            update(model)
            .where(model.id == target.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.refresh(target)
        return self.get_counters(target)

    def parent_claim_id(self, target: Any) -> int | None:
        if not self.feeds_claim_score:
            return None
        return target.claim_id

    def author_id(self, target: Any) -> int:
        return target.author_id


@dataclass(frozen=True)
class FollowTargetAdapter:
    """Capabilities the follow service needs from one followable type."""

    target_type: FollowTargetType
    model: type[Any]
    label: str

    def load_target(self, db: Session, target_id: int) -> Any | None:
        return db.get(self.model, target_id)

    def apply_delta(self, db: Session, target: Any, delta: int) -> int:
        """Atomically add ``delta`` to the target's follow count and return the new value."""
        model = self.model
        db.execute(
            update(model)
            .where(model.id == target.id)
            .values(follow_count=_clamped(model.follow_count, delta))
            .execution_options(synchronize_session=False)
        )
        db.refresh(target)
        return target.follow_count


VOTE_TARGETS: dict[VoteTargetType, VoteTargetAdapter] = {
    VoteTargetType.CLAIM: VoteTargetAdapter(
        target_type=VoteTargetType.CLAIM,
        model=Claim,
        label="claim",
        tracks_score=False,
        feeds_claim_score=False,
        notifies_author=False,
    ),
    VoteTargetType.EVIDENCE: VoteTargetAdapter(
        target_type=VoteTargetType.EVIDENCE,
        model=Evidence,
        label="evidence",
        tracks_score=True,
        feeds_claim_score=True,
        notifies_author=False,
    ),
    VoteTargetType.PERSPECTIVE: VoteTargetAdapter(
        target_type=VoteTargetType.PERSPECTIVE,
        model=Perspective,
        label="perspective",
        tracks_score=True,
        feeds_claim_score=True,
        notifies_author=False,
    ),
    VoteTargetType.REPLY: VoteTargetAdapter(
        target_type=VoteTargetType.REPLY,
        model=Reply,
        label="reply",
        tracks_score=True,
        feeds_claim_score=False,
        notifies_author=True,
    ),
}

FOLLOW_TARGETS: dict[FollowTargetType, FollowTargetAdapter] = {
    FollowTargetType.CLAIM: FollowTargetAdapter(FollowTargetType.CLAIM, Claim, "claim"),
    FollowTargetType.EVIDENCE: FollowTargetAdapter(FollowTargetType.EVIDENCE, Evidence, "evidence"),
    FollowTargetType.PERSPECTIVE: FollowTargetAdapter(
        FollowTargetType.PERSPECTIVE, Perspective, "perspective"
    ),
    FollowTargetType.USER: FollowTargetAdapter(FollowTargetType.USER, User, "user"),
}

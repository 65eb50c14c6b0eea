"""Read side of the vote ledger: who voted on a target."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from debate_stage.db.time import as_utc
from debate_stage.models import User
from debate_stage.models.enums import VoteDirection, VoteTargetType
from debate_stage.repositories.ledger import VoteLedger
from debate_stage.services.targets import VOTE_TARGETS, parse_target_id


@dataclass(frozen=True)
class UserSummary:
    """Public profile fields shown next to a vote."""

    id: int
    username: str
    first_name: str | None
    last_name: str | None
    avatar_url: str | None

    @classmethod
    def from_user(cls, user: User) -> UserSummary:
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar_url=user.avatar_url,
        )


@dataclass(frozen=True)
class VoterView:
    """One live vote joined with its voter."""

    id: int
    user_id: int
    vote_type: str
    created_at: datetime
    user: UserSummary


def list_voters(
    db: Session,
    target_type: VoteTargetType,
    raw_target_id: str | int,
    direction: VoteDirection | None = None,
) -> list[VoterView]:
    """Return the voters on a target, newest vote first.

    An unknown but well-formed id yields an empty list.

    Raises:
        ValidationError: If the target id is malformed.
    """
    adapter = VOTE_TARGETS[target_type]
    target_id = parse_target_id(raw_target_id, adapter.label)
    rows = VoteLedger(db).list_with_voters(target_type, target_id, direction)
    return [
        VoterView(
            id=record.id,
            user_id=record.user_id,
            vote_type=VoteDirection(record.direction).vote_type,
            created_at=as_utc(record.created_at),
            user=UserSummary.from_user(user),
        )
        for record, user in rows
    ]

"""Data access helpers for the vote and follow ledgers."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from debate_stage.models import FollowRecord, User, VoteRecord
from debate_stage.models.enums import FollowTargetType, VoteDirection, VoteTargetType

__all__ = ["VoteLedger", "FollowLedger"]


class VoteLedger:
    """Thin wrapper around database access for vote records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(
        self, target_type: VoteTargetType, target_id: int, user_id: int
    ) -> VoteRecord | None:
        """Return the caller's live vote on a target, if any."""
        return self.session.scalars(
            select(VoteRecord).where(
                VoteRecord.target_type == target_type,
                VoteRecord.target_id == target_id,
                VoteRecord.user_id == user_id,
            )
        ).first()

    def create(
        self,
        target_type: VoteTargetType,
        target_id: int,
        user_id: int,
        direction: VoteDirection,
    ) -> VoteRecord:
        """Insert a vote record; the unique constraint rejects a second live vote."""
        record = VoteRecord(
            target_type=target_type,
            target_id=target_id,
            user_id=user_id,
            direction=int(direction),
        )
        self.session.add(record)
        self.session.flush()
        return record

    def set_direction(self, record: VoteRecord, direction: VoteDirection) -> None:
        record.direction = int(direction)
        self.session.flush()

    def remove(self, record: VoteRecord) -> None:
        self.session.delete(record)
        self.session.flush()

    def list_with_voters(
        self,
        target_type: VoteTargetType,
        target_id: int,
        direction: VoteDirection | None = None,
    ) -> list[tuple[VoteRecord, User]]:
        """Return votes on a target joined with their voters, newest first."""
        stmt = (
            select(VoteRecord, User)
            .join(User, User.id == VoteRecord.user_id)
            .where(
                VoteRecord.target_type == target_type,
                VoteRecord.target_id == target_id,
            )
        )
        if direction is not None:
            stmt = stmt.where(VoteRecord.direction == int(direction))
        stmt = stmt.order_by(VoteRecord.created_at.desc(), VoteRecord.id.desc())
        return [(record, user) for record, user in self.session.execute(stmt).all()]

    def count(
        self,
        target_type: VoteTargetType,
        target_id: int,
        direction: VoteDirection,
    ) -> int:
        """Count live votes of one direction on a target."""
        return (
            self.session.query(VoteRecord)
            .filter(
                VoteRecord.target_type == target_type,
                VoteRecord.target_id == target_id,
                VoteRecord.direction == int(direction),
            )
            .count()
        )

    def purge_target(self, target_type: VoteTargetType, target_id: int) -> int:
        """Delete every vote on a target that is being removed."""
        result = self.session.execute(
            delete(VoteRecord).where(
                VoteRecord.target_type == target_type,
                VoteRecord.target_id == target_id,
            )
        )
        return result.rowcount or 0


class FollowLedger:
    """Thin wrapper around database access for follow records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(
        self, target_type: FollowTargetType, target_id: int, user_id: int
    ) -> FollowRecord | None:
        return self.session.scalars(
            select(FollowRecord).where(
                FollowRecord.target_type == target_type,
                FollowRecord.target_id == target_id,
                FollowRecord.user_id == user_id,
            )
        ).first()

    def create(
        self, target_type: FollowTargetType, target_id: int, user_id: int
    ) -> FollowRecord:
        record = FollowRecord(target_type=target_type, target_id=target_id, user_id=user_id)
        self.session.add(record)
        self.session.flush()
        return record

    def remove(self, record: FollowRecord) -> None:
        self.session.delete(record)
        self.session.flush()

    def followers_of_user(self, user_id: int) -> list[tuple[FollowRecord, User]]:
        """Return users following ``user_id``, newest follow first."""
        stmt = (
            select(FollowRecord, User)
            .join(User, User.id == FollowRecord.user_id)
            .where(
                FollowRecord.target_type == FollowTargetType.USER,
                FollowRecord.target_id == user_id,
            )
            .order_by(FollowRecord.created_at.desc(), FollowRecord.id.desc())
        )
        return [(record, user) for record, user in self.session.execute(stmt).all()]

    def users_followed_by(self, user_id: int) -> list[tuple[FollowRecord, User]]:
        """Return users that ``user_id`` follows, newest follow first."""
        stmt = (
            select(FollowRecord, User)
            .join(User, User.id == FollowRecord.target_id)
            .where(
                FollowRecord.target_type == FollowTargetType.USER,
                FollowRecord.user_id == user_id,
            )
            .order_by(FollowRecord.created_at.desc(), FollowRecord.id.desc())
        )
        return [(record, user) for record, user in self.session.execute(stmt).all()]

    def purge_target(self, target_type: FollowTargetType, target_id: int) -> int:
        result = self.session.execute(
            delete(FollowRecord).where(
                FollowRecord.target_type == target_type,
                FollowRecord.target_id == target_id,
            )
        )
        return result.rowcount or 0

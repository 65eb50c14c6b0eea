# src/debate_stage/models/vote.py
"""Ledger of per-user votes across every votable content type."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from debate_stage.db.session import Base
from debate_stage.db.time import utcnow


class VoteRecord(Base):
    """One live vote by one user on one target.

    Created on the first vote, flipped in place on a direction switch and
    deleted when the same direction is cast again.
    """

    __tablename__ = "vote_record"
    __table_args__ = (
        CheckConstraint("direction IN (1, -1)", name="ck_vote_record_direction"),
        # At most one live vote per user per target.
        UniqueConstraint("target_type", "target_id", "user_id", name="uq_vote_record_target_user"),
        Index("ix_vote_record_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )

    # 1 = upvote, -1 = downvote.
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

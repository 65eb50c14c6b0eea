# src/debate_stage/models/follow.py
"""Ledger of follow relationships between users and targets."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from debate_stage.db.session import Base
from debate_stage.db.time import utcnow


class FollowRecord(Base):
    """Presence of a row means the user follows the target; unfollow deletes it."""

    __tablename__ = "follow_record"
    __table_args__ = (
        UniqueConstraint(
            "target_type", "target_id", "user_id", name="uq_follow_record_target_user"
        ),
        Index("ix_follow_record_target", "target_type", "target_id"),
        Index("ix_follow_record_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

# src/debate_stage/models/perspective.py
"""SQLAlchemy model for free-text perspectives on a claim."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from debate_stage.db.session import Base
from debate_stage.db.time import utcnow
from debate_stage.models.enums import ContentStatus


class Perspective(Base):
    """Argument for or against a claim, auto-approved on creation by default."""

    __tablename__ = "perspective"
    __table_args__ = (
        Index("ix_perspective_claim_status", "claim_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    claim_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("claim.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    position: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ContentStatus.APPROVED
    )

    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    score: Mapped[int] = mapped_column(default=0, nullable=False)
    follow_count: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

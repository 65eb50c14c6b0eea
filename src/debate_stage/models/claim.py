# src/debate_stage/models/claim.py
"""SQLAlchemy model for claims, the root of every debate."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from debate_stage.db.session import Base
from debate_stage.db.time import utcnow
from debate_stage.models.enums import ContentStatus


class Claim(Base):
    """Debatable statement that evidence and perspectives attach to."""

    __tablename__ = "claim"
    __table_args__ = (Index("ix_claim_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ContentStatus.PENDING
    )

    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    # Aggregate of eligible evidence and perspectives; written only by the aggregator.
    total_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    follow_count: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

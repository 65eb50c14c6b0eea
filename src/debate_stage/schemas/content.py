"""Schemas for perspective creation and moderation status changes."""

from datetime import datetime

from pydantic import Field

from debate_stage.models.enums import ContentStatus, Position

from .common import CamelModel


class PerspectiveCreate(CamelModel):
    """Schema for attaching a perspective to a claim."""

    body: str = Field(..., min_length=1, max_length=10000, description="Perspective text")
    position: Position = Field(..., description="for or against the claim")
    title: str | None = Field(None, max_length=500)


class StatusUpdate(CamelModel):
    """Moderation status requested for evidence or a perspective."""

    status: ContentStatus


class PerspectiveResponse(CamelModel):
    id: int
    claim_id: int
    author_id: int
    position: Position
    title: str | None
    body: str
    status: ContentStatus
    upvotes: int
    downvotes: int
    score: int
    follow_count: int
    created_at: datetime


class EvidenceResponse(CamelModel):
    id: int
    claim_id: int
    author_id: int
    position: Position
    title: str | None
    url: str | None
    status: ContentStatus
    upvotes: int
    downvotes: int
    score: int
    follow_count: int
    created_at: datetime

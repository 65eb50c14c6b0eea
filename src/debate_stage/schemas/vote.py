"""Vote-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from debate_stage.models.enums import VoteDirection

from .common import CamelModel, UserSummary

VoteType = Literal["upvote", "downvote"]


class VoteRequest(CamelModel):
    """Schema for casting, switching or withdrawing a vote."""

    vote_type: VoteType = Field(..., description="upvote or downvote")

    @property
    def direction(self) -> VoteDirection:
        return VoteDirection.from_vote_type(self.vote_type)


class VoteCounters(CamelModel):
    """Counters of the voted target; ``score`` is absent for claims."""

    id: int
    upvotes: int
    downvotes: int
    score: int | None = None


class ClaimScore(CamelModel):
    """Parent claim total returned after an evidence or perspective vote."""

    id: int
    total_score: float


class Voter(CamelModel):
    """One entry of a voter listing."""

    id: int
    user_id: int
    vote_type: VoteType
    user: UserSummary
    created_at: datetime

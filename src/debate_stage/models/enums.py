"""Enumerations persisted by the ORM models and shared with the services."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class VoteTargetType(StrEnum):
    """Content types that accept votes."""

    CLAIM = "claim"
    EVIDENCE = "evidence"
    PERSPECTIVE = "perspective"
    REPLY = "reply"


class FollowTargetType(StrEnum):
    """Entities a user can follow."""

    CLAIM = "claim"
    EVIDENCE = "evidence"
    PERSPECTIVE = "perspective"
    USER = "user"


class VoteDirection(IntEnum):
    """Stored vote direction; 1 = up, -1 = down."""

    UP = 1
    DOWN = -1

    @classmethod
    def from_vote_type(cls, vote_type: str) -> VoteDirection:
        """Map the wire value ``upvote``/``downvote`` to a direction."""
        if vote_type == "upvote":
            return cls.UP
        if vote_type == "downvote":
            return cls.DOWN
        raise ValueError(f"Unknown vote type: {vote_type!r}")

    @property
    def vote_type(self) -> str:
        """Wire representation used by the API."""
        return "upvote" if self is VoteDirection.UP else "downvote"


class ContentStatus(StrEnum):
    """Moderation status of claims, evidence, perspectives and replies."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Position(StrEnum):
    """Side a piece of evidence or a perspective takes on its claim."""

    FOR = "for"
    AGAINST = "against"


class Role(StrEnum):
    """Platform role carried by the authenticated identity."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class NotificationType(StrEnum):
    """Notification kinds emitted by the vote and follow paths."""

    VOTE_RECEIVED = "vote_received"
    NEW_FOLLOWER = "new_follower"

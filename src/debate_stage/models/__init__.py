"""SQLAlchemy models for the Debate Stage application."""

from .claim import Claim
from .enums import (
    ContentStatus,
    FollowTargetType,
    NotificationType,
    Position,
    Role,
    VoteDirection,
    VoteTargetType,
)
from .evidence import Evidence
from .follow import FollowRecord
from .notification import Notification
from .perspective import Perspective
from .reply import Reply
from .user import User
from .vote import VoteRecord

__all__ = [
    "Claim",
    "Evidence",
    "Perspective",
    "Reply",
    "User",
    "VoteRecord",
    "FollowRecord",
    "Notification",
    "ContentStatus", "FollowTargetType", "NotificationType",
    "Position", "Role", "VoteDirection", "VoteTargetType",
]

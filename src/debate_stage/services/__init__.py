"""Business logic services for the Debate Stage application."""

from .content import ContentService
from .follows import FollowService
from .notifications import NotificationDispatcher
from .scoring import ClaimScoreAggregator
from .votes import VoteService

__all__ = [
    "ContentService",
    "FollowService",
    "NotificationDispatcher",
    "ClaimScoreAggregator",
    "VoteService"
]

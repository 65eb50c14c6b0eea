"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import CamelModel, ErrorResponse, UserSummary
from .content import EvidenceResponse, PerspectiveCreate, PerspectiveResponse, StatusUpdate
from .follow import FollowCount
from .notification import NotificationResponse
from .vote import ClaimScore, VoteCounters, VoteRequest, Voter

__all__ = [
    "CamelModel", "ErrorResponse", "UserSummary",
    "EvidenceResponse", "PerspectiveCreate", "PerspectiveResponse", "StatusUpdate",
    "FollowCount",
    "NotificationResponse",
    "ClaimScore", "VoteCounters", "VoteRequest", "Voter"
]

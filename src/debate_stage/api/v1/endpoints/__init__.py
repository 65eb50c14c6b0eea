"""API endpoint modules for version 1."""

from .content import router as content_router
from .follows import router as follows_router
from .notifications import router as notifications_router
from .votes import router as votes_router

__all__ = [
    "content_router",
    "follows_router",
    "notifications_router",
    "votes_router",
]

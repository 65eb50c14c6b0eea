"""Version 1 API endpoints."""

from .endpoints import (
    content_router,
    follows_router,
    notifications_router,
    votes_router,
)

__all__ = [
    "content_router",
    "follows_router",
    "notifications_router",
    "votes_router",
]

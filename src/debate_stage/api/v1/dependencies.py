"""Shared API dependencies for authentication and the service singletons."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from debate_stage.db.session import get_db
from debate_stage.services.content import ContentService
from debate_stage.services.follows import FollowService
from debate_stage.services.identity import Identity, resolve_identity
from debate_stage.services.notifications import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from debate_stage.services.scoring import ClaimScoreAggregator, get_claim_score_aggregator
from debate_stage.services.votes import VoteService

# HTTP Bearer scheme; a missing header is reported as AuthError rather than 403
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Identity:
    """Resolve the bearer token into the caller's identity.

    Raises:
        AuthError: If the token is missing or invalid, or its user is gone.
    """
    token = credentials.credentials if credentials is not None else None
    return resolve_identity(db, token)


def get_notifier() -> NotificationDispatcher:
    """Return the shared notification dispatcher."""
    return get_notification_dispatcher()


def get_aggregator() -> ClaimScoreAggregator:
    """Return the shared claim score aggregator."""
    return get_claim_score_aggregator()


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]
NotifierDep = Annotated[NotificationDispatcher, Depends(get_notifier)]
AggregatorDep = Annotated[ClaimScoreAggregator, Depends(get_aggregator)]


def get_vote_service(aggregator: AggregatorDep, notifier: NotifierDep) -> VoteService:
    return VoteService(aggregator=aggregator, notifier=notifier)


def get_follow_service(notifier: NotifierDep) -> FollowService:
    return FollowService(notifier=notifier)


def get_content_service(aggregator: AggregatorDep) -> ContentService:
    return ContentService(aggregator=aggregator)


VoteServiceDep = Annotated[VoteService, Depends(get_vote_service)]
FollowServiceDep = Annotated[FollowService, Depends(get_follow_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]

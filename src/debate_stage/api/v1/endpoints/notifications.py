"""Notification inbox endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from debate_stage.schemas.notification import NotificationResponse
from debate_stage.services.notifications import list_notifications, mark_read

from ..dependencies import CurrentIdentityDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def get_notifications(
    identity: CurrentIdentityDep,
    db: SessionDep,
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> dict[str, Any]:
    """List the caller's notifications, newest first."""
    notifications = list_notifications(db, identity.user_id, unread_only=unread_only, limit=limit)
    return {
        "success": True,
        "notifications": [
            NotificationResponse.model_validate(item).to_api() for item in notifications
        ],
    }


@router.post("/{notification_id}/read")
async def read_notification(
    notification_id: str,
    identity: CurrentIdentityDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Mark one of the caller's notifications as read."""
    notification = mark_read(db, identity.user_id, notification_id)
    return {
        "success": True,
        "notification": NotificationResponse.model_validate(notification).to_api(),
    }

"""Notification inbox schemas."""

from datetime import datetime

from .common import CamelModel


class NotificationResponse(CamelModel):
    """Stored notification as shown to its recipient."""

    id: int
    type: str
    title: str
    message: str | None
    link: str | None
    read: bool
    created_at: datetime

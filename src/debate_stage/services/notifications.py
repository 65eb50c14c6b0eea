"""Best-effort notification dispatch.

Vote and follow handlers call :meth:`NotificationDispatcher.enqueue`, which
never raises and never waits. A background worker drains a bounded queue and
hands each message to a sink (by default: insert a ``Notification`` row),
retrying with exponential backoff. Messages that still fail, or that arrive
while the queue is full, are logged and dropped.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from debate_stage.core.errors import NotFoundError, NotificationError
from debate_stage.core.settings import settings
from debate_stage.db.session import SessionLocal
from debate_stage.models import Notification
from debate_stage.models.enums import NotificationType, VoteDirection
from debate_stage.services.targets import parse_target_id

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationMessage:
    """Payload accepted by the dispatcher."""

    user_id: int
    type: NotificationType
    title: str
    message: str | None = None
    link: str | None = None


NotificationSink = Callable[[NotificationMessage], None]

_DELIVERY_ERRORS = (
    NotificationError,
    SQLAlchemyError,
    OSError,
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
)


def persist_notification(message: NotificationMessage) -> None:
    """Default sink: store the notification in the recipient's inbox."""
    with SessionLocal() as db:
        db.add(
            Notification(
                user_id=message.user_id,
                type=message.type,
                title=message.title,
                message=message.message,
                link=message.link,
                read=False,
            )
        )
        db.commit()


def vote_received(
    owner_id: int, voter_username: str | None, direction: VoteDirection
) -> NotificationMessage:
    """Build the notification sent to a reply author on a new vote."""
    upvoted = direction is VoteDirection.UP
    verb = "upvoted" if upvoted else "downvoted"
    return NotificationMessage(
        user_id=owner_id,
        type=NotificationType.VOTE_RECEIVED,
        title=f"Your reply received a {'Yes' if upvoted else 'No'} vote",
        message=f"@{voter_username or 'Someone'} {verb} your reply",
        link="",
    )


def new_follower(
    followed_id: int, follower_id: int, follower_username: str | None
) -> NotificationMessage:
    """Build the notification sent to a user who gained a follower."""
    return NotificationMessage(
        user_id=followed_id,
        type=NotificationType.NEW_FOLLOWER,
        title="New follower",
        message=f"@{follower_username or 'Someone'} started following you",
        link=f"/profile/{follower_id}",
    )


class NotificationDispatcher:
    """Bounded queue plus a background worker that delivers notifications."""

    def __init__(
        self,
        sink: NotificationSink | None = None,
        *,
        queue_size: int | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._sink = sink or persist_notification
        self._queue_size = max(1, queue_size or settings.notification_queue_size)
        self.max_retries = (
            settings.notification_max_retries if max_retries is None else max(0, max_retries)
        )
        self.backoff_seconds = (
            settings.notification_retry_backoff_seconds
            if backoff_seconds is None
            else max(0.0, backoff_seconds)
        )
        self.timeout_seconds = timeout_seconds or settings.notification_timeout_seconds
        self._queue: asyncio.Queue[NotificationMessage] = asyncio.Queue(maxsize=self._queue_size)
        self._task: asyncio.Task[None] | None = None
        self.delivered = 0
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def pending(self) -> int:
        """Number of messages waiting for delivery."""
        return self._queue.qsize()

    def enqueue(self, message: NotificationMessage) -> None:
        """Queue a message for delivery. Never raises into the caller."""
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Notification queue full; dropping %s for user %d",
                message.type,
                message.user_id,
            )

    async def start(self) -> None:
        """Start the background delivery loop on the running event loop."""
        if self.running:
            return

        # A queue is tied to the loop that first waits on it; rebuild it for this loop.
        backlog: list[NotificationMessage] = []
        while not self._queue.empty():
            backlog.append(self._queue.get_nowait())
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        for message in backlog:
            self._queue.put_nowait(message)

        self._task = asyncio.create_task(self._run())

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Give queued messages a chance to go out, then stop the worker."""
        if self._task is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except TimeoutError:
            logger.warning(
                "Stopping notification worker with %d undelivered message(s)",
                self._queue.qsize(),
            )

        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self.deliver(message)
            except Exception:
                self.dropped += 1
                logger.exception(
                    "Unexpected error delivering %s notification for user %d",
                    message.type,
                    message.user_id,
                )
            finally:
                self._queue.task_done()

    async def deliver(self, message: NotificationMessage) -> bool:
        """Deliver one message with retries; return False if it was dropped.

        A timed-out attempt is not retried: the sink keeps running in its
        thread and may still complete the write.
        """
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                await asyncio.wait_for(
                    asyncio.to_thread(self._sink, message),
                    timeout=self.timeout_seconds,
                )
            except TimeoutError:
                self.dropped += 1
                logger.error(
                    "Notification delivery for user %d timed out after %.2fs; not retrying",
                    message.user_id,
                    self.timeout_seconds,
                )
                return False
            except _DELIVERY_ERRORS as err:
                logger.warning(
                    "Notification delivery attempt %d/%d for user %d failed: %s",
                    attempt,
                    attempts,
                    message.user_id,
                    err,
                )
                if attempt < attempts:
                    await asyncio.sleep(self.backoff_seconds * 2 ** (attempt - 1))
                continue

            self.delivered += 1
            return True

        self.dropped += 1
        logger.error(
            "Dropping %s notification for user %d after %d attempt(s)",
            message.type,
            message.user_id,
            attempts,
        )
        return False


class _DispatcherSingleton:
    """Singleton wrapper for NotificationDispatcher."""

    _instance: NotificationDispatcher | None = None

    @classmethod
    def get_instance(cls) -> NotificationDispatcher:
        if cls._instance is None:
            cls._instance = NotificationDispatcher()
        return cls._instance


def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the process-wide notification dispatcher."""
    return _DispatcherSingleton.get_instance()


def list_notifications(
    db: Session,
    user_id: int,
    *,
    unread_only: bool = False,
    limit: int = 50,
) -> list[Notification]:
    """Return the user's notifications, newest first."""
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(db.scalars(stmt).all())


def mark_read(db: Session, user_id: int, raw_notification_id: str | int) -> Notification:
    """Mark one of the user's notifications as read.

    Raises:
        NotFoundError: If the notification does not exist or belongs to someone else.
    """
    notification_id = parse_target_id(raw_notification_id, "notification")
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification

"""Follow toggling for claims, evidence, perspectives and users."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from debate_stage.core.errors import NotFoundError, NotificationError, ValidationError
from debate_stage.models import User
from debate_stage.models.enums import FollowTargetType
from debate_stage.repositories.ledger import FollowLedger
from debate_stage.services.follow_state import FollowTransition, decide_follow
from debate_stage.services.identity import Identity
from debate_stage.services.notifications import (
    NotificationMessage,
    get_notification_dispatcher,
    new_follower,
)
from debate_stage.services.targets import FOLLOW_TARGETS, parse_target_id
from debate_stage.services.votes import Notifier

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 2


@dataclass(frozen=True)
class FollowOutcome:
    target_type: FollowTargetType
    target_id: int
    is_following: bool
    follow_count: int


class FollowService:
    """Toggles follow records and keeps ``follow_count`` in step with them."""

    def __init__(self, notifier: Notifier | None = None) -> None:
        self.notifier = notifier or get_notification_dispatcher()

    def toggle_follow(
        self,
        db: Session,
        target_type: FollowTargetType,
        raw_target_id: str | int,
        identity: Identity,
    ) -> FollowOutcome:
        """Follow the target if the caller does not already, otherwise unfollow it.

        Raises:
            ValidationError: If the id is malformed or a user targets themselves.
            NotFoundError: If the target does not exist.
        """
        adapter = FOLLOW_TARGETS[target_type]
        target_id = parse_target_id(raw_target_id, adapter.label)
        if target_type is FollowTargetType.USER and target_id == identity.user_id:
            raise ValidationError("Cannot follow yourself")

        transition: FollowTransition | None = None
        follow_count = 0
        for attempt in range(1, _MAX_ATTEMPTS + 1):
            try:
                target = adapter.load_target(db, target_id)
                if target is None:
                    raise NotFoundError(f"{adapter.label.capitalize()} not found")

                ledger = FollowLedger(db)
                record = ledger.get(target_type, target_id, identity.user_id)
                transition = decide_follow(record is not None)
                if transition.create:
                    ledger.create(target_type, target_id, identity.user_id)
                else:
                    ledger.remove(record)
                follow_count = adapter.apply_delta(db, target, transition.delta)
                db.commit()
                break
            except IntegrityError:
                db.rollback()
                if attempt == _MAX_ATTEMPTS:
                    raise
                logger.info(
                    "Concurrent follow on %s %d by user %d; retrying",
                    target_type,
                    target_id,
                    identity.user_id,
                )
            except SQLAlchemyError:
                db.rollback()
                raise
        assert transition is not None

        logger.info(
            "User %d %s %s %d (follow_count=%d)",
            identity.user_id,
            "followed" if transition.is_following else "unfollowed",
            target_type,
            target_id,
            follow_count,
        )

        if target_type is FollowTargetType.USER and transition.create:
            self._notify(new_follower(target_id, identity.user_id, identity.username))

        return FollowOutcome(
            target_type=target_type,
            target_id=target_id,
            is_following=transition.is_following,
            follow_count=follow_count,
        )

    def is_following(
        self,
        db: Session,
        target_type: FollowTargetType,
        raw_target_id: str | int,
        user_id: int,
    ) -> bool:
        adapter = FOLLOW_TARGETS[target_type]
        target_id = parse_target_id(raw_target_id, adapter.label)
        return FollowLedger(db).get(target_type, target_id, user_id) is not None

    def list_followers(self, db: Session, raw_user_id: str | int) -> list[User]:
        """Users following the given user, newest follow first."""
        user_id = self._existing_user_id(db, raw_user_id)
        return [user for _, user in FollowLedger(db).followers_of_user(user_id)]

    def list_following(self, db: Session, raw_user_id: str | int) -> list[User]:
        """Users the given user follows, newest follow first."""
        user_id = self._existing_user_id(db, raw_user_id)
        return [user for _, user in FollowLedger(db).users_followed_by(user_id)]

    @staticmethod
    def _existing_user_id(db: Session, raw_user_id: str | int) -> int:
        user_id = parse_target_id(raw_user_id, "user")
        if db.get(User, user_id) is None:
            raise NotFoundError("User not found")
        return user_id

    def _notify(self, message: NotificationMessage) -> None:
        try:
            self.notifier.enqueue(message)
        except NotificationError as err:
            logger.warning("Could not enqueue notification for user %d: %s", message.user_id, err)

"""Resolution of bearer tokens into the caller identity used by the services."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from debate_stage.core.errors import AuthError
from debate_stage.core.security import decode_subject
from debate_stage.models import User
from debate_stage.models.enums import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated caller."""

    user_id: int
    username: str
    role: Role

    @property
    def is_moderator(self) -> bool:
        return self.role in (Role.MODERATOR, Role.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def resolve_identity(db: Session, token: str | None) -> Identity:
    """Decode ``token`` and load the user it names.

    Raises:
        AuthError: If the token is missing or invalid, or the user no longer exists.
    """
    if not token:
        raise AuthError("Authentication required")

    user_id = decode_subject(token)
    user = db.get(User, user_id)
    if user is None:
        raise AuthError("User not found")

    try:
        role = Role(user.role)
    except ValueError:
        role = Role.USER
    return Identity(user_id=user.id, username=user.username, role=role)

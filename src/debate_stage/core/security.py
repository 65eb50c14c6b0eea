"""JWT helpers for the bearer tokens accepted by the API.

Token issuance belongs to the external identity service; ``create_access_token``
is kept for tooling and tests that need to mint a token for a known user.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from debate_stage.core.errors import AuthError
from debate_stage.core.settings import settings


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose subject is the user's id."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> int:
    """Return the user id carried by ``token``.

    Raises:
        AuthError: If the token is invalid, expired, or has no usable subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise AuthError("Could not validate credentials") from err

    subject = payload.get("sub")
    if subject is None:
        raise AuthError("Could not validate credentials")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise AuthError("Could not validate credentials") from err

"""JWT token creation and verification.

Tokens are stateless: validity is purely signature + expiry. There is
no refresh token and no revocation list.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from inkpot.config import settings
from inkpot.errors import InvalidToken

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for user_id."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises InvalidToken on any failure (malformed, bad signature, expired,
    missing claims, wrong type).
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired.")
    except jwt.InvalidTokenError:
        raise InvalidToken()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidToken()
    return payload


def user_id_from_token(token: str) -> uuid.UUID:
    """Verify token and return the user id it carries."""
    payload = verify_token(token)
    try:
        return uuid.UUID(payload["sub"])
    except (ValueError, TypeError, AttributeError):
        raise InvalidToken()

"""
JWT access tokens for the finance API.

Tokens are HS256 by default and carry the user id in ``sub``. Decoding never
raises: an invalid, expired or non-access token yields None and the auth
dependency answers 401.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from jose import JWTError, jwt

from venue_finance.core.config import settings

ACCESS = "access"


def _claims(subject: str, minutes: int) -> dict[str, Any]:
    issued = datetime.now(timezone.utc)
    return {
        "sub": subject,
        "type": ACCESS,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=minutes)).timestamp()),
    }


def create_access_token(subject: str, *, expires_minutes: Optional[int] = None) -> str:
    if not subject:
        raise ValueError("Token subject is required")
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    return jwt.encode(_claims(subject, minutes), settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _subject(claims: Mapping[str, Any]) -> Optional[str]:
    if claims.get("type", ACCESS) != ACCESS:
        return None
    sub = claims.get("sub")
    return sub if isinstance(sub, str) and sub else None


def decode_access_token(token: str) -> Optional[str]:
    """User id from a valid access token, else None."""
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    return _subject(claims)

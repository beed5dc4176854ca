from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from venue_finance.core.security import decode_access_token
from venue_finance.db.session import get_db
from venue_finance.models.user import User

# missing headers are reported by get_current_user, not by HTTPBearer
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Invalid or expired token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _token_user_id(token: str) -> Optional[UUID]:
    sub = decode_access_token(token)
    try:
        return UUID(sub) if sub else None
    except ValueError:
        return None


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Active user named by the Bearer token's ``sub``; 401 otherwise."""
    if creds is None or not creds.credentials:
        raise _unauthorized("Not authenticated")

    user_id = _token_user_id(creds.credentials)
    user = db.get(User, user_id) if user_id is not None else None
    if user is None or not user.is_active:
        raise _unauthorized()
    return user

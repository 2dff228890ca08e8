"""Authentication dependencies for routers."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from ..core import get_session
from ..core.errors import ForbiddenError, UnauthorizedError
from ..core.security import decode_access_token
from ..models import User

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def _user_from_credentials(
    creds: Optional[HTTPAuthorizationCredentials], session: Session
) -> Optional[User]:
    if creds is None or not creds.credentials:
        return None
    user_id = decode_access_token(creds.credentials)
    if user_id is None:
        return None
    return session.get(User, user_id)


def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    session: Session = Depends(get_session),
) -> User:
    if creds is None:
        raise UnauthorizedError("Authentication required")
    user = _user_from_credentials(creds, session)
    if user is None:
        client = request.client.host if request.client else None
        logger.warning("Rejected bearer token path=%s ip=%s", request.url.path, client)
        raise UnauthorizedError("Invalid or expired token")
    request.state.user_id = user.id
    return user


def get_admin_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning("Admin action refused for user=%s", user.id)
        raise ForbiddenError("Admin privileges required")
    return user


__all__ = ["bearer", "get_admin_user", "get_current_user"]

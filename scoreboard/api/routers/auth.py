"""Account registration and bearer-token login."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, or_, select

from ...core import ADMIN_EMAILS, format_time, get_session, isoformat
from ...core.errors import ConflictError, UnauthorizedError
from ...core.security import create_access_token, hash_password, verify_password
from ...models import User
from ...schemas import LoginIn, RegisterIn
from ...services.scores import count_scores, fastest_time
from ..deps import get_current_user
from ..responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_ADMIN_EMAILS = set(ADMIN_EMAILS)


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
    }


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post("/register", status_code=201)
def register(body: RegisterIn, request: Request, session: Session = Depends(get_session)):
    """Create an account and return a bearer token."""

    existing = session.exec(
        select(User).where(
            or_(
                func.lower(User.username) == body.username.lower(),
                User.email == body.email,
            )
        )
    ).first()
    if existing:
        logger.warning(
            "Registration refused, user exists username=%s email=%s ip=%s",
            body.username,
            body.email,
            _client_ip(request),
        )
        raise ConflictError("User with this email or username already exists")

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role="admin" if body.email in _ADMIN_EMAILS else "user",
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError("User with this email or username already exists") from exc
    session.refresh(user)

    logger.info("User registered id=%s username=%s role=%s", user.id, user.username, user.role)
    return ok(
        {"user": user_to_dict(user), "token": create_access_token(user.id)},
        message="Registration successful",
    )


@router.post("/login")
def login(body: LoginIn, request: Request, session: Session = Depends(get_session)):
    """Exchange email and password for a bearer token."""

    user = session.exec(select(User).where(User.email == body.email)).first()
    if not user or not verify_password(body.password, user.password_hash):
        logger.warning("Login failed email=%s ip=%s", body.email, _client_ip(request))
        raise UnauthorizedError("Invalid email or password")

    logger.info("User logged in id=%s username=%s", user.id, user.username)
    return ok(
        {"user": user_to_dict(user), "token": create_access_token(user.id)},
        message="Login successful",
    )


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return ok({"user": user_to_dict(user)})


@router.post("/logout")
def logout(request: Request):
    """Tokens are stateless; the client discards its copy."""

    logger.info("User logout ip=%s", _client_ip(request))
    return ok(message="Logout successful")


@router.get("/stats")
def stats(session: Session = Depends(get_session)):
    """Site-wide counters shown on the landing page."""

    total_users = session.exec(select(func.count()).select_from(User)).one()
    best = fastest_time(session)
    return ok(
        {
            "totalUsers": total_users,
            "totalRecords": count_scores(session),
            "bestTime": format_time(best) if best is not None else "--",
        }
    )


__all__ = ["router", "user_to_dict"]

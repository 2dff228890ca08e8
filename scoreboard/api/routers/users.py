"""User profile and per-player statistics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import get_session
from ...core.errors import UserNotFoundError
from ...models import User
from ...services import ranking
from ...services.scores import fetch_all_scores
from ...services.tracks import thresholds_by_track
from ..deps import get_current_user
from ..responses import ok
from .auth import user_to_dict

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return ok({"user": user_to_dict(user)})


@router.get("/{user_id}/stats")
def user_stats(user_id: int, session: Session = Depends(get_session)):
    """Race count, positions, medals and campaign progress of one player."""

    user = session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    stats = ranking.player_stats(user.id, fetch_all_scores(session), thresholds_by_track(session))
    stats["username"] = user.username
    return ok(stats)


__all__ = ["router"]

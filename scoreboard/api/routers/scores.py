"""Score submission and removal endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import get_session, isoformat
from ...models import User
from ...schemas import ScoreSubmitIn
from ...services import ranking
from ...services.scores import (
    OUTCOME_UNCHANGED,
    delete_score,
    fetch_all_scores,
    list_track_scores,
    list_user_scores,
    submit_score,
)
from ...services.tracks import resolve_track, thresholds_by_track
from ..deps import get_current_user
from ..responses import ok

router = APIRouter(prefix="/scores", tags=["scores"])


def _ranked_entry(session: Session, track_id: str, score_id: int):
    """Return the serialized row of ``score_id`` on its current leaderboard."""

    real_id, _, thresholds = resolve_track(session, track_id)
    for entry in ranking.rank_track(thresholds, list_track_scores(session, real_id)):
        if entry["id"] == str(score_id):
            return entry
    return None


@router.post("/submit")
def submit(
    body: ScoreSubmitIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Submit a lap time; only a strictly faster time replaces the stored one."""

    score, outcome = submit_score(
        session,
        user,
        body.track_id,
        body.time,
        screenshot=body.screenshot,
        replay=body.replay,
    )
    entry = _ranked_entry(session, body.track_id, score.id) or ranking.score_to_dict(score)
    message = (
        "Existing time is faster; score kept"
        if outcome == OUTCOME_UNCHANGED
        else "Score submitted successfully"
    )
    return ok({"score": entry, "outcome": outcome}, message=message)


@router.get("/my-scores")
def my_scores(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """The caller's scores with their current position and medal."""

    thresholds = thresholds_by_track(session)
    positions = {
        score.id: position
        for group in ranking.group_by_track(fetch_all_scores(session)).values()
        for position, score in enumerate(group, start=1)
        if score.user_id == user.id
    }
    rows = []
    for score in list_user_scores(session, user.id):
        medal = ranking.medal_for_time(score.time, thresholds.get(score.track_id))
        rows.append(ranking.score_to_dict(score, positions.get(score.id), medal))
    return ok({"scores": rows})


@router.get("/track/{track_id}")
def track_scores(track_id: str, session: Session = Depends(get_session)):
    """All scores on a track in leaderboard order."""

    real_id, _, thresholds = resolve_track(session, track_id)
    return ok(
        {
            "trackId": track_id,
            "scores": ranking.rank_track(thresholds, list_track_scores(session, real_id)),
        }
    )


@router.delete("/track/{track_id}")
def remove_score(
    track_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    """Delete the caller's own score for a track (challenge ids resolve)."""

    score = delete_score(session, user, track_id)
    return ok(
        {
            "deletedScore": {
                "id": str(score.id),
                "trackId": score.track_id,
                "userId": str(score.user_id),
                "username": score.username,
                "time": score.time,
                "createdAt": isoformat(score.created_at),
            }
        },
        message="Score deleted successfully",
    )


__all__ = ["router"]

"""Track catalogue, leaderboards and challenge rotation endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core import get_session
from ...core.errors import TrackNotFoundError
from ...models import CAMPAIGN_CHALLENGE, WEEKLY_CHALLENGE, User
from ...schemas import ChallengeAssignIn, TrackCreateIn
from ...services import challenges, ranking
from ...services.scores import fetch_all_scores, list_track_scores
from ...services.tracks import (
    create_track,
    delete_track,
    list_tracks,
    resolve_track,
    track_names,
    track_to_dict,
    tracks_for_week,
)
from ..deps import get_admin_user
from ..responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracks", tags=["tracks"])

MAX_BULK_TRACKS = 20


def _track_leaderboard(session: Session, track_id: str) -> Dict[str, Any]:
    real_id, payload, thresholds = resolve_track(session, track_id)
    scores = list_track_scores(session, real_id)
    return ranking.build_track_leaderboard(track_id, payload, thresholds, scores)


@router.get("")
def get_tracks(
    map_type: Optional[str] = Query(default=None, alias="mapType"),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    session: Session = Depends(get_session),
):
    """List tracks, optionally filtered by map type and active flag."""

    tracks = [track_to_dict(track) for track in list_tracks(session, map_type=map_type, is_active=is_active)]
    return ok(
        tracks,
        pagination={"page": 1, "limit": len(tracks), "total": len(tracks), "totalPages": 1},
    )


@router.post("", status_code=201)
def add_track(
    body: TrackCreateIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    """Create a track (admin only)."""

    track = create_track(session, body.model_dump())
    logger.info("Track %s added by admin=%s", track.id, admin.id)
    return ok(track_to_dict(track), message="Track created successfully")


@router.get("/global-leaderboard")
def global_leaderboard(session: Session = Depends(get_session)):
    """Cross-track rankings by first places, weekly wins and activity."""

    scores = fetch_all_scores(session)
    data = ranking.global_rankings(scores, track_names(session))
    logger.info(
        "Global leaderboard computed scores=%d rankings=%d",
        len(scores),
        len(data["globalRankings"]),
    )
    return ok(data)


@router.get("/campaign-leaderboard")
def campaign_leaderboard(session: Session = Depends(get_session)):
    """Campaign point table (10/7/5/3/1 for the top five of each map)."""

    scores = fetch_all_scores(session)
    data = ranking.campaign_rankings(scores, track_names(session))
    logger.info(
        "Campaign leaderboard computed scores=%d players=%d",
        data["stats"]["totalScores"],
        data["stats"]["totalPlayers"],
    )
    return ok(data)


@router.get("/bulk-leaderboards")
def bulk_leaderboards(
    track_ids: str = Query(..., alias="trackIds"),
    session: Session = Depends(get_session),
):
    """Leaderboards for up to 20 comma-separated track ids.

    Unknown ids are reported per entry; they never fail the whole batch.
    """

    requested: List[str] = []
    for raw in track_ids.split(","):
        track_id = raw.strip()
        if track_id and track_id not in requested:
            requested.append(track_id)
    if not requested:
        raise HTTPException(400, "At least one track ID is required")
    if len(requested) > MAX_BULK_TRACKS:
        raise HTTPException(400, f"At most {MAX_BULK_TRACKS} track IDs per request")

    leaderboards: List[Dict[str, Any]] = []
    failed = 0
    for track_id in requested:
        try:
            leaderboards.append(_track_leaderboard(session, track_id))
        except TrackNotFoundError:
            failed += 1
            leaderboards.append({"trackId": track_id, "error": "Track not found"})
        except SQLAlchemyError:
            logger.exception("Bulk leaderboard failed for track=%s", track_id)
            session.rollback()
            failed += 1
            leaderboards.append({"trackId": track_id, "error": "Failed to load leaderboard"})

    return ok(
        {
            "leaderboards": leaderboards,
            "summary": {
                "total": len(requested),
                "successful": len(requested) - failed,
                "failed": failed,
            },
        }
    )


@router.get("/weekly-challenge")
def get_weekly_challenge(session: Session = Depends(get_session)):
    return ok(challenges.challenge_summary(session, WEEKLY_CHALLENGE))


@router.put("/weekly-challenge")
def update_weekly_challenge(
    body: ChallengeAssignIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    """Point the weekly challenge at another track (admin only)."""

    challenges.assign_slot(session, WEEKLY_CHALLENGE, body.track_id)
    return ok(
        challenges.challenge_summary(session, WEEKLY_CHALLENGE),
        message="Weekly challenge updated successfully",
    )


@router.get("/campaign-challenge")
def get_campaign_challenge(session: Session = Depends(get_session)):
    return ok(challenges.challenge_summary(session, CAMPAIGN_CHALLENGE))


@router.put("/campaign-challenge")
def update_campaign_challenge(
    body: ChallengeAssignIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    """Point the campaign challenge at another track (admin only)."""

    challenges.assign_slot(session, CAMPAIGN_CHALLENGE, body.track_id)
    return ok(
        challenges.challenge_summary(session, CAMPAIGN_CHALLENGE),
        message="Campaign challenge updated successfully",
    )


@router.get("/week/{week_number}")
def get_week_tracks(week_number: int, session: Session = Depends(get_session)):
    tracks = tracks_for_week(session, week_number)
    if not tracks:
        raise HTTPException(404, f"No tracks found for week {week_number}")
    return ok(
        [track_to_dict(track) for track in tracks],
        week=week_number,
        trackCount=len(tracks),
    )


@router.get("/{track_id}")
def get_track(track_id: str, session: Session = Depends(get_session)):
    _, payload, _ = resolve_track(session, track_id)
    return ok(payload)


@router.delete("/{track_id}")
def remove_track(
    track_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    """Delete a track and its scores (admin only)."""

    removed = delete_track(session, track_id)
    return ok(
        {"trackId": track_id, "deletedScores": removed},
        message="Track deleted successfully",
    )


@router.get("/{track_id}/leaderboard")
def get_leaderboard(track_id: str, session: Session = Depends(get_session)):
    """Ranked scores of one track; challenge ids resolve to their current track."""

    return ok(_track_leaderboard(session, track_id))


__all__ = ["router"]

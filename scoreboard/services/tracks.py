"""Helpers for track domain objects."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import sqlalchemy as sa
from sqlmodel import Session, select

from ..core.errors import ConflictError, TrackNotFoundError
from ..core.time import isoformat, utcnow
from ..models import ChallengeSlot, Score, Track
from .challenges import get_slot, is_virtual_track, release_track, slot_to_dict

logger = logging.getLogger(__name__)


def track_to_dict(track: Track) -> Dict[str, Any]:
    """Serialise a track model to API-friendly dict."""

    return {
        "id": track.id,
        "name": track.name,
        "author": track.author,
        "difficulty": track.difficulty,
        "mapType": track.map_type,
        "authorTime": track.author_time,
        "goldTime": track.gold_time,
        "silverTime": track.silver_time,
        "bronzeTime": track.bronze_time,
        "weekNumber": track.week_number,
        "isActive": track.is_active,
        "createdAt": isoformat(track.created_at),
        "updatedAt": isoformat(track.updated_at),
    }


def get_track(session: Session, track_id: str) -> Track:
    track = session.get(Track, track_id)
    if track is None:
        raise TrackNotFoundError(track_id)
    return track


def resolve_track(session: Session, track_id: str) -> Tuple[str, Dict[str, Any], Any]:
    """Look up a real or virtual track id.

    Returns ``(real_track_id, track_payload, thresholds)``. For challenge
    slots the payload and thresholds are the copies stored on the slot.
    """

    if is_virtual_track(track_id):
        slot: ChallengeSlot = get_slot(session, track_id)
        return slot.track_id, slot_to_dict(slot), slot
    track = get_track(session, track_id)
    return track.id, track_to_dict(track), track


def list_tracks(
    session: Session, *, map_type: Optional[str] = None, is_active: Optional[bool] = None
) -> List[Track]:
    query = select(Track)
    if map_type:
        query = query.where(Track.map_type == map_type)
    if is_active is not None:
        query = query.where(Track.is_active == is_active)
    return list(session.exec(query.order_by(Track.created_at, Track.id)).all())


def tracks_for_week(session: Session, week: int) -> List[Track]:
    return list(
        session.exec(
            select(Track)
            .where(Track.map_type == "Weekly")
            .where(Track.week_number == week)
            .order_by(Track.id)
        ).all()
    )


def track_names(session: Session) -> Dict[str, str]:
    return {track.id: track.name for track in session.exec(select(Track)).all()}


def thresholds_by_track(session: Session) -> Dict[str, Track]:
    return {track.id: track for track in session.exec(select(Track)).all()}


def _slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def _generate_track_id(session: Session, name: str, map_type: str, week_number: Optional[int]) -> str:
    if map_type == "Weekly" and week_number is not None:
        numbers = [
            int(match.group(1))
            for match in (
                re.match(rf"^w{week_number}-(\d+)$", track.id)
                for track in tracks_for_week(session, week_number)
            )
            if match
        ]
        number = max(numbers, default=0) + 1
        while session.get(Track, f"w{week_number}-{number}") is not None:
            number += 1
        return f"w{week_number}-{number}"
    base = _slugify(name) or "track"
    candidate = base
    suffix = 2
    while session.get(Track, candidate) is not None:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def create_track(session: Session, data: Dict[str, Any]) -> Track:
    """Create a track; ``data`` uses model field names."""

    track_id = data.pop("id", None) or _generate_track_id(
        session, data["name"], data["map_type"], data.get("week_number")
    )
    if is_virtual_track(track_id):
        raise ConflictError(f"Track id '{track_id}' is reserved")
    if session.get(Track, track_id) is not None:
        raise ConflictError(f"Track '{track_id}' already exists")

    now = utcnow()
    track = Track(id=track_id, created_at=now, updated_at=now, **data)
    session.add(track)
    session.commit()
    session.refresh(track)
    logger.info("Track created id=%s name=%s type=%s", track.id, track.name, track.map_type)
    return track


def delete_track(session: Session, track_id: str) -> int:
    """Delete a track together with its scores. Returns removed score count."""

    track = get_track(session, track_id)
    release_track(session, track.id)
    removed = session.execute(sa.delete(Score).where(Score.track_id == track.id)).rowcount
    session.delete(track)
    session.commit()
    logger.info("Track deleted id=%s scores_removed=%s", track_id, removed)
    return removed or 0


__all__ = [
    "create_track",
    "delete_track",
    "get_track",
    "list_tracks",
    "resolve_track",
    "thresholds_by_track",
    "track_names",
    "track_to_dict",
    "tracks_for_week",
]

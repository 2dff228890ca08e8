"""Rotating challenge slots ("weekly-challenge", "campaign-challenge").

Each slot is a persisted pointer to a real track id together with a copy of
that track's display data taken when the admin assigned it. Scores are always
stored against the real track id; the virtual id is only resolved on the way
in.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlmodel import Session, func, select

from ..core.errors import NotFoundError, TrackNotFoundError, ValidationError
from ..core.time import isoformat, utcnow, week_progress
from ..models import (
    CAMPAIGN_CHALLENGE,
    CHALLENGE_SLOTS,
    WEEKLY_CHALLENGE,
    ChallengeSlot,
    Score,
    Track,
)

logger = logging.getLogger(__name__)

# Category a slot falls back to when its track disappears.
SLOT_HOME_CATEGORY = {
    WEEKLY_CHALLENGE: "Weekly",
    CAMPAIGN_CHALLENGE: "Campaign",
}
SLOT_MAP_TYPE = {
    WEEKLY_CHALLENGE: "Weekly-Challenge",
    CAMPAIGN_CHALLENGE: "Campaign-Challenge",
}
DEFAULT_SLOT_TRACKS = {
    WEEKLY_CHALLENGE: "w33-4",
    CAMPAIGN_CHALLENGE: "1",
}


def is_virtual_track(track_id: str) -> bool:
    return track_id in CHALLENGE_SLOTS


def get_slot(session: Session, slot: str) -> ChallengeSlot:
    """Return the slot row or raise ``TrackNotFoundError`` if unassigned."""

    row = session.get(ChallengeSlot, slot)
    if row is None:
        raise TrackNotFoundError(slot)
    return row


def resolve_track_id(session: Session, track_id: str) -> str:
    """Map a virtual challenge id to the real track it points at."""

    if is_virtual_track(track_id):
        return get_slot(session, track_id).track_id
    return track_id


def slot_to_dict(slot: ChallengeSlot) -> Dict[str, Any]:
    """Track-shaped view of a slot, used wherever a track payload is expected."""

    return {
        "id": slot.track_id,
        "name": slot.name,
        "author": "Nadeo",
        "difficulty": slot.difficulty,
        "mapType": SLOT_MAP_TYPE[slot.slot],
        "authorTime": slot.author_time,
        "goldTime": slot.gold_time,
        "silverTime": slot.silver_time,
        "bronzeTime": slot.bronze_time,
        "weekNumber": slot.week_number,
        "isActive": True,
        "challengeSlot": slot.slot,
        "updatedAt": isoformat(slot.updated_at),
    }


def _copy_track(row: ChallengeSlot, track: Track) -> None:
    row.track_id = track.id
    row.name = track.name
    row.difficulty = track.difficulty
    row.week_number = track.week_number
    row.author_time = track.author_time
    row.gold_time = track.gold_time
    row.silver_time = track.silver_time
    row.bronze_time = track.bronze_time
    row.updated_at = utcnow()


def assign_slot(session: Session, slot: str, track_id: str) -> ChallengeSlot:
    """Repoint ``slot`` at ``track_id`` after checking the track exists."""

    if slot not in CHALLENGE_SLOTS:
        raise ValidationError(f"Unknown challenge slot '{slot}'")
    if is_virtual_track(track_id):
        raise ValidationError("A challenge cannot point at another challenge", "trackId")

    track = session.get(Track, track_id)
    if track is None:
        raise TrackNotFoundError(track_id)

    row = session.get(ChallengeSlot, slot)
    previous = row.track_id if row else None
    if row is None:
        row = ChallengeSlot(slot=slot, track_id=track.id, name=track.name, difficulty=track.difficulty)
    _copy_track(row, track)
    session.add(row)
    session.commit()
    session.refresh(row)

    logger.info("Challenge %s repointed %s -> %s (%s)", slot, previous, track.id, track.name)
    return row


def ensure_default_slots(session: Session) -> None:
    """Create missing slots pointing at their default tracks when available."""

    for slot, track_id in DEFAULT_SLOT_TRACKS.items():
        if session.get(ChallengeSlot, slot) is not None:
            continue
        if session.get(Track, track_id) is None:
            logger.warning("Default track %s for %s is missing; slot left unassigned", track_id, slot)
            continue
        assign_slot(session, slot, track_id)


def _fallback_track(session: Session, slot: str, excluded_id: str) -> Optional[Track]:
    return session.exec(
        select(Track)
        .where(Track.map_type == SLOT_HOME_CATEGORY[slot])
        .where(Track.is_active == True)  # noqa: E712 - SQL expression
        .where(Track.id != excluded_id)
        .order_by(Track.created_at.desc(), Track.id.desc())
    ).first()


def release_track(session: Session, track_id: str) -> None:
    """Repoint every slot that referenced a track which is being deleted.

    The replacement is the newest remaining active track of the slot's home
    category; without one the slot is removed and resolves to not-found.
    Changes are added to ``session`` but not committed.
    """

    rows = session.exec(select(ChallengeSlot).where(ChallengeSlot.track_id == track_id)).all()
    for row in rows:
        replacement = _fallback_track(session, row.slot, track_id)
        if replacement is None:
            session.delete(row)
            logger.warning("Challenge %s lost track %s and has no fallback", row.slot, track_id)
            continue
        _copy_track(row, replacement)
        session.add(row)
        logger.info("Challenge %s fell back from %s to %s", row.slot, track_id, replacement.id)


def challenge_summary(session: Session, slot: str) -> Dict[str, Any]:
    """Current slot track with its participant count and week progress."""

    if slot not in CHALLENGE_SLOTS:
        raise NotFoundError("Challenge not found")
    row = get_slot(session, slot)
    participants = session.exec(
        select(func.count()).select_from(Score).where(Score.track_id == row.track_id)
    ).one()
    progress = week_progress()
    return {
        "track": slot_to_dict(row),
        "participantCount": participants,
        "weekProgress": progress,
        "weekProgressText": f"{progress}% through the week",
    }


__all__ = [
    "DEFAULT_SLOT_TRACKS",
    "assign_slot",
    "challenge_summary",
    "ensure_default_slots",
    "get_slot",
    "is_virtual_track",
    "release_track",
    "resolve_track_id",
    "slot_to_dict",
]

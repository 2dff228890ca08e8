"""Database model for the rotating challenge pointers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

WEEKLY_CHALLENGE = "weekly-challenge"
CAMPAIGN_CHALLENGE = "campaign-challenge"
CHALLENGE_SLOTS = (WEEKLY_CHALLENGE, CAMPAIGN_CHALLENGE)


class ChallengeSlot(SQLModel, table=True):
    """Virtual track id pointing at a real track, with copied display data."""

    __tablename__ = "challenge_slot"

    slot: str = ORMField(primary_key=True)
    track_id: str = ORMField(index=True)
    name: str
    difficulty: str
    week_number: Optional[int] = None
    author_time: Optional[int] = None
    gold_time: Optional[int] = None
    silver_time: Optional[int] = None
    bronze_time: Optional[int] = None
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = [
    "CAMPAIGN_CHALLENGE",
    "CHALLENGE_SLOTS",
    "ChallengeSlot",
    "WEEKLY_CHALLENGE",
]

"""Database model for a player's best time on a track."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Score(SQLModel, table=True):
    """Best lap of one user on one track.

    Position and medal depend on every competing row, so they are derived
    when a leaderboard is read and never stored here.
    """

    __table_args__ = (
        sa.UniqueConstraint("user_id", "track_id", name="uq_score_user_track"),
        sa.Index("ix_score_track_time", "track_id", "time"),
        sa.CheckConstraint("time > 0", name="ck_score_time_positive"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    track_id: str = ORMField(index=True)
    user_id: int = ORMField(index=True, foreign_key="user.id")
    username: str
    email: str
    time: int
    is_personal_best: bool = ORMField(default=True)
    screenshot: Optional[str] = None
    replay: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Score"]

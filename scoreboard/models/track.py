"""Database model for race tracks."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

MAP_TYPES = ("Campaign", "Weekly", "Custom", "Weekly-Challenge", "Campaign-Challenge")
DIFFICULTIES = ("Beginner", "Intermediate", "Advanced", "Expert", "Lunatic")


class Track(SQLModel, table=True):
    """Race course with its medal thresholds (milliseconds)."""

    id: str = ORMField(primary_key=True)
    name: str
    author: str = ORMField(default="Nadeo")
    map_type: str = ORMField(default="Campaign", index=True)
    difficulty: str = ORMField(default="Intermediate")
    author_time: Optional[int] = None
    gold_time: Optional[int] = None
    silver_time: Optional[int] = None
    bronze_time: Optional[int] = None
    week_number: Optional[int] = ORMField(default=None, index=True)
    is_active: bool = ORMField(default=True)
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["DIFFICULTIES", "MAP_TYPES", "Track"]

"""Built-in track catalogue loaded into an empty database."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlmodel import Session, func, select

from ..models import Track

logger = logging.getLogger(__name__)

_CAMPAIGN_RELEASE = datetime(2025, 6, 1, tzinfo=timezone.utc)
_WEEK_RELEASES = {
    32: datetime(2025, 8, 1, tzinfo=timezone.utc),
    33: datetime(2025, 8, 8, tzinfo=timezone.utc),
}

# (difficulty, author, gold, silver, bronze) per campaign map, in order.
_CAMPAIGN = [
    ("Beginner", 42000, 45000, 50000, 60000),
    ("Beginner", 38000, 42000, 48000, 58000),
    ("Beginner", 35000, 40000, 46000, 55000),
    ("Beginner", 32000, 38000, 44000, 52000),
    ("Beginner", 28000, 35000, 42000, 50000),
    ("Intermediate", 45000, 50000, 58000, 70000),
    ("Intermediate", 52000, 58000, 68000, 82000),
    ("Intermediate", 48000, 55000, 65000, 78000),
    ("Intermediate", 55000, 62000, 72000, 85000),
    ("Intermediate", 42000, 48000, 56000, 68000),
    ("Intermediate", 58000, 65000, 75000, 88000),
    ("Intermediate", 50000, 57000, 67000, 80000),
    ("Intermediate", 47000, 54000, 64000, 77000),
    ("Intermediate", 53000, 60000, 70000, 83000),
    ("Intermediate", 46000, 53000, 63000, 76000),
    ("Advanced", 62000, 70000, 82000, 95000),
    ("Advanced", 68000, 76000, 88000, 102000),
    ("Advanced", 55000, 63000, 75000, 88000),
    ("Advanced", 72000, 80000, 92000, 105000),
    ("Advanced", 65000, 73000, 85000, 98000),
    ("Advanced", 59000, 67000, 79000, 92000),
    ("Advanced", 75000, 83000, 95000, 108000),
    ("Advanced", 63000, 71000, 83000, 96000),
    ("Advanced", 67000, 75000, 87000, 100000),
    ("Advanced", 70000, 78000, 90000, 103000),
]

_WEEKLY = {
    32: [
        ("Intermediate", 45000, 50000, 58000, 70000),
        ("Intermediate", 52000, 58000, 68000, 82000),
        ("Advanced", 48000, 55000, 65000, 78000),
        ("Advanced", 55000, 62000, 72000, 85000),
        ("Expert", 42000, 48000, 56000, 68000),
    ],
    33: [
        ("Intermediate", 46000, 52000, 60000, 72000),
        ("Intermediate", 53000, 59000, 69000, 83000),
        ("Advanced", 49000, 56000, 66000, 79000),
        ("Advanced", 56000, 63000, 73000, 86000),
        ("Expert", 43000, 49000, 57000, 69000),
    ],
}


def default_tracks() -> List[Dict[str, Any]]:
    """Summer 2025 campaign (ids 1-25) and weekly maps of weeks 32 and 33."""

    tracks: List[Dict[str, Any]] = []
    for number, (difficulty, author, gold, silver, bronze) in enumerate(_CAMPAIGN, start=1):
        tracks.append(
            {
                "id": str(number),
                "name": f"Summer 2025 - {number:02d}",
                "map_type": "Campaign",
                "difficulty": difficulty,
                "author_time": author,
                "gold_time": gold,
                "silver_time": silver,
                "bronze_time": bronze,
                "created_at": _CAMPAIGN_RELEASE,
            }
        )
    for week, maps in _WEEKLY.items():
        for number, (difficulty, author, gold, silver, bronze) in enumerate(maps, start=1):
            tracks.append(
                {
                    "id": f"w{week}-{number}",
                    "name": f"Weekly {week} - {number:02d}",
                    "map_type": "Weekly",
                    "difficulty": difficulty,
                    "author_time": author,
                    "gold_time": gold,
                    "silver_time": silver,
                    "bronze_time": bronze,
                    "week_number": week,
                    "created_at": _WEEK_RELEASES[week],
                }
            )
    return tracks


def seed_tracks(session: Session) -> int:
    """Insert the default catalogue when no track exists yet."""

    existing = session.exec(select(func.count()).select_from(Track)).one()
    if existing:
        return 0

    rows = default_tracks()
    for data in rows:
        session.add(Track(**data, updated_at=data["created_at"]))
    session.commit()
    logger.info("Seeded %d default tracks", len(rows))
    return len(rows)


__all__ = ["default_tracks", "seed_tracks"]

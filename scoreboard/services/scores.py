"""Score persistence and the keep-the-best submission policy."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from ..core.errors import ScoreNotFoundError, TrackNotFoundError
from ..core.time import format_time, utcnow
from ..models import Score, Track, User
from .challenges import resolve_track_id

logger = logging.getLogger(__name__)

OUTCOME_CREATED = "created"
OUTCOME_IMPROVED = "improved"
OUTCOME_UNCHANGED = "unchanged"

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _find_score(session: Session, user_id: int, track_id: str) -> Optional[Score]:
    return session.exec(
        select(Score).where(Score.user_id == user_id, Score.track_id == track_id)
    ).first()


def _upsert_if_better(
    session: Session,
    user: User,
    track_id: str,
    time: int,
    screenshot: Optional[str],
    replay: Optional[str],
) -> None:
    """Insert the row, or lower the stored time, in a single statement.

    The unique (user_id, track_id) constraint is the arbiter: concurrent
    submissions can never leave two rows, and the WHERE clause on the
    conflict branch means a stored time only ever gets faster.
    """

    dialect = session.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect]
    except KeyError as exc:
        raise RuntimeError(f"Score upsert is not supported on '{dialect}'") from exc

    now = utcnow()
    table = Score.__table__
    stmt = insert(table).values(
        track_id=track_id,
        user_id=user.id,
        username=user.username,
        email=user.email,
        time=time,
        is_personal_best=True,
        screenshot=screenshot,
        replay=replay,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.user_id, table.c.track_id],
        set_={
            "time": stmt.excluded.time,
            "screenshot": sa.func.coalesce(stmt.excluded.screenshot, table.c.screenshot),
            "replay": sa.func.coalesce(stmt.excluded.replay, table.c.replay),
            "username": stmt.excluded.username,
            "email": stmt.excluded.email,
            # a faster lap counts as a new submission for tie-breaks
            "created_at": stmt.excluded.created_at,
            "updated_at": stmt.excluded.updated_at,
        },
        where=table.c.time > stmt.excluded.time,
    )
    session.execute(stmt)
    session.commit()


def submit_score(
    session: Session,
    user: User,
    track_id: str,
    time: int,
    screenshot: Optional[str] = None,
    replay: Optional[str] = None,
) -> Tuple[Score, str]:
    """Record ``time`` for ``user`` if it beats their stored best.

    Returns the stored row and one of ``created``, ``improved`` or
    ``unchanged``. A slower or equal time is a successful no-op.
    """

    real_track_id = resolve_track_id(session, track_id)
    if session.get(Track, real_track_id) is None:
        raise TrackNotFoundError(track_id)

    previous = _find_score(session, user.id, real_track_id)
    previous_time = previous.time if previous else None

    _upsert_if_better(session, user, real_track_id, time, screenshot or None, replay or None)

    score = _find_score(session, user.id, real_track_id)
    applied = score.time == time

    if applied and previous_time is None:
        outcome = OUTCOME_CREATED
        logger.info(
            "New score user=%s track=%s time=%s", user.username, real_track_id, format_time(time)
        )
    elif applied and time < previous_time:
        outcome = OUTCOME_IMPROVED
        logger.info(
            "Score improved user=%s track=%s %s -> %s",
            user.username,
            real_track_id,
            format_time(previous_time),
            format_time(score.time),
        )
    else:
        outcome = OUTCOME_UNCHANGED
        logger.info(
            "Score not updated user=%s track=%s stored=%s submitted=%s",
            user.username,
            real_track_id,
            format_time(score.time),
            format_time(time),
        )
    return score, outcome


def delete_score(session: Session, user: User, track_id: str) -> Score:
    """Remove the caller's own score on a (possibly virtual) track."""

    real_track_id = resolve_track_id(session, track_id)
    score = _find_score(session, user.id, real_track_id)
    if score is None:
        logger.warning("Delete score failed user=%s track=%s: not found", user.id, real_track_id)
        raise ScoreNotFoundError(real_track_id)

    session.delete(score)
    session.commit()
    logger.info(
        "Score deleted user=%s track=%s time=%s",
        user.username,
        real_track_id,
        format_time(score.time),
    )
    return score


def list_track_scores(session: Session, track_id: str) -> List[Score]:
    return list(
        session.exec(
            select(Score)
            .where(Score.track_id == track_id)
            .order_by(Score.time, Score.created_at, Score.id)
        ).all()
    )


def list_user_scores(session: Session, user_id: int) -> List[Score]:
    return list(
        session.exec(
            select(Score).where(Score.user_id == user_id).order_by(Score.created_at.desc())
        ).all()
    )


def fetch_all_scores(session: Session) -> List[Score]:
    return list(
        session.exec(select(Score).order_by(Score.time, Score.created_at, Score.id)).all()
    )


def fastest_time(session: Session) -> Optional[int]:
    return session.exec(select(sa.func.min(Score.time))).one()


def count_scores(session: Session) -> int:
    return session.exec(select(sa.func.count()).select_from(Score)).one()


__all__ = [
    "OUTCOME_CREATED",
    "OUTCOME_IMPROVED",
    "OUTCOME_UNCHANGED",
    "count_scores",
    "delete_score",
    "fastest_time",
    "fetch_all_scores",
    "list_track_scores",
    "list_user_scores",
    "submit_score",
]

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from scoreboard.core.errors import ScoreNotFoundError, TrackNotFoundError
from scoreboard.models import Score
from scoreboard.services.scores import (
    OUTCOME_CREATED,
    OUTCOME_IMPROVED,
    OUTCOME_UNCHANGED,
    delete_score,
    list_track_scores,
    submit_score,
)


def _rows(session, user_id, track_id):
    return session.exec(
        select(Score).where(Score.user_id == user_id, Score.track_id == track_id)
    ).all()


def test_first_submission_creates_row(session, make_user):
    user = make_user("alice")

    score, outcome = submit_score(session, user, "6", 52000)

    assert outcome == OUTCOME_CREATED
    assert score.time == 52000
    assert score.username == "alice"
    assert score.is_personal_best is True


def test_only_faster_times_replace_the_stored_one(session, make_user):
    user = make_user("alice")
    submit_score(session, user, "6", 52000)

    _, outcome = submit_score(session, user, "6", 60000)
    assert outcome == OUTCOME_UNCHANGED
    assert _rows(session, user.id, "6")[0].time == 52000

    _, outcome = submit_score(session, user, "6", 52000)
    assert outcome == OUTCOME_UNCHANGED

    score, outcome = submit_score(session, user, "6", 48000)
    assert outcome == OUTCOME_IMPROVED
    assert score.time == 48000

    rows = _rows(session, user.id, "6")
    assert len(rows) == 1
    assert rows[0].time == 48000


def test_slower_time_keeps_existing_screenshot(session, make_user):
    user = make_user("alice")
    submit_score(session, user, "6", 52000, screenshot="https://img.example/a.png")
    submit_score(session, user, "6", 50000)

    assert _rows(session, user.id, "6")[0].screenshot == "https://img.example/a.png"


def test_submission_through_challenge_id_is_stored_on_real_track(session, make_user):
    user = make_user("alice")

    score, outcome = submit_score(session, user, "weekly-challenge", 47000)

    assert outcome == OUTCOME_CREATED
    assert score.track_id == "w33-4"
    assert [s.id for s in list_track_scores(session, "w33-4")] == [score.id]

    _, outcome = submit_score(session, user, "w33-4", 46000)
    assert outcome == OUTCOME_IMPROVED
    assert len(_rows(session, user.id, "w33-4")) == 1


def test_unknown_track_is_rejected(session, make_user):
    user = make_user("alice")
    with pytest.raises(TrackNotFoundError):
        submit_score(session, user, "does-not-exist", 40000)
    assert session.exec(select(Score)).all() == []


def test_store_refuses_duplicate_user_track_rows(session, make_user):
    user = make_user("alice")
    submit_score(session, user, "6", 52000)

    session.add(
        Score(track_id="6", user_id=user.id, username=user.username, email=user.email, time=40000)
    )
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_delete_own_score(session, make_user):
    user = make_user("alice")
    other = make_user("bob")
    submit_score(session, user, "6", 52000)
    submit_score(session, other, "6", 51000)

    removed = delete_score(session, user, "6")

    assert removed.username == "alice"
    assert [s.username for s in list_track_scores(session, "6")] == ["bob"]


def test_delete_missing_score(session, make_user):
    user = make_user("alice")
    with pytest.raises(ScoreNotFoundError):
        delete_score(session, user, "6")


def test_improved_time_ranks_after_earlier_equal_time(session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    submit_score(session, alice, "6", 60000)
    submit_score(session, bob, "6", 50000)

    _, outcome = submit_score(session, alice, "6", 50000)

    assert outcome == OUTCOME_IMPROVED
    assert [s.username for s in list_track_scores(session, "6")] == ["bob", "alice"]

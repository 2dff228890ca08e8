from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from scoreboard.app import app
from tests.testkit import auth_headers, register, submit


def test_health(client):
    res = client.get("/health")
    body = res.json()
    assert res.status_code == 200
    assert body["success"] is True
    assert body["message"] == "Server is healthy"
    assert body["environment"] == "test"


def test_register_login_and_me(client):
    data = register(client, "alice")
    assert data["user"]["role"] == "user"
    assert data["token"]

    res = client.post("/auth/login", json={"email": "ALICE@example.com", "password": "secret1"})
    assert res.status_code == 200
    token = res.json()["data"]["token"]

    me = client.get("/auth/me", headers=auth_headers(token)).json()
    assert me["data"]["user"]["username"] == "alice"
    assert client.get("/users/me", headers=auth_headers(token)).json()["data"]["user"]["id"] == me["data"]["user"]["id"]


def test_register_duplicate_is_conflict(client):
    register(client, "alice")
    res = client.post(
        "/auth/register",
        json={
            "username": "Alice",
            "email": "other@example.com",
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )
    assert res.status_code == 409
    assert res.json()["success"] is False


def test_register_validation_error_envelope(client):
    res = client.post(
        "/auth/register",
        json={"username": "al", "email": "nope", "password": "123", "confirmPassword": "456"},
    )
    body = res.json()
    assert res.status_code == 400
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"]


def test_login_with_wrong_password(client):
    register(client, "alice")
    res = client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong1"})
    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Invalid email or password", "code": "UNAUTHORIZED"}


def test_submit_requires_token(client):
    res = client.post("/scores/submit", json={"trackId": "6", "time": 44000})
    assert res.status_code == 401
    assert res.json()["success"] is False

    res = client.post(
        "/scores/submit",
        json={"trackId": "6", "time": 44000},
        headers=auth_headers("not-a-token"),
    )
    assert res.status_code == 401


def test_submit_rejects_non_positive_time(client, player):
    res = submit(client, player["token"], "6", 0)
    assert res.status_code == 400


def test_submit_then_slower_time_is_a_successful_no_op(client, player):
    res = submit(client, player["token"], "6", 44000)
    body = res.json()
    assert res.status_code == 200
    assert body["data"]["outcome"] == "created"
    assert body["data"]["score"]["position"] == 1
    assert body["data"]["score"]["medal"] == "Author"

    res = submit(client, player["token"], "6", 70000)
    body = res.json()
    assert res.status_code == 200
    assert body["success"] is True
    assert body["data"]["outcome"] == "unchanged"
    assert body["data"]["score"]["time"] == 44000

    board = client.get("/tracks/6/leaderboard").json()["data"]
    assert board["totalPlayers"] == 1
    assert board["scores"][0]["time"] == 44000


def test_submit_unknown_track(client, player):
    res = submit(client, player["token"], "nowhere", 44000)
    assert res.status_code == 404
    assert res.json()["message"] == "Track not found"


def test_equal_times_rank_earlier_submission_first(client, player):
    second = register(client, "bob")
    submit(client, player["token"], "7", 50000)
    submit(client, second["token"], "7", 50000)

    scores = client.get("/tracks/7/leaderboard").json()["data"]["scores"]
    assert [(s["username"], s["position"]) for s in scores] == [("racer", 1), ("bob", 2)]


def test_leaderboard_for_unknown_track(client):
    res = client.get("/tracks/nowhere/leaderboard")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Track not found", "code": "NOT_FOUND"}


def test_weekly_challenge_leaderboard_resolves_to_real_track(client, player):
    submit(client, player["token"], "w33-4", 47000)

    challenge = client.get("/tracks/weekly-challenge").json()["data"]
    assert challenge["track"]["id"] == "w33-4"
    assert challenge["track"]["mapType"] == "Weekly-Challenge"
    assert challenge["participantCount"] == 1

    board = client.get("/tracks/weekly-challenge/leaderboard").json()["data"]
    assert board["trackId"] == "weekly-challenge"
    assert [s["time"] for s in board["scores"]] == [47000]


def test_bulk_leaderboards_report_missing_tracks_per_entry(client, player):
    submit(client, player["token"], "1", 40000)

    res = client.get("/tracks/bulk-leaderboards", params={"trackIds": "1,2,nonexistent"})
    body = res.json()

    assert res.status_code == 200
    leaderboards = body["data"]["leaderboards"]
    assert [entry["trackId"] for entry in leaderboards] == ["1", "2", "nonexistent"]
    assert leaderboards[0]["scores"][0]["time"] == 40000
    assert leaderboards[1]["scores"] == []
    assert leaderboards[2] == {"trackId": "nonexistent", "error": "Track not found"}
    assert body["data"]["summary"] == {"total": 3, "successful": 2, "failed": 1}


def test_bulk_leaderboards_limits(client):
    too_many = ",".join(str(n) for n in range(1, 22))
    assert client.get("/tracks/bulk-leaderboards", params={"trackIds": too_many}).status_code == 400
    assert client.get("/tracks/bulk-leaderboards", params={"trackIds": " , "}).status_code == 400


def test_delete_score(client, player):
    res = client.delete("/scores/track/6", headers=player["headers"])
    assert res.status_code == 404
    assert res.json()["message"] == "Score not found"

    submit(client, player["token"], "6", 44000)
    res = client.delete("/scores/track/6", headers=player["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["deletedScore"]["time"] == 44000
    assert client.get("/scores/track/6").json()["data"]["scores"] == []


def test_my_scores(client, player):
    other = register(client, "bob")
    submit(client, other["token"], "6", 43000)
    submit(client, player["token"], "6", 44000)
    submit(client, player["token"], "w33-1", 90000)

    rows = client.get("/scores/my-scores", headers=player["headers"]).json()["data"]["scores"]
    by_track = {row["trackId"]: row for row in rows}
    assert by_track["6"]["position"] == 2
    assert by_track["6"]["medal"] == "Author"
    assert by_track["w33-1"]["medal"] == "None"


def test_admin_only_track_management(client, player, admin):
    payload = {"name": "Night Loop", "mapType": "Custom", "authorTime": 30000}

    res = client.post("/tracks", json=payload, headers=player["headers"])
    assert res.status_code == 403

    res = client.post("/tracks", json=payload, headers=admin["headers"])
    assert res.status_code == 201
    track = res.json()["data"]
    assert track["id"] == "night-loop"

    assert client.delete("/tracks/night-loop", headers=player["headers"]).status_code == 403
    assert client.delete("/tracks/night-loop", headers=admin["headers"]).status_code == 200
    assert client.get("/tracks/night-loop").status_code == 404


def test_create_weekly_track_generates_week_id(client, admin):
    res = client.post(
        "/tracks",
        json={"name": "Weekly 33 - 06", "mapType": "Weekly", "weekNumber": 33},
        headers=admin["headers"],
    )
    assert res.status_code == 201
    assert res.json()["data"]["id"] == "w33-6"

    week = client.get("/tracks/week/33").json()
    assert week["trackCount"] == 6


def test_admin_repoints_campaign_challenge(client, player, admin):
    res = client.put(
        "/tracks/campaign-challenge", json={"trackId": "5"}, headers=player["headers"]
    )
    assert res.status_code == 403

    res = client.put(
        "/tracks/campaign-challenge", json={"trackId": "5"}, headers=admin["headers"]
    )
    assert res.status_code == 200
    assert res.json()["data"]["track"]["id"] == "5"

    res = client.put(
        "/tracks/campaign-challenge", json={"trackId": "nowhere"}, headers=admin["headers"]
    )
    assert res.status_code == 404
    assert client.get("/tracks/campaign-challenge").json()["data"]["track"]["id"] == "5"


def test_list_tracks_filters(client):
    body = client.get("/tracks", params={"mapType": "Weekly"}).json()
    assert body["pagination"]["total"] == 10
    assert {track["mapType"] for track in body["data"]} == {"Weekly"}

    assert client.get("/tracks/week/99").status_code == 404


def test_global_and_campaign_leaderboards(client, player):
    other = register(client, "bob")
    submit(client, player["token"], "1", 40000)
    submit(client, other["token"], "1", 41000)
    submit(client, other["token"], "w33-1", 41000)

    data = client.get("/tracks/global-leaderboard").json()["data"]
    assert {row["username"] for row in data["globalRankings"]} == {"racer", "bob"}
    assert data["weeklyChampions"][0]["username"] == "bob"

    data = client.get("/tracks/campaign-leaderboard").json()["data"]
    points = {row["username"]: row["points"] for row in data["campaignRankings"]}
    assert points == {"racer": 10, "bob": 7}


def test_user_stats(client, player):
    submit(client, player["token"], "1", 40000)
    user_id = player["user"]["id"]

    stats = client.get(f"/users/{user_id}/stats").json()["data"]
    assert stats["totalRaces"] == 1
    assert stats["firstPlaceFinishes"] == 1
    assert stats["campaignProgress"] == 4

    assert client.get("/users/9999/stats").status_code == 404


def test_site_stats(client, player):
    submit(client, player["token"], "1", 83456)
    data = client.get("/auth/stats").json()["data"]
    assert data == {"totalUsers": 1, "totalRecords": 1, "bestTime": "01:23.456"}


def test_unhandled_errors_use_envelope_without_detail(monkeypatch):
    from scoreboard.api.routers import system

    def boom(_value):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(system, "isoformat", boom)
    res = TestClient(app, raise_server_exceptions=False).get("/health")

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Internal server error", "code": "INTERNAL_ERROR"}


def test_weekly_id_generation_after_delete(client, admin):
    assert client.delete("/tracks/w33-2", headers=admin["headers"]).status_code == 200

    res = client.post(
        "/tracks",
        json={"name": "New weekly", "mapType": "Weekly", "weekNumber": 33},
        headers=admin["headers"],
    )
    assert res.status_code == 201
    assert res.json()["data"]["id"] == "w33-6"


def test_challenge_categories_cannot_be_created(client, admin):
    res = client.post(
        "/tracks",
        json={"name": "Fake slot", "mapType": "Weekly-Challenge", "weekNumber": 33},
        headers=admin["headers"],
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"


def test_my_scores_positions_across_tracks(client, player):
    other = register(client, "bob")
    submit(client, other["token"], "1", 39000)
    submit(client, player["token"], "1", 40000)
    submit(client, player["token"], "2", 30000)
    submit(client, other["token"], "2", 31000)

    rows = client.get("/scores/my-scores", headers=player["headers"]).json()["data"]["scores"]
    assert {row["trackId"]: row["position"] for row in rows} == {"1": 2, "2": 1}


def test_failed_requests_are_logged(monkeypatch, caplog):
    from scoreboard.api.routers import system

    def boom(_value):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(system, "isoformat", boom)
    with caplog.at_level(logging.WARNING, logger="scoreboard.app"):
        TestClient(app, raise_server_exceptions=False).get("/health")

    assert any(
        record.name == "scoreboard.app" and "GET /health -> 500" in record.getMessage()
        for record in caplog.records
    )

from __future__ import annotations

from fastapi.testclient import TestClient


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, username: str, email: str | None = None) -> dict:
    res = client.post(
        "/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


def submit(client: TestClient, token: str, track_id: str, time: int):
    return client.post(
        "/scores/submit",
        json={"trackId": track_id, "time": time},
        headers=auth_headers(token),
    )

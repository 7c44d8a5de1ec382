# tests/test_auth_api.py

from __future__ import annotations

import uuid

from auth.security import create_access_token


def test_register_returns_usable_token(client) -> None:
    res = client.post(
        "/auth/register",
        json={"email": "Ivy@Example.com", "password": "leafy-pass", "name": "Ivy"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["user"]["email"] == "ivy@example.com"
    assert "password_hash" not in body["user"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user_id"] == body["user"]["user_id"]


def test_register_duplicate_email(client, user) -> None:
    res = client.post(
        "/auth/register",
        json={"email": "gardener@example.com", "password": "another1", "name": "Again"},
    )

    assert res.status_code == 400
    assert res.json()["detail"] == "Email already registered"


def test_register_rejects_short_password(client) -> None:
    res = client.post("/auth/register", json={"email": "a@b.c", "password": "123", "name": "A"})

    assert res.status_code == 422


def test_login(client, user) -> None:
    res = client.post("/auth/login", json={"email": "gardener@example.com", "password": "secret123"})

    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Test User"
    assert res.json()["token"]


def test_login_wrong_password(client, user) -> None:
    res = client.post("/auth/login", json={"email": "gardener@example.com", "password": "nope-nope"})

    assert res.status_code == 401


def test_login_unknown_email(client) -> None:
    res = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert res.status_code == 401


def test_me_rejects_token_for_unknown_user(client, db_session) -> None:
    token = create_access_token(uuid.uuid4())

    res = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401


def test_me_rejects_missing_token(client) -> None:
    assert client.get("/auth/me").status_code == 401

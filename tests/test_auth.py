"""
Tests for registration, login and the current-user endpoint.
"""

import asyncio
from unittest.mock import patch

from sqlalchemy.orm import Session

from task_api.models import User


def _stored_user(app, email):
    with app.state.session_factory() as db:
        return db.query(User).filter(User.email == email).first()


class TestRegister:
    def test_register_returns_user_and_token(self, client, app):
        response = client.post(
            "/api/auth/register",
            json={"username": "testuser", "email": "test@example.com", "password": "password123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["token"]
        assert body["data"]["user"]["username"] == "testuser"
        assert body["data"]["user"]["email"] == "test@example.com"
        assert "password" not in body["data"]["user"]
        assert "hashed_password" not in body["data"]["user"]

        stored = _stored_user(app, "test@example.com")
        assert stored.hashed_password != "password123"
        assert stored.id == body["data"]["user"]["id"]

    def test_token_carries_new_user_identity(self, client, app, register):
        data = register("claimuser")
        claim = app.state.token_service.decode_token(data["token"])
        assert claim.user_id == data["user"]["id"]
        assert claim.email == "claimuser@example.com"

    def test_missing_fields(self, client):
        for body in (
            {"email": "a@example.com", "password": "pw"},
            {"username": "a", "password": "pw"},
            {"username": "a", "email": "a@example.com"},
            {"username": "", "email": "a@example.com", "password": "pw"},
        ):
            response = client.post("/api/auth/register", json=body)
            assert response.status_code == 400
            assert response.json() == {
                "success": False,
                "message": "Please provide all required fields",
            }

    def test_duplicate_email(self, client, register):
        register("first", "dup@example.com")
        response = client.post(
            "/api/auth/register",
            json={"username": "second", "email": "dup@example.com", "password": "password123"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User with this email or username already exists"

    def test_duplicate_username(self, client, register):
        register("samename", "one@example.com")
        response = client.post(
            "/api/auth/register",
            json={"username": "samename", "email": "two@example.com", "password": "password123"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_malformed_email_is_accepted(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "loose", "email": "not-an-email", "password": "password123"},
        )
        assert response.status_code == 201

    def test_store_failure_is_internal_error(self, client):
        with patch("task_api.routers.auth.get_password_hash", side_effect=RuntimeError("disk full")):
            response = client.post(
                "/api/auth/register",
                json={"username": "boom", "email": "boom@example.com", "password": "password123"},
            )
        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Error registering user",
            "error": "disk full",
        }

    def test_non_object_body_is_bad_request(self, client):
        response = client.post("/api/auth/register", json=["not", "an", "object"])
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestLogin:
    def test_login_success(self, client, register):
        register("loginuser", "login@example.com")
        response = client.post(
            "/api/auth/login",
            json={"email": "login@example.com", "password": "password123"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["token"]
        assert body["data"]["user"]["email"] == "login@example.com"
        assert "password" not in body["data"]["user"]
        assert "hashed_password" not in body["data"]["user"]

    def test_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"email": "login@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide email and password"

    def test_wrong_password_and_unknown_email_look_the_same(self, client, register):
        register("loginuser", "login@example.com")
        wrong_password = client.post(
            "/api/auth/login",
            json={"email": "login@example.com", "password": "wrongpassword"},
        )
        unknown_email = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )
        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["message"] == "Invalid credentials"


class TestMe:
    def test_me_returns_profile(self, client, user, headers):
        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user["user"]["id"]
        assert data["username"] == "taskuser"
        assert "created_at" in data
        assert "hashed_password" not in data

    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "No token provided. Authorization denied."

    def test_me_for_unknown_user(self, client, app):
        token = app.state.token_service.create_access_token("ghost-id", "ghost@example.com")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"


def _track_event_loop_use(calls):
    original = Session.query

    def query(self, *args, **kwargs):
        try:
            asyncio.get_running_loop()
            calls.append("on_loop")
        except RuntimeError:
            calls.append("worker")
        return original(self, *args, **kwargs)

    return patch.object(Session, "query", query)


def test_register_and_login_query_the_store_off_the_event_loop(client):
    calls = []
    with _track_event_loop_use(calls):
        registered = client.post(
            "/api/auth/register",
            json={"username": "offloop", "email": "offloop@example.com", "password": "password123"},
        )
        logged_in = client.post(
            "/api/auth/login",
            json={"email": "offloop@example.com", "password": "password123"},
        )

    assert registered.status_code == 201
    assert logged_in.status_code == 200
    assert calls
    assert set(calls) == {"worker"}


def test_new_users_get_timezone_aware_timestamps(client, app):
    client.post(
        "/api/auth/register",
        json={"username": "stamped", "email": "stamped@example.com", "password": "password123"},
    )
    assert _stored_user(app, "stamped@example.com") is not None

    fresh = User(username="x", email="x@example.com", hashed_password="h")
    assert fresh.created_at.tzinfo is not None
    assert fresh.updated_at.tzinfo is not None

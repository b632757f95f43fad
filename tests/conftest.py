import uuid

import pytest
from fastapi.testclient import TestClient

from task_api.config import Settings
from task_api.main import create_app

TEST_SECRET = "test_jwt_secret_key_12345"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        jwt_expire_minutes=60,
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user and return the ``{user, token}`` payload."""

    def _register(username, email=None, password="password123"):
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _register


@pytest.fixture
def user(register):
    return register("taskuser")


@pytest.fixture
def other_user(register):
    return register("anotheruser", "another@example.com")


@pytest.fixture
def headers(user):
    return {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {other_user['token']}"}


@pytest.fixture
def missing_task_id():
    return str(uuid.uuid4())

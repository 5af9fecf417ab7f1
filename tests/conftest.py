"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from unidir.config.settings import AuthSettings, LoggingSettings, Settings
from unidir.runtime.server import create_app
from unidir.runtime.storage.memory import InMemoryDirectoryStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture
def settings():
    """Settings with fast hashing and a bootstrap admin."""
    return Settings(
        auth=AuthSettings(
            jwt_secret="test-secret",
            bcrypt_rounds=4,
            bootstrap_email=ADMIN_EMAIL,
            bootstrap_password=ADMIN_PASSWORD,
        ),
        logging=LoggingSettings(level="WARNING", json_output=False),
    )


@pytest.fixture
def store():
    """A fresh in-memory store."""
    return InMemoryDirectoryStore()


@pytest.fixture
def app(settings, store):
    """Create a fresh app instance for testing."""
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    """Create a test client with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token(client):
    """Log in as the bootstrap admin and return the session token."""
    response = client.post(
        "/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    """Headers carrying the admin token."""
    return {"token": token}


UNIVERSITY = {
    "name": "University of Melbourne",
    "country": "Australia",
    "campus_name": "Parkville",
    "city": "Melbourne",
}

IELTS = {"reading": 6.5, "listening": 6.5, "writing": 6.0, "speaking": 6.0, "overall": 6.5}

PTE = {"reading": 58, "listening": 58, "writing": 58, "speaking": 58, "overall": 58}


@pytest.fixture
def university_id(client, auth_headers):
    """Create a university and return its id."""
    response = client.post("/university", json=UNIVERSITY, headers=auth_headers)
    assert response.status_code == 200
    return response.json()["result"]["id"]

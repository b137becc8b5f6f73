"""Pytest configuration and fixtures."""

import pytest

from app import create_app
from config import Settings
from extensions import db

TEST_SECRET = "test-signing-secret"
TEST_EMAIL = "alice@example.com"
TEST_PASSWORD = "correct horse battery"


@pytest.fixture()
def settings():
    return Settings(jwt_secret=TEST_SECRET, database_url="sqlite://", environment="test")


@pytest.fixture()
def app(settings):
    """A fresh app over an empty in-memory database, bcrypt at minimum cost."""
    app = create_app(settings, {"TESTING": True, "BCRYPT_LOG_ROUNDS": 4})
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture()
def services(app):
    return app.extensions["taskflow"]


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def other_client(app):
    """A second browser, for a second user."""
    return app.test_client()


def register(client, email=TEST_EMAIL, password=TEST_PASSWORD):
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]["user"]


@pytest.fixture()
def alice(client):
    return register(client)


@pytest.fixture()
def bob(other_client):
    return register(other_client, "bob@example.com", "bob's password")

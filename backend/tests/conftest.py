"""Pytest fixtures building an isolated application per test.

Each test gets a fresh in-memory document store, so data never leaks
between cases. bcrypt runs at its minimum cost to keep the suite fast.
"""

from __future__ import annotations

import os

import pytest
from faction_api.core.config import AuthSettings, TestingConfig
from faction_api.factory import create_app
from faction_api.infra.store import InMemoryDocumentStore
from faction_api.services.auth import AuthService, LoginIn, RegisterIn

from tests.factories.user import RegistrationFactory


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Fixed signing secret and minimum bcrypt cost.
    - No API key and no rate limiting unless a test opts in.
    - Proxy headers are not trusted.
    """

    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    """Provide an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture()
def app(store):
    """Create a Flask application bound to the ``store`` fixture.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestConfig, store=store)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def settings() -> AuthSettings:
    return AuthSettings(secret_key=TestConfig.JWT_SECRET_KEY, bcrypt_rounds=4)


@pytest.fixture()
def auth_service(store, settings) -> AuthService:
    """AuthService wired to the same store as the app."""
    return AuthService(store, settings)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def registration() -> dict:
    """A registration payload as sent by clients (camelCase keys)."""
    return RegistrationFactory()


@pytest.fixture()
def user(app, registration) -> dict:
    """Register ``registration`` through the app's service and return it with its id."""
    service: AuthService = app.extensions["auth_service"]
    user_id = service.register(
        RegisterIn(
            username=registration["username"],
            password=registration["password"],
            faction_id=registration["factionId"],
            rank=registration["rank"],
        )
    )
    return {**registration, "id": user_id}


@pytest.fixture()
def tokens(app, user) -> dict:
    """Log ``user`` in and return ``{"access": ..., "refresh": ...}``."""
    service: AuthService = app.extensions["auth_service"]
    pair = service.login(LoginIn(username=user["username"], password=user["password"]))
    return {"access": pair.access_token, "refresh": pair.refresh_token}


@pytest.fixture()
def auth_header(tokens) -> dict:
    return {"Authorization": f"Bearer {tokens['access']}"}

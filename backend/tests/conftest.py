"""Pytest fixtures providing an application with a fresh in-memory database.

Each test gets its own app and schema; data committed by the code under test
never leaks into the next case.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest

from mercury.core.config import TestingConfig
from mercury.core.extensions import db as _db
from mercury.factory import create_app
from mercury.infra.jwt.hs512_token_codec import HS512TokenCodec
from mercury.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from mercury.repositories import RoleRepository
from mercury.services._shared.ports import FrozenClock
from mercury.services.auth.dto import AuthSettings
from mercury.services.auth.service import AuthenticationService

#: Signing key used by unit tests (exactly the HS512 minimum)
TEST_SECRET = b"s" * 64


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig` applied, an active app
        context and all tables created.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("TEST_DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Return the database extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session used by repositories and units of work."""
    return db.session


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def roles(session):
    """Seed the role catalogue (ids 1-4) and commit it."""
    counters = RoleRepository(session=session).ensure_catalogue()
    session.commit()
    return counters


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def clock() -> FrozenClock:
    """Controllable clock starting at 2024-01-01T00:00:00Z."""
    return FrozenClock()


@pytest.fixture()
def settings() -> AuthSettings:
    """One-minute access window, one-hour refresh window."""
    return AuthSettings(
        secret=TEST_SECRET,
        access_validity=timedelta(seconds=60),
        refresh_validity=timedelta(seconds=3600),
    )


@pytest.fixture()
def codec() -> HS512TokenCodec:
    return HS512TokenCodec(TEST_SECRET)


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    """Cheapest bcrypt cost to keep the suite fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture()
def service(app, settings, hasher, codec, clock) -> AuthenticationService:
    """AuthenticationService wired to the frozen clock and test database."""
    return AuthenticationService(
        settings=settings,
        password_hasher=hasher,
        token_codec=codec,
        clock=clock,
    )


# -- Hook up Factory Boy to the Flask-scoped session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when a test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)

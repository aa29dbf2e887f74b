"""Pytest fixtures configuring the app and an isolated transactional database.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest
from chatauth.core.config import TestingConfig
from chatauth.core.extensions import db as _db
from chatauth.factory import create_app
from chatauth.infra.argon2.argon2_password_hasher import Argon2PasswordHasher
from chatauth.infra.jwt.pyjwt_token_issuer import JWTTokenIssuer
from chatauth.services._shared.ports import (
    FrozenClock,
    InMemoryCredentialStore,
    InMemoryRevocationStore,
)
from chatauth.services.auth.service import AuthService
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - In-memory SQLite with pysqlite's implicit transaction handling turned
      off, so SAVEPOINTs nest correctly (see the ``db`` fixture).
    - In-memory revocation store, cheap Argon2, no rate limiting.
    """

    __test__ = False

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"isolation_level": None}}


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():

        @event.listens_for(_db.engine, "begin")
        def _emit_begin(conn):  # pragma: no cover - driver glue
            conn.exec_driver_sql("BEGIN")

        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    The session runs in ``create_savepoint`` mode: application-level
    ``commit()``/``rollback()`` only release or roll back a SAVEPOINT, and the
    outer transaction is rolled back when the test ends.
    """
    outer = connection.begin()
    factory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
    )
    scoped = scoped_session(factory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        outer.rollback()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Framework-free service wiring -------------------------------------------


@pytest.fixture()
def clock():
    """Frozen clock starting at a fixed instant."""
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture(scope="session")
def hasher():
    """Argon2id with cheap parameters (same algorithm, test-sized cost)."""
    return Argon2PasswordHasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)


@pytest.fixture()
def issuer(clock):
    return JWTTokenIssuer(secret=TEST_SECRET, clock=clock)


@pytest.fixture()
def credentials():
    return InMemoryCredentialStore()


@pytest.fixture()
def revocations(clock):
    return InMemoryRevocationStore(clock=clock)


@pytest.fixture()
def auth_service(credentials, hasher, issuer, revocations):
    """AuthService over in-memory stores and a frozen clock."""
    return AuthService(
        credentials=credentials,
        hasher=hasher,
        tokens=issuer,
        revocations=revocations,
    )


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture()
def factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield session
    SQLAlchemySession.set(None)

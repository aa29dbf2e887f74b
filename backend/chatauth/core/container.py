"""Composition root: build the authentication service from app config."""

from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, current_app

from chatauth.core.extensions import get_redis
from chatauth.infra.argon2.argon2_password_hasher import Argon2PasswordHasher
from chatauth.infra.jwt.pyjwt_token_issuer import JWTTokenIssuer
from chatauth.infra.redis.redis_revocation_store import RedisRevocationStore
from chatauth.infra.sqlalchemy.sqlalchemy_credential_store import SQLAlchemyCredentialStore
from chatauth.services._shared.ports import (
    Clock,
    CredentialStore,
    InMemoryRevocationStore,
    RevocationStore,
    SystemClock,
)
from chatauth.services.auth.service import AuthService

log = logging.getLogger(__name__)

EXTENSION_KEY = "auth_service"


def build_revocation_store(app: Flask, clock: Clock) -> RevocationStore:
    """Pick Redis when configured, otherwise the process-local store."""
    client = get_redis(app)
    if client is not None:
        return RedisRevocationStore(r=client, clock=clock)
    log.warning("revocations.in_memory", extra={"store": "revocations"})
    return InMemoryRevocationStore(clock=clock)


def build_auth_service(
    app: Flask,
    *,
    clock: Clock | None = None,
    credentials: CredentialStore | None = None,
    revocations: RevocationStore | None = None,
) -> AuthService:
    """
    Wire an :class:`AuthService` from ``app.config``.

    The signing secret is read here, once, and handed to the issuer.

    :param app: Configured application (extensions already initialized).
    :param clock: Time source shared by the issuer and revocation store.
    :param credentials: Override for the credential store.
    :param revocations: Override for the revocation store.
    """
    cfg = app.config
    clock = clock or SystemClock()
    tokens = JWTTokenIssuer(
        secret=cfg["JWT_SECRET_KEY"],
        clock=clock,
        access_ttl=timedelta(seconds=int(cfg["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_ttl=timedelta(seconds=int(cfg["REFRESH_TOKEN_TTL_SECONDS"])),
        algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
    )
    hasher = Argon2PasswordHasher(
        time_cost=int(cfg["ARGON2_TIME_COST"]),
        memory_cost=int(cfg["ARGON2_MEMORY_COST"]),
        parallelism=int(cfg["ARGON2_PARALLELISM"]),
    )
    return AuthService(
        credentials=credentials or SQLAlchemyCredentialStore(),
        hasher=hasher,
        tokens=tokens,
        revocations=revocations or build_revocation_store(app, clock),
    )


def init_app(app: Flask) -> None:
    """Build the service once and register it on ``app.extensions``."""
    app.extensions[EXTENSION_KEY] = build_auth_service(app)


def get_auth_service() -> AuthService:
    """Return the service bound to the current application."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("Auth service is not initialized. Call init_app() first.") from None

"""
chatauth.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts the
authentication service depends on.

These ports decouple the service layer from concrete implementations of
password hashing, token signing, revocation bookkeeping, identity storage
and time.

Modules
-------
- :mod:`credential_store`:
    Defines :class:`~.CredentialStore`, :class:`~.Identity` and
    :class:`~.NewIdentity`, plus :class:`~.InMemoryCredentialStore`.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher` -- memory-hard hash/verify contract.

- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer`, :class:`~.TokenClaims` and
    :class:`~.TokenKind` -- stateless signed-token minting and verification.

- :mod:`revocation_store`:
    Defines :class:`~.RevocationStore` and :class:`~.RevocationResult`, plus
    :class:`~.InMemoryRevocationStore`.

- :mod:`clock`:
    Defines :class:`~.Clock` with :class:`~.SystemClock` and :class:`~.FrozenClock`.

Design Notes
------------
All these ports follow the *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details.
Concrete adapters (Redis, SQLAlchemy, Argon2, PyJWT) live under
``chatauth.infra``.
"""

from __future__ import annotations

from .clock import Clock, FrozenClock, SystemClock
from .credential_store import CredentialStore, Identity, InMemoryCredentialStore, NewIdentity
from .password_hasher import PasswordHasher
from .revocation_store import (
    InMemoryRevocationStore,
    RevocationResult,
    RevocationStore,
    ttl_seconds,
)
from .token_issuer import TokenClaims, TokenIssuer, TokenKind

__all__ = [
    "Clock",
    "SystemClock",
    "FrozenClock",
    "CredentialStore",
    "Identity",
    "NewIdentity",
    "InMemoryCredentialStore",
    "PasswordHasher",
    "RevocationStore",
    "RevocationResult",
    "InMemoryRevocationStore",
    "ttl_seconds",
    "TokenIssuer",
    "TokenClaims",
    "TokenKind",
]

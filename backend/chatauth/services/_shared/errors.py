"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP,
SQLAlchemy or Redis. They are the stable contract between the credential and
revocation stores, the token issuer, and the authentication service.

The translation to HTTP responses (RFC 7807) is handled by
``chatauth/core/errors.py`` via ``BaseService.translate_exceptions()``.

Taxonomy
--------
- :class:`DuplicateIdentityError` -- registration collided with an existing identity.
- :class:`InvalidCredentialsError` -- unknown email or wrong password (indistinguishable).
- :class:`InvalidRefreshTokenError` -- malformed, forged, expired or wrong-kind refresh token.
- :class:`TokenRevokedError` -- token presented after rotation or logout.
- :class:`InvalidTokenError` / :class:`TokenExpiredError` -- bearer verification failures.
- :class:`StoreUnavailableError` -- infrastructure; never masked as an auth failure.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or domain logic.
    - The API layer translates them to ``APIError`` subclasses.
    """

    pass


class AuthenticationError(ServiceError):
    """Base for client-facing rejections that map to *401 Unauthorized*."""

    default_message = "Authentication failed"
    code = "unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class DuplicateIdentityError(ConflictError):
    """
    Registration attempted with an identity already on file.

    The message never says *which* attribute collided, so callers cannot use
    registration to enumerate accounts.
    """

    def __init__(self) -> None:
        super().__init__(entity="Identity", detail="identity already registered")


class InvalidCredentialsError(AuthenticationError):
    """Login with an unknown email or a wrong password."""

    default_message = "Invalid credentials"
    code = "invalid_credentials"


class InvalidRefreshTokenError(AuthenticationError):
    """Refresh token failed verification (signature, structure, expiry or kind)."""

    default_message = "Invalid refresh token"
    code = "invalid_refresh_token"


class TokenRevokedError(AuthenticationError):
    """Token was already rotated or logged out."""

    default_message = "Token revoked"
    code = "token_revoked"


class InvalidTokenError(AuthenticationError):
    """Bearer token failed signature, structure or claim validation."""

    default_message = "Invalid token"
    code = "invalid_token"


class TokenExpiredError(InvalidTokenError):
    """Bearer token is past its ``exp`` claim."""

    default_message = "Token expired"
    code = "token_expired"


class StoreUnavailableError(ServiceError):
    """
    Credential or revocation backend could not be reached.

    :param store: Logical store name (``"credentials"`` or ``"revocations"``).
    :type store: str
    """

    def __init__(self, store: str, message: str | None = None) -> None:
        super().__init__(message or f"{store} store unavailable")
        self.store = store

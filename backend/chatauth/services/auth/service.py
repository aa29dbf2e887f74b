# chatauth/services/auth/service.py
from __future__ import annotations

import hashlib
import logging
from datetime import UTC, datetime
from typing import Any

from chatauth.services._shared.base import BaseService
from chatauth.services._shared.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    TokenRevokedError,
)
from chatauth.services._shared.ports import (
    CredentialStore,
    NewIdentity,
    PasswordHasher,
    RevocationResult,
    RevocationStore,
    TokenClaims,
    TokenIssuer,
    TokenKind,
)
from chatauth.services.auth.dto import (
    IdentityOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)


def token_key(token: str) -> str:
    """
    Derive the revocation key of a raw token.

    The SHA-256 hex digest keeps keys fixed-length and keeps bearer
    credentials out of the revocation backend.

    :param token: Encoded JWT exactly as presented by the client.
    :returns: 64-char lowercase hex digest.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Tokens are minted and verified by a stateless :class:`TokenIssuer`; the
    only server-side session state is the :class:`RevocationStore`, which
    records rotated refresh tokens and logged-out tokens until they would
    have expired anyway.
    """

    def __init__(
        self,
        *,
        credentials: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        revocations: RevocationStore,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param credentials: Identity persistence (atomic insert-if-absent).
        :param hasher: Memory-hard password hasher.
        :param tokens: Issuer for signed access/refresh tokens.
        :param revocations: Revocation store with native per-key expiry.
        """
        self.credentials = credentials
        self.hasher = hasher
        self.tokens = tokens
        self.revocations = revocations

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> TokenPairOut:
        """
        Create an identity and issue its first token pair.

        :param dto: Registration input.
        :returns: Access/Refresh token pair.
        :raises DuplicateIdentityError: Email (or, at store level, username)
            already on file, including a race lost to a concurrent register.
        :raises StoreUnavailableError: Credential store unreachable.
        """
        if self.credentials.find_by_email(dto.email) is not None:
            log.info("auth.register.duplicate")
            raise DuplicateIdentityError()

        digest = self.hasher.hash(dto.password)
        identity = self.credentials.create(
            NewIdentity(
                email=dto.email,
                username=dto.username,
                display_name=dto.display_name,
                password_digest=digest,
            )
        )
        log.info("auth.register.succeeded", extra={"user_id": identity.id})
        return self._issue_pair(identity.id, identity.email)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email and wrong password raise the same error.

        :param dto: Login input.
        :returns: Access/Refresh token pair.
        :raises InvalidCredentialsError: If credentials are invalid.
        """
        identity = self.credentials.find_by_email(dto.email)
        if identity is None:
            log.info("auth.login.failed", extra={"reason": "unknown_identity"})
            raise InvalidCredentialsError()

        if not self.hasher.verify(identity.password_digest, dto.password):
            log.info(
                "auth.login.failed",
                extra={"reason": "password_mismatch", "user_id": identity.id},
            )
            raise InvalidCredentialsError()

        log.info("auth.login.succeeded", extra={"user_id": identity.id})
        return self._issue_pair(identity.id, identity.email)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - The presented token is revoked through an atomic check-and-set, so
          of two concurrent refreshes of one token only one succeeds.
        - Revocation happens before the new pair is returned.

        :param dto: Refresh input.
        :returns: New Access/Refresh token pair for the same subject.
        :raises InvalidRefreshTokenError: Bad signature, malformed, expired,
            or not a refresh token.
        :raises TokenRevokedError: Token already rotated or logged out.
        :raises StoreUnavailableError: Revocation store unreachable.
        """
        try:
            claims = self.tokens.verify(dto.refresh_token, expected_kind=TokenKind.REFRESH)
        except InvalidTokenError as exc:
            log.info("auth.refresh.rejected", extra={"reason": exc.code})
            raise InvalidRefreshTokenError() from exc

        outcome = self.revocations.revoke_once(
            key=token_key(dto.refresh_token), expires_at=claims.expires_at
        )
        if outcome is RevocationResult.ALREADY_REVOKED:
            log.warning("auth.refresh.reused", extra={"user_id": claims.subject})
            raise TokenRevokedError()
        if outcome is RevocationResult.EXPIRED:
            raise InvalidRefreshTokenError()

        log.info("auth.refresh.rotated", extra={"user_id": claims.subject})
        return self._issue_pair(claims.subject, claims.email)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Best-effort revocation of both tokens.

        Tokens are decoded without verification so that already-expired or
        otherwise unverifiable tokens are still recorded when they carry an
        expiry. Anything that does not decode is skipped silently.

        :param dto: Logout input.
        :raises StoreUnavailableError: Revocation store unreachable.
        """
        revoked = 0
        for token in (dto.access_token, dto.refresh_token):
            expires_at = self._expiry_of(token)
            if expires_at is None:
                continue
            if self.revocations.revoke(key=token_key(token), expires_at=expires_at):
                revoked += 1
        log.info("auth.logout.completed revoked=%d", revoked)

    # ------------------------------------------------------------------ #
    # Bearer guard
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str) -> TokenClaims:
        """
        Validate a bearer access token.

        :param access_token: Encoded access JWT.
        :returns: Verified claims.
        :raises InvalidTokenError: Bad signature, malformed, or wrong kind.
        :raises TokenExpiredError: Token expired.
        :raises TokenRevokedError: Token logged out.
        """
        claims = self.tokens.verify(access_token, expected_kind=TokenKind.ACCESS)
        if self.revocations.is_revoked(token_key(access_token)):
            raise TokenRevokedError()
        return claims

    def current_identity(self, access_token: str) -> IdentityOut:
        """
        Return the identity named by a bearer access token.

        :raises InvalidTokenError: Token invalid or identity no longer exists.
        """
        claims = self.authenticate(access_token)
        identity = self.credentials.find_by_id(claims.subject)
        if identity is None:
            raise InvalidTokenError("Identity no longer exists")
        return IdentityOut(
            id=identity.id,
            email=identity.email,
            username=identity.username,
            display_name=identity.display_name,
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue_pair(self, subject: str, email: str) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.issue_access_token(subject, email),
            refresh_token=self.tokens.issue_refresh_token(subject, email),
        )

    def _expiry_of(self, token: str) -> datetime | None:
        """Read ``exp`` from an unverified token; ``None`` when unusable."""
        claims: dict[str, Any] | None = self.tokens.decode(token)
        if not claims:
            return None
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, int | float):
            return None
        try:
            return datetime.fromtimestamp(exp, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None

# chatauth/infra/jwt/pyjwt_token_issuer.py
from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError

from chatauth.services._shared.errors import InvalidTokenError, TokenExpiredError
from chatauth.services._shared.ports import Clock, SystemClock, TokenClaims, TokenIssuer, TokenKind

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)

_REQUIRED_CLAIMS = ["sub", "exp", "iat", "type"]


@dataclass(slots=True)
class JWTTokenIssuer(TokenIssuer):
    """
    HS256 JWT adapter over PyJWT.

    Signature checks use the library; expiry is evaluated against the injected
    :class:`Clock` so lifetimes are testable without the wall clock.

    :param secret: Shared HMAC secret, fixed for the life of the instance.
        Rotating it means building a new issuer; outstanding tokens die.
    :param clock: Time source for ``iat``/``exp`` and expiry checks.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: Symmetric JWS algorithm.
    """

    secret: str = field(repr=False)
    clock: Clock = field(default_factory=SystemClock)
    access_ttl: timedelta = ACCESS_TOKEN_TTL
    refresh_ttl: timedelta = REFRESH_TOKEN_TTL
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token signing secret must be a non-empty string.")
        if not self.algorithm.startswith("HS"):
            raise ValueError(f"Only symmetric HS* algorithms are supported, got {self.algorithm!r}.")

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def _issue(self, *, subject: str, email: str, kind: TokenKind, ttl: timedelta) -> str:
        now = self.clock.now()
        payload: dict[str, Any] = {
            "sub": str(subject),
            "email": email,
            "type": kind.value,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            # Unique per issuance: two pairs minted in the same second differ.
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_access_token(self, subject: str, email: str) -> str:
        return self._issue(subject=subject, email=email, kind=TokenKind.ACCESS, ttl=self.access_ttl)

    def issue_refresh_token(self, subject: str, email: str) -> str:
        return self._issue(
            subject=subject, email=email, kind=TokenKind.REFRESH, ttl=self.refresh_ttl
        )

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify(self, token: str, expected_kind: TokenKind | None = None) -> TokenClaims:
        if not isinstance(token, str) or not token:
            raise InvalidTokenError("Malformed token")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    # exp/iat are checked against the injected clock below
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except PyJWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

        claims = self._to_claims(payload)
        if claims.expires_at <= self.clock.now():
            raise TokenExpiredError()
        if expected_kind is not None and claims.kind is not expected_kind:
            raise InvalidTokenError(f"Expected a {expected_kind.value} token")
        return claims

    def decode(self, token: str) -> dict[str, Any] | None:
        if not isinstance(token, str) or not token:
            return None
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except PyJWTError:
            return None
        return payload if isinstance(payload, dict) else None

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> TokenClaims:
        """Coerce a signature-checked payload into :class:`TokenClaims`."""
        try:
            kind = TokenKind(payload["type"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise InvalidTokenError("Malformed token claims") from exc
        return TokenClaims(
            subject=str(payload["sub"]),
            email=str(payload.get("email", "")),
            kind=kind,
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=str(payload.get("jti", "")),
        )

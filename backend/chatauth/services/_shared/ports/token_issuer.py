from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Token purpose carried in the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified claims of an issued token.

    :ivar subject: Identity id (``sub``).
    :ivar email: Identity email at issuance.
    :ivar kind: Access or refresh.
    :ivar issued_at: ``iat`` (UTC).
    :ivar expires_at: ``exp`` (UTC).
    :ivar token_id: Per-issuance unique id (``jti``).
    """

    subject: str
    email: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenIssuer(Protocol):
    """
    Port for minting and checking signed, time-bounded tokens.

    The issuer is stateless: it knows nothing about revocation. Callers that
    need revocation semantics compose it with a ``RevocationStore``.
    """

    def issue_access_token(self, subject: str, email: str) -> str: ...

    def issue_refresh_token(self, subject: str, email: str) -> str: ...

    def verify(self, token: str, expected_kind: TokenKind | None = None) -> TokenClaims:
        """
        Check signature and ``exp > now``.

        :raises InvalidTokenError: Bad signature, malformed input, or wrong kind.
        :raises TokenExpiredError: Token is past its expiry.
        """

    def decode(self, token: str) -> dict[str, Any] | None:
        """
        Read raw claims **without** checking signature or expiry.

        Only for revocation bookkeeping. Returns ``None`` on structurally
        malformed input instead of raising.
        """

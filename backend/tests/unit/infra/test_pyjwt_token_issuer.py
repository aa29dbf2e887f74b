# tests/unit/infra/test_pyjwt_token_issuer.py
"""
Unit tests for JWTTokenIssuer.

- issuance embeds sub/email/type/iat/exp/jti with the right lifetimes
- verify checks signature, expiry (against the injected clock) and kind
- decode reads claims without verification and never raises
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from chatauth.infra.jwt.pyjwt_token_issuer import JWTTokenIssuer
from chatauth.services._shared.errors import InvalidTokenError, TokenExpiredError
from chatauth.services._shared.ports import SystemClock, TokenKind
from freezegun import freeze_time


def test_access_token_claims_and_lifetime(issuer, clock):
    token = issuer.issue_access_token("user-1", "a@x.com")

    payload = jwt.decode(
        token, issuer.secret, algorithms=["HS256"], options={"verify_exp": False, "verify_iat": False}
    )
    assert payload["sub"] == "user-1"
    assert payload["email"] == "a@x.com"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 15 * 60
    assert payload["iat"] == int(clock.now().timestamp())
    assert len(payload["jti"]) == 32


def test_refresh_token_lifetime_is_seven_days(issuer):
    claims = issuer.verify(issuer.issue_refresh_token("user-1", "a@x.com"))

    assert claims.kind is TokenKind.REFRESH
    assert claims.expires_at - claims.issued_at == timedelta(days=7)


def test_tokens_minted_in_same_instant_differ(issuer):
    first = issuer.issue_refresh_token("user-1", "a@x.com")
    second = issuer.issue_refresh_token("user-1", "a@x.com")

    assert first != second
    assert issuer.verify(first).token_id != issuer.verify(second).token_id


def test_verify_returns_typed_claims(issuer, clock):
    claims = issuer.verify(issuer.issue_access_token("user-1", "a@x.com"))

    assert claims.subject == "user-1"
    assert claims.kind is TokenKind.ACCESS
    assert claims.issued_at == clock.now()
    assert claims.expires_at == clock.now() + timedelta(minutes=15)


def test_verify_expiry_uses_injected_clock(issuer, clock):
    token = issuer.issue_access_token("user-1", "a@x.com")

    clock.advance(minutes=14, seconds=59)
    issuer.verify(token)

    clock.advance(seconds=1)
    with pytest.raises(TokenExpiredError):
        issuer.verify(token)


def test_verify_expected_kind_mismatch(issuer):
    access = issuer.issue_access_token("user-1", "a@x.com")

    with pytest.raises(InvalidTokenError) as exc_info:
        issuer.verify(access, expected_kind=TokenKind.REFRESH)
    assert not isinstance(exc_info.value, TokenExpiredError)


def test_verify_rejects_wrong_secret(issuer, clock):
    other = JWTTokenIssuer(secret="a-different-secret-of-adequate-length", clock=clock)

    with pytest.raises(InvalidTokenError):
        issuer.verify(other.issue_access_token("user-1", "a@x.com"))


def test_verify_rejects_tampered_payload(issuer):
    header, _, signature = issuer.issue_access_token("user-1", "a@x.com").split(".")
    forged_payload = jwt.encode({"sub": "admin"}, "attacker-controlled-key-material", algorithm="HS256").split(".")[1]

    with pytest.raises(InvalidTokenError):
        issuer.verify(f"{header}.{forged_payload}.{signature}")


def test_verify_requires_type_claim(issuer, clock):
    now = int(clock.now().timestamp())
    legacy = jwt.encode(
        {"sub": "user-1", "email": "a@x.com", "iat": now, "exp": now + 60},
        issuer.secret,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        issuer.verify(legacy)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", None])
def test_verify_rejects_malformed(issuer, token):
    with pytest.raises(InvalidTokenError):
        issuer.verify(token)


def test_decode_ignores_signature_and_expiry(issuer, clock):
    other = JWTTokenIssuer(secret="someone-else-entirely-signed-this-one", clock=clock)
    foreign = other.issue_refresh_token("u", "u@x")
    clock.advance(days=30)

    claims = issuer.decode(foreign)

    assert claims is not None
    assert claims["sub"] == "u"
    assert claims["type"] == "refresh"
    assert isinstance(claims["exp"], int)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", None, 42])
def test_decode_returns_none_on_malformed(issuer, token):
    assert issuer.decode(token) is None


def test_empty_secret_is_rejected():
    with pytest.raises(ValueError):
        JWTTokenIssuer(secret="")


def test_asymmetric_algorithm_is_rejected():
    with pytest.raises(ValueError):
        JWTTokenIssuer(secret="s3cret", algorithm="RS256")


def test_secret_is_not_in_repr(issuer):
    assert issuer.secret not in repr(issuer)


def test_system_clock_expiry_with_frozen_wall_time():
    issuer = JWTTokenIssuer(secret="wall-clock-secret-of-adequate-length", clock=SystemClock())

    with freeze_time(datetime(2026, 3, 1, 9, 0, tzinfo=UTC)) as frozen:
        token = issuer.issue_access_token("user-1", "a@x.com")
        assert issuer.verify(token).subject == "user-1"

        frozen.tick(timedelta(minutes=16))
        with pytest.raises(TokenExpiredError):
            issuer.verify(token)

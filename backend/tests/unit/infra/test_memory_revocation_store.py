# tests/unit/infra/test_memory_revocation_store.py
"""Unit tests for the TTL math and the in-memory revocation store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from chatauth.services._shared.ports import InMemoryRevocationStore, RevocationResult, ttl_seconds

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(minutes=15), 900),
        (timedelta(seconds=0.2), 1),
        (timedelta(seconds=59, milliseconds=1), 60),
        (timedelta(0), 0),
        (timedelta(seconds=-5), -5),
    ],
)
def test_ttl_seconds_rounds_up(delta, expected):
    assert ttl_seconds(T0 + delta, T0) == expected


class TestInMemoryRevocationStore:
    def test_revoke_then_is_revoked(self, revocations, clock):
        revocations.revoke(key="k1", expires_at=clock.now() + timedelta(minutes=15))

        assert revocations.is_revoked("k1")
        assert not revocations.is_revoked("k2")

    def test_revoke_is_idempotent(self, revocations, clock):
        exp = clock.now() + timedelta(minutes=15)
        revocations.revoke(key="k1", expires_at=exp)

        assert revocations.revoke(key="k1", expires_at=exp) is True
        assert len(revocations) == 1

    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=-1), timedelta(days=-3)])
    def test_revoke_of_dead_token_stores_nothing(self, revocations, clock, offset):
        assert revocations.revoke(key="k1", expires_at=clock.now() + offset) is False

        assert len(revocations) == 0
        assert not revocations.is_revoked("k1")

    def test_entry_lapses_at_expiry(self, revocations, clock):
        revocations.revoke(key="k1", expires_at=clock.now() + timedelta(seconds=10))

        clock.advance(seconds=9)
        assert revocations.is_revoked("k1")

        clock.advance(seconds=1)
        assert not revocations.is_revoked("k1")

    def test_revoke_once_reports_outcomes(self, revocations, clock):
        exp = clock.now() + timedelta(days=7)

        assert revocations.revoke_once(key="r1", expires_at=exp) is RevocationResult.REVOKED
        assert revocations.revoke_once(key="r1", expires_at=exp) is RevocationResult.ALREADY_REVOKED
        assert (
            revocations.revoke_once(key="r2", expires_at=clock.now() - timedelta(seconds=1))
            is RevocationResult.EXPIRED
        )
        assert not revocations.is_revoked("r2")

    def test_revoke_once_after_lapse_can_insert_again(self, revocations, clock):
        revocations.revoke_once(key="r1", expires_at=clock.now() + timedelta(seconds=5))
        clock.advance(seconds=5)

        result = revocations.revoke_once(key="r1", expires_at=clock.now() + timedelta(seconds=5))

        assert result is RevocationResult.REVOKED

    def test_ping(self):
        assert InMemoryRevocationStore().ping() is True

    def test_writes_purge_lapsed_entries(self, revocations, clock):
        for n in range(1000):
            revocations.revoke(key=f"k{n}", expires_at=clock.now() + timedelta(seconds=5))
        clock.advance(days=1)

        revocations.revoke(key="fresh", expires_at=clock.now() + timedelta(minutes=15))

        assert len(revocations._expiry) == 1
        assert len(revocations._heap) == 1
        assert revocations.is_revoked("fresh")

    def test_purge_keeps_entry_rewritten_with_later_expiry(self, revocations, clock):
        revocations.revoke(key="k1", expires_at=clock.now() + timedelta(seconds=5))
        revocations.revoke(key="k1", expires_at=clock.now() + timedelta(seconds=60))
        clock.advance(seconds=10)

        revocations.revoke_once(key="k2", expires_at=clock.now() + timedelta(seconds=60))

        assert revocations.is_revoked("k1")
        assert set(revocations._expiry) == {"k1", "k2"}

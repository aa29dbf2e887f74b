# tests/unit/ports/test_memory_credential_store.py
"""Unit tests for the in-memory CredentialStore double."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from chatauth.services._shared.errors import DuplicateIdentityError
from chatauth.services._shared.ports import InMemoryCredentialStore, NewIdentity


def _new(email="a@x.com", username="alice"):
    return NewIdentity(email=email, username=username, display_name="Alice", password_digest="d")


class TestInMemoryCredentialStore:
    def test_create_assigns_unique_ids(self, credentials):
        a = credentials.create(_new())
        b = credentials.create(_new(email="b@x.com", username="bob"))

        assert a.id != b.id
        assert credentials.find_by_id(a.id) == a
        assert credentials.find_by_email("b@x.com") == b

    def test_lookups_miss(self, credentials):
        assert credentials.find_by_email("a@x.com") is None
        assert credentials.find_by_id("nope") is None

    @pytest.mark.parametrize("clash", [{"username": "other"}, {"email": "other@x.com"}])
    def test_create_collision(self, credentials, clash):
        credentials.create(_new())

        with pytest.raises(DuplicateIdentityError):
            credentials.create(_new(**clash))

    def test_digest_hidden_from_repr(self, credentials):
        identity = credentials.create(_new())

        assert "password_digest" not in repr(identity)

    def test_concurrent_create_admits_exactly_one(self):
        store = InMemoryCredentialStore()

        def attempt(_):
            try:
                store.create(_new())
                return True
            except DuplicateIdentityError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(16)))

        assert outcomes.count(True) == 1

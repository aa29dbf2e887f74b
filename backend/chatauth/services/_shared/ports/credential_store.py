from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from chatauth.services._shared.errors import DuplicateIdentityError


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Credential record of a registered user.

    :ivar id: Opaque, stable identifier (never reused).
    :ivar email: Login email, unique and case-sensitive in storage.
    :ivar username: Public handle, unique.
    :ivar display_name: Name shown to other users.
    :ivar password_digest: Opaque hasher output; never logged, never returned.
    """

    id: str
    email: str
    username: str
    display_name: str
    password_digest: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class NewIdentity:
    """Fields required to create an :class:`Identity`."""

    email: str
    username: str
    display_name: str
    password_digest: str = field(repr=False)


class CredentialStore(Protocol):
    """
    Persistence port for identities.

    ``create`` MUST be an atomic insert-if-absent on both ``email`` and
    ``username`` and raise :class:`DuplicateIdentityError` on collision.
    Backend outages surface as ``StoreUnavailableError``.
    """

    def find_by_email(self, email: str) -> Identity | None: ...

    def find_by_id(self, identity_id: str) -> Identity | None: ...

    def create(self, fields: NewIdentity) -> Identity: ...


class InMemoryCredentialStore(CredentialStore):
    """
    Dict-backed credential store.

    .. note::
       A single lock makes ``create`` atomic across threads, mirroring the
       unique constraints of the SQL adapter.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Identity] = {}
        self._id_by_email: dict[str, str] = {}
        self._id_by_username: dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Identity | None:
        with self._lock:
            identity_id = self._id_by_email.get(email)
            return self._by_id.get(identity_id) if identity_id else None

    def find_by_id(self, identity_id: str) -> Identity | None:
        with self._lock:
            return self._by_id.get(identity_id)

    def create(self, fields: NewIdentity) -> Identity:
        with self._lock:
            if fields.email in self._id_by_email or fields.username in self._id_by_username:
                raise DuplicateIdentityError()
            identity = Identity(
                id=str(uuid4()),
                email=fields.email,
                username=fields.username,
                display_name=fields.display_name,
                password_digest=fields.password_digest,
            )
            self._by_id[identity.id] = identity
            self._id_by_email[identity.email] = identity.id
            self._id_by_username[identity.username] = identity.id
            return identity

# chatauth/infra/sqlalchemy/sqlalchemy_credential_store.py
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar, cast

from sqlalchemy.exc import IntegrityError, OperationalError

from chatauth.models.user import User
from chatauth.services._shared.errors import DuplicateIdentityError, StoreUnavailableError
from chatauth.services._shared.ports import CredentialStore, Identity, NewIdentity
from chatauth.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _unavailable_on_db_error(func: F) -> F:
    """Re-raise connectivity failures as :class:`StoreUnavailableError`."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except OperationalError as exc:
            log.error("credentials.db_error", extra={"store": "credentials"}, exc_info=True)
            raise StoreUnavailableError("credentials") from exc

    return cast(F, wrapper)


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        email=user.email,
        username=user.username,
        display_name=user.display_name,
        password_digest=user.password_hash,
    )


@dataclass(slots=True)
class SQLAlchemyCredentialStore(CredentialStore):
    """
    Credential store over the ``users`` table.

    Uniqueness of ``email`` and ``username`` is enforced by database
    constraints, which makes ``create`` an atomic insert-if-absent even
    across processes.

    :param uow_factory: Builds the read-write Unit of Work for inserts.
    :param ro_uow_factory: Builds the read-only Unit of Work for lookups.
    """

    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork
    ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork

    @_unavailable_on_db_error
    def find_by_email(self, email: str) -> Identity | None:
        with self.ro_uow_factory() as uow:
            user = uow.users.get_by_email(email)
            return _to_identity(user) if user is not None else None

    @_unavailable_on_db_error
    def find_by_id(self, identity_id: str) -> Identity | None:
        with self.ro_uow_factory() as uow:
            user = uow.users.get(identity_id)
            return _to_identity(user) if user is not None else None

    @_unavailable_on_db_error
    def create(self, fields: NewIdentity) -> Identity:
        try:
            with self.uow_factory() as uow:
                user = uow.users.add(
                    User(
                        email=fields.email,
                        username=fields.username,
                        display_name=fields.display_name,
                        password_hash=fields.password_digest,
                    )
                )
                identity = _to_identity(user)
        except (IntegrityError, ValueError) as exc:
            # Lost a race, collided on username, or the row was rejected by a
            # model validator; never say which column.
            raise DuplicateIdentityError() from exc
        return identity

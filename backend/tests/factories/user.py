"""Factory Boy definition for :class:`chatauth.models.user.User`."""

from __future__ import annotations

import factory
from chatauth.infra.argon2.argon2_password_hasher import Argon2PasswordHasher
from chatauth.models.user import User

from tests.factories import BaseFactory

# Cheap parameters; verification reads them back from the PHC string.
_hasher = Argon2PasswordHasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)

DEFAULT_PASSWORD = "longpass1"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`chatauth.models.user.User` instances.

    Notes
    -----
    - Pass ``password="..."`` to choose the plaintext; the factory stores its
      Argon2id digest in ``password_hash``.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    display_name = factory.Faker("name")
    password_hash = factory.LazyAttribute(lambda o: _hasher.hash(o.password))

# chatauth/infra/argon2/argon2_password_hasher.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from argon2 import PasswordHasher as _Argon2Hasher
from argon2 import Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from chatauth.services._shared.ports import PasswordHasher

log = logging.getLogger(__name__)

# Memory: 64 MiB, Time: 3 iterations, Parallelism: 4
DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 64 * 1024
DEFAULT_PARALLELISM = 4


@dataclass(slots=True)
class Argon2PasswordHasher(PasswordHasher):
    """
    Argon2id adapter over ``argon2-cffi``.

    The PHC string produced by :meth:`hash` embeds algorithm, version, cost
    parameters and salt, so verification needs nothing but the digest.

    :param time_cost: Iterations.
    :param memory_cost: Memory in KiB.
    :param parallelism: Lanes.
    """

    time_cost: int = DEFAULT_TIME_COST
    memory_cost: int = DEFAULT_MEMORY_COST
    parallelism: int = DEFAULT_PARALLELISM
    hash_len: int = 32
    salt_len: int = 16
    _ph: _Argon2Hasher = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._ph = _Argon2Hasher(
            time_cost=self.time_cost,
            memory_cost=self.memory_cost,
            parallelism=self.parallelism,
            hash_len=self.hash_len,
            salt_len=self.salt_len,
            type=Type.ID,
        )

    def hash(self, plaintext: str) -> str:
        return self._ph.hash(plaintext)

    def verify(self, digest: str, plaintext: str) -> bool:
        """Constant-time check; any malformed or foreign digest is a plain ``False``."""
        if not digest or not isinstance(digest, str):
            return False
        try:
            return bool(self._ph.verify(digest, plaintext))
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError):
            log.warning("password.digest_unverifiable")
            return False

    def needs_rehash(self, digest: str) -> bool:
        try:
            return bool(self._ph.check_needs_rehash(digest))
        except (InvalidHashError, ValueError):
            return True

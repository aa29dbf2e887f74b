from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for a salted, memory-hard password hash.

    ``hash`` embeds its cost parameters in the digest so ``verify`` is
    self-describing. ``verify`` MUST NOT raise on a malformed digest.
    """

    def hash(self, plaintext: str) -> str: ...

    def verify(self, digest: str, plaintext: str) -> bool: ...

    def needs_rehash(self, digest: str) -> bool: ...

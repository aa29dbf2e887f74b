# comments in English; reST docstrings
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from typing import Any, TypeVar, cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from chatauth.services._shared.errors import StoreUnavailableError
from chatauth.services._shared.ports import (
    Clock,
    RevocationResult,
    RevocationStore,
    SystemClock,
    ttl_seconds,
)

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Revoked-marker value; only key existence matters.
_SENTINEL = "1"


def _unavailable_on_redis_error(func: F) -> F:
    """Re-raise driver failures as :class:`StoreUnavailableError`."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except RedisError as exc:
            log.error("revocations.redis_error", extra={"store": "revocations"}, exc_info=True)
            raise StoreUnavailableError("revocations") from exc

    return cast(F, wrapper)


@dataclass(slots=True)
class RedisRevocationStore(RevocationStore):
    """
    Redis-backed revocation store keyed by token key.

    Each entry is a ``SET key 1 EX ttl`` marker, so Redis expires it exactly
    when the token would have expired anyway. No sweeper is needed.

    :param r: A Redis client (already connected).
    :param clock: Time source for TTL computation.
    :param prefix: Key namespace.
    """

    r: redis.Redis
    clock: Clock = field(default_factory=SystemClock)
    prefix: str = "blacklist"

    # -------------------- helpers --------------------

    def _k(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    # -------------------- API ------------------------

    @_unavailable_on_redis_error
    def is_revoked(self, key: str) -> bool:
        return cast(int, self.r.exists(self._k(key))) == 1

    @_unavailable_on_redis_error
    def revoke(self, *, key: str, expires_at: datetime) -> bool:
        ttl = ttl_seconds(expires_at, self.clock.now())
        if ttl <= 0:
            # Token already dead; an entry would be pure garbage.
            return False
        # Idempotent: concurrent revokes of one key compute the same or a smaller TTL.
        self.r.set(self._k(key), _SENTINEL, ex=ttl)
        return True

    @_unavailable_on_redis_error
    def revoke_once(self, *, key: str, expires_at: datetime) -> RevocationResult:
        """
        Single-round-trip check-and-set using ``SET NX EX``.

        ``SET`` with ``NX`` is atomic on the server, so of two concurrent
        rotations of the same refresh token exactly one gets ``REVOKED``.
        """
        k = self._k(key)
        ttl = ttl_seconds(expires_at, self.clock.now())
        if ttl <= 0:
            return (
                RevocationResult.ALREADY_REVOKED
                if cast(int, self.r.exists(k)) == 1
                else RevocationResult.EXPIRED
            )
        inserted = self.r.set(k, _SENTINEL, ex=ttl, nx=True)
        return RevocationResult.REVOKED if inserted else RevocationResult.ALREADY_REVOKED

    @_unavailable_on_redis_error
    def ping(self) -> bool:
        """Health probe used by the health endpoint."""
        return bool(self.r.ping())

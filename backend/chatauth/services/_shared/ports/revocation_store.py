from __future__ import annotations

import heapq
import math
import threading
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import Protocol

from chatauth.services._shared.ports.clock import Clock, SystemClock


class RevocationResult(Enum):
    """Outcome of an atomic revoke-if-absent attempt."""

    REVOKED = auto()
    ALREADY_REVOKED = auto()
    EXPIRED = auto()


def ttl_seconds(expires_at: datetime, now: datetime) -> int:
    """
    Whole seconds an entry must live to outlast a token.

    Rounded up so a token with sub-second lifetime left is still covered;
    ``<= 0`` means the token is already dead and nothing should be stored.
    """
    return math.ceil((expires_at - now).total_seconds())


class RevocationStore(Protocol):
    """
    Key-value store of revoked token keys with native per-key expiry.

    Entries are created with ``TTL = expires_at - now`` and are never updated
    or deleted before they lapse. Writes with a non-positive TTL are skipped.
    """

    def is_revoked(self, key: str) -> bool: ...

    def revoke(self, *, key: str, expires_at: datetime) -> bool:
        """
        Record ``key`` as revoked until ``expires_at``; idempotent.

        :returns: ``True`` when an entry was written, ``False`` when the token
            was already dead and nothing was stored.
        """

    def revoke_once(self, *, key: str, expires_at: datetime) -> RevocationResult:
        """
        Atomically record ``key`` only if it is not already present.

        This is the check-and-set used for refresh rotation: across concurrent
        callers presenting the same key exactly one observes ``REVOKED``.
        """

    def ping(self) -> bool:
        """Report backend reachability (health probe)."""


class InMemoryRevocationStore(RevocationStore):
    """
    Process-local revocation store honouring expiry against a ``Clock``.

    .. note::
       Expired entries are treated as absent. Every write also pops lapsed
       entries off an expiry heap, so memory tracks the live revocations
       rather than every token ever revoked.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._expiry: dict[str, datetime] = {}
        self._heap: list[tuple[datetime, str]] = []
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    def _live(self, key: str, now: datetime) -> bool:
        exp = self._expiry.get(key)
        if exp is None:
            return False
        if exp <= now:
            del self._expiry[key]
            return False
        return True

    def _store(self, key: str, exp: datetime) -> None:
        self._expiry[key] = exp
        heapq.heappush(self._heap, (exp, key))

    def _purge(self, now: datetime) -> None:
        while self._heap and self._heap[0][0] <= now:
            exp, key = heapq.heappop(self._heap)
            # A later write may have replaced this entry with a longer expiry.
            if self._expiry.get(key) == exp:
                del self._expiry[key]

    # -------------------------- API ----------------------------

    def is_revoked(self, key: str) -> bool:
        with self._lock:
            return self._live(key, self._clock.now())

    def revoke(self, *, key: str, expires_at: datetime) -> bool:
        now = self._clock.now()
        ttl = ttl_seconds(expires_at, now)
        if ttl <= 0:
            return False
        with self._lock:
            self._purge(now)
            self._store(key, now + timedelta(seconds=ttl))
        return True

    def revoke_once(self, *, key: str, expires_at: datetime) -> RevocationResult:
        now = self._clock.now()
        ttl = ttl_seconds(expires_at, now)
        with self._lock:
            self._purge(now)
            if self._live(key, now):
                return RevocationResult.ALREADY_REVOKED
            if ttl <= 0:
                return RevocationResult.EXPIRED
            self._store(key, now + timedelta(seconds=ttl))
            return RevocationResult.REVOKED

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            now = self._clock.now()
            return sum(1 for exp in self._expiry.values() if exp > now)

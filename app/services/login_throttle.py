"""Failed-login throttling: N strikes, then a fixed cooldown.

Per identity the throttle moves through::

    Clean -> Accumulating (1..N-1 failures) -> Locked (>= N, expiry set) -> Clean

A successful login returns the identity to Clean from any state. The lockout
expiry is a timestamp checked lazily on every call rather than a background
timer: the first call after ``lockout_expires_at`` sees the identity as Clean
and drops the stale record.

Failures recorded while already Locked still increment the counter but never
move ``lockout_expires_at``; the lockout always ends one full window after the
threshold was first reached.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.attempt_store.base import AbstractAttemptStore, AttemptRecord
from app.adapters.attempt_store.in_memory import InMemoryAttemptStore

DEFAULT_MAX_FAILURES = 5
DEFAULT_LOCKOUT_SECONDS = 30 * 60


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of a throttle check.

    Attributes:
        allowed: False while the identity is locked out.
        failure_count: Failures currently on record for the identity.
        retry_after_seconds: Seconds until the lockout ends (only when blocked).
    """

    allowed: bool
    failure_count: int
    retry_after_seconds: int | None = None


class LoginThrottle:
    """Tracks failed logins per identity and enforces a temporary lockout."""

    def __init__(
        self,
        *,
        store: AbstractAttemptStore | None = None,
        max_failures: int = DEFAULT_MAX_FAILURES,
        lockout_seconds: int = DEFAULT_LOCKOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the throttle.

        Args:
            store: Attempt record store; a fresh in-memory store by default.
            max_failures: Failures that trigger the lockout.
            lockout_seconds: Lockout duration, counted from the failure that
                reached ``max_failures``.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If max_failures or lockout_seconds are invalid.
        """
        if max_failures < 1:
            raise ValueError("max_failures must be >= 1")
        if lockout_seconds < 1:
            raise ValueError("lockout_seconds must be >= 1")

        self._store = store if store is not None else InMemoryAttemptStore()
        self._max_failures = max_failures
        self._lockout_seconds = lockout_seconds
        self._clock = clock

    @property
    def max_failures(self) -> int:
        return self._max_failures

    @property
    def lockout_seconds(self) -> int:
        return self._lockout_seconds

    def _current_record(self, identity: str, now: float) -> AttemptRecord | None:
        """Return the live record, deleting it if its lockout has elapsed.

        Must be called with the identity lock held.
        """
        record = self._store.get(identity)
        if record is None:
            return None
        if record.lockout_expires_at is not None and now >= record.lockout_expires_at:
            self._store.delete(identity)
            return None
        return record

    def _decision(self, record: AttemptRecord | None, now: float) -> ThrottleDecision:
        if record is None:
            return ThrottleDecision(allowed=True, failure_count=0)
        if record.failure_count < self._max_failures:
            return ThrottleDecision(allowed=True, failure_count=record.failure_count)

        expires_at = record.lockout_expires_at
        retry_after = self._lockout_seconds if expires_at is None else expires_at - now
        return ThrottleDecision(
            allowed=False,
            failure_count=record.failure_count,
            retry_after_seconds=max(1, int(math.ceil(retry_after))),
        )

    def check(self, identity: str) -> ThrottleDecision:
        """Tell whether identity may attempt a login right now."""
        with self._store.lock(identity):
            now = self._clock()
            return self._decision(self._current_record(identity, now), now)

    def record_failure(self, identity: str) -> ThrottleDecision:
        """Record one failed login and return the resulting state.

        Reaching ``max_failures`` starts the lockout window.
        """
        with self._store.lock(identity):
            now = self._clock()
            record = self._current_record(identity, now)

            count = (record.failure_count if record else 0) + 1
            expires_at = record.lockout_expires_at if record else None
            if count == self._max_failures:
                expires_at = now + self._lockout_seconds

            updated = AttemptRecord(failure_count=count, lockout_expires_at=expires_at)
            self._store.save(identity, updated)
            return self._decision(updated, now)

    def record_success(self, identity: str) -> None:
        """Forget every failure for identity, lifting any lockout."""
        with self._store.lock(identity):
            self._store.delete(identity)

"""Attempt store interfaces.

The throttle owns one store instance and is the only component that mutates
it. Absence of a record means zero failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ContextManager


@dataclass(frozen=True)
class AttemptRecord:
    """Failed-login state for one identity.

    Attributes:
        failure_count: Consecutive failed attempts (always >= 1 when stored).
        lockout_expires_at: UNIX epoch seconds when the lockout ends, set once
            the failure threshold is reached.
    """

    failure_count: int
    lockout_expires_at: float | None = None


class AbstractAttemptStore(ABC):
    """Concurrency-safe key-value map of identity -> AttemptRecord."""

    @abstractmethod
    def get(self, identity: str) -> AttemptRecord | None:
        """Return the record for identity, or None when it has no failures."""
        raise NotImplementedError

    @abstractmethod
    def save(self, identity: str, record: AttemptRecord) -> None:
        """Create or replace the record for identity."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, identity: str) -> None:
        """Remove the record for identity. Deleting a missing record is a no-op."""
        raise NotImplementedError

    @abstractmethod
    def lock(self, identity: str) -> ContextManager[None]:
        """Return a context manager serializing read-modify-write on identity.

        Holding the lock for one identity must not block other identities.
        """
        raise NotImplementedError

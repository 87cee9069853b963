"""In-memory attempt store.

Notes:
- Per-process only: with multiple workers each keeps its own counters.
- Thread-safe: record map and per-identity locks are guarded.
"""

from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from app.adapters.attempt_store.base import AbstractAttemptStore, AttemptRecord


class InMemoryAttemptStore(AbstractAttemptStore):
    """Dict-backed attempt store with one lock per identity.

    Identity locks live in a WeakValueDictionary: a lock stays alive while a
    caller holds it and is dropped once nobody references it, so the lock map
    does not grow with every identity ever seen.
    """

    def __init__(self) -> None:
        self._records: dict[str, AttemptRecord] = {}
        self._records_lock = threading.Lock()
        self._identity_locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._identity_locks_guard = threading.Lock()

    def _identity_lock(self, identity: str) -> threading.Lock:
        with self._identity_locks_guard:
            lock = self._identity_locks.get(identity)
            if lock is None:
                lock = threading.Lock()
                self._identity_locks[identity] = lock
            return lock

    @contextmanager
    def lock(self, identity: str) -> Iterator[None]:
        lock = self._identity_lock(identity)
        with lock:
            yield

    def get(self, identity: str) -> AttemptRecord | None:
        with self._records_lock:
            return self._records.get(identity)

    def save(self, identity: str, record: AttemptRecord) -> None:
        if record.failure_count < 1:
            raise ValueError("failure_count must be >= 1; delete the record instead")
        with self._records_lock:
            self._records[identity] = record

    def delete(self, identity: str) -> None:
        with self._records_lock:
            self._records.pop(identity, None)

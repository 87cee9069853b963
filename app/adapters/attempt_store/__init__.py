"""Storage for failed-login attempt records.

The login throttle depends on the abstract store so the in-memory map can be
replaced by a shared backend (e.g., Redis) without touching the policy.
"""

from app.adapters.attempt_store.base import AbstractAttemptStore, AttemptRecord
from app.adapters.attempt_store.in_memory import InMemoryAttemptStore

__all__ = [
    "AbstractAttemptStore",
    "AttemptRecord",
    "InMemoryAttemptStore",
]

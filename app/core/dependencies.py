"""Process-wide service instances exposed as FastAPI dependencies.

The document store and the login throttle hold state that must survive across
requests, so they are cached in-module. Tests replace them through
``app.dependency_overrides`` or ``reset_dependencies()``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.adapters.store.base import AbstractDocumentStore
from app.adapters.store.factory import create_document_store
from app.core.config import settings
from app.services.auth_service import AuthenticationService
from app.services.items_service import ItemsService
from app.services.login_throttle import LoginThrottle
from app.services.users_service import UsersService

_store: AbstractDocumentStore | None = None
_throttle: LoginThrottle | None = None
_throttle_config: tuple[int, int] | None = None


def get_document_store() -> AbstractDocumentStore:
    global _store

    if _store is None:
        _store = create_document_store()
    return _store


def get_login_throttle() -> LoginThrottle:
    """Return the shared login throttle.

    Rebuilt (dropping all attempt records) if the lockout settings change,
    which in practice only happens in tests.
    """
    global _throttle, _throttle_config

    config = (settings.app.login_max_failures, settings.app.login_lockout_seconds)
    if _throttle is None or _throttle_config != config:
        _throttle = LoginThrottle(
            max_failures=settings.app.login_max_failures,
            lockout_seconds=settings.app.login_lockout_seconds,
        )
        _throttle_config = config
    return _throttle


def reset_dependencies() -> None:
    """Forget the cached store and throttle."""
    global _store, _throttle, _throttle_config

    _store = None
    _throttle = None
    _throttle_config = None


StoreDep = Annotated[AbstractDocumentStore, Depends(get_document_store)]
ThrottleDep = Annotated[LoginThrottle, Depends(get_login_throttle)]


def get_users_service(store: StoreDep) -> UsersService:
    return UsersService(store)


def get_items_service(store: StoreDep) -> ItemsService:
    return ItemsService(store)


def get_auth_service(
    users: Annotated[UsersService, Depends(get_users_service)],
    throttle: ThrottleDep,
) -> AuthenticationService:
    return AuthenticationService(users=users, throttle=throttle)

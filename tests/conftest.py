"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports ``app.core.config`` so
the global settings object is built from test values.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Iterator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.adapters.store.in_memory import InMemoryDocumentStore
from app.core import dependencies
from app.main import app
from app.services.login_throttle import LoginThrottle


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at a fixed epoch."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def throttle(clock: Mock) -> LoginThrottle:
    return LoginThrottle(clock=clock)


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"X-API-Key": "test-api-key-123"}


@pytest.fixture
def client(store: InMemoryDocumentStore, throttle: LoginThrottle) -> Iterator[TestClient]:
    """Test client wired to a fresh store and a clock-controlled throttle."""
    app.dependency_overrides[dependencies.get_document_store] = lambda: store
    app.dependency_overrides[dependencies.get_login_throttle] = lambda: throttle
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

"""Factory for creating document store instances."""

from app.adapters.store.base import AbstractDocumentStore
from app.adapters.store.in_memory import InMemoryDocumentStore
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_document_store() -> AbstractDocumentStore:
    """Instantiate the document store selected by ``APP_STORE_BACKEND``.

    Raises:
        ValidationAppError: If the configured backend is unknown.
    """
    backend = settings.app.store_backend.lower()

    if backend == "memory":
        return InMemoryDocumentStore()

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{backend}'. Supported backends: memory",
        details={"backend": backend},
    )

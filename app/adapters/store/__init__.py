"""Document store adapters.

Services talk to the store through ``AbstractDocumentStore`` so the in-memory
backend used for development and tests can be swapped for a real database.
"""

from app.adapters.store.base import AbstractDocumentStore, SortSpec, translate_store_errors
from app.adapters.store.factory import create_document_store
from app.adapters.store.in_memory import InMemoryDocumentStore

__all__ = [
    "AbstractDocumentStore",
    "InMemoryDocumentStore",
    "SortSpec",
    "create_document_store",
    "translate_store_errors",
]

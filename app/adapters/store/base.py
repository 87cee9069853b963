"""Document store interface.

Filters use the Mongo-style subset the listing engine produces:

- ``{"field": value}``: equality
- ``{"field": {"$regex": pattern, "$options": "i"}}``: regex search,
  case-insensitive when ``$options`` contains ``i``

Sort specs are a single ``(field, direction)`` pair with direction ``1``
(ascending) or ``-1`` (descending).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

from app.core.errors import AppError, StoreUnavailableError

Document = dict[str, Any]
Filter = Mapping[str, Any]
SortSpec = tuple[str, int]


@contextmanager
def translate_store_errors(operation: str, collection: str) -> Iterator[None]:
    """Re-raise backend failures inside the block as StoreUnavailableError.

    Domain errors (AppError) pass through unchanged.
    """
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise StoreUnavailableError(
            code="store_unavailable",
            message="The data store is temporarily unavailable. Please try again later.",
            details={"context": {"operation": operation, "collection": collection}},
        ) from exc


class AbstractDocumentStore(ABC):
    """Async interface over a document database.

    Documents are plain dicts carrying their identifier under ``id``.
    """

    @abstractmethod
    async def count_matching(self, collection: str, filter: Filter) -> int:
        """Count documents in collection matching filter."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_page(
        self,
        collection: str,
        filter: Filter,
        sort_spec: SortSpec | None,
        offset: int,
        limit: int,
    ) -> Sequence[Document]:
        """Return up to ``limit`` matching documents after skipping ``offset``.

        Without a sort spec documents come back in insertion order.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, collection: str, filter: Filter) -> Document | None:
        """Return the first document matching filter, if any."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Return the document with the given id, if any."""
        raise NotImplementedError

    @abstractmethod
    async def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        """Store a new document and return its generated id."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> bool:
        """Apply field changes; False when no document has that id."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> bool:
        """Delete a document; False when no document has that id."""
        raise NotImplementedError

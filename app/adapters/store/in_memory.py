"""In-memory document store (development and tests).

Notes:
- Per-process only; data is lost on restart.
- Every read returns copies, so callers cannot mutate stored documents.
"""

from __future__ import annotations

import asyncio
import copy
import re
import uuid
from typing import Any, Mapping, Sequence

from app.adapters.store.base import AbstractDocumentStore, Document, Filter, SortSpec


def _compile_regex(condition: Mapping[str, Any]) -> re.Pattern[str]:
    flags = re.IGNORECASE if "i" in str(condition.get("$options", "")) else 0
    return re.compile(str(condition["$regex"]), flags)


def _matches(document: Mapping[str, Any], filter: Filter) -> bool:
    for field, condition in filter.items():
        value = document.get(field)
        if isinstance(condition, Mapping) and "$regex" in condition:
            if not isinstance(value, str) or not _compile_regex(condition).search(value):
                return False
        elif value != condition:
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    # BSON order: null < numbers < strings < booleans
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (3, value)
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))


class InMemoryDocumentStore(AbstractDocumentStore):
    """Dict-of-dicts store keyed by collection then document id."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> dict[str, Document]:
        return self._collections.setdefault(name, {})

    def _select(self, collection: str, filter: Filter) -> list[Document]:
        return [doc for doc in self._collection(collection).values() if _matches(doc, filter)]

    async def count_matching(self, collection: str, filter: Filter) -> int:
        async with self._lock:
            return len(self._select(collection, filter))

    async def fetch_page(
        self,
        collection: str,
        filter: Filter,
        sort_spec: SortSpec | None,
        offset: int,
        limit: int,
    ) -> Sequence[Document]:
        if offset < 0 or limit < 0:
            raise ValueError("offset and limit must be >= 0")

        async with self._lock:
            documents = self._select(collection, filter)
            if sort_spec is not None:
                field, direction = sort_spec
                documents.sort(key=lambda doc: _sort_key(doc.get(field)), reverse=direction < 0)
            return copy.deepcopy(documents[offset:offset + limit])

    async def find_one(self, collection: str, filter: Filter) -> Document | None:
        async with self._lock:
            for document in self._collection(collection).values():
                if _matches(document, filter):
                    return copy.deepcopy(document)
            return None

    async def get(self, collection: str, document_id: str) -> Document | None:
        async with self._lock:
            document = self._collection(collection).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    async def insert(self, collection: str, document: Mapping[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        stored = copy.deepcopy(dict(document))
        stored["id"] = document_id
        async with self._lock:
            self._collection(collection)[document_id] = stored
        return document_id

    async def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> bool:
        async with self._lock:
            document = self._collection(collection).get(document_id)
            if document is None:
                return False
            document.update({k: copy.deepcopy(v) for k, v in changes.items() if k != "id"})
            return True

    async def delete(self, collection: str, document_id: str) -> bool:
        async with self._lock:
            return self._collection(collection).pop(document_id, None) is not None

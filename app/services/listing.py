"""Generic listing engine shared by the users and items resources.

A list request carries an optional ``field:substring`` search, an optional
``field:direction`` sort and offset pagination parameters. ``normalize`` turns
the two expressions into a store filter and sort spec; ``paginate`` runs the
count and page queries and builds the response envelope.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Collection, Mapping, TypeVar

from app.adapters.store.base import AbstractDocumentStore, Filter, SortSpec, translate_store_errors
from app.core.errors import InvalidQueryError
from app.schemas.listing import ListEnvelope

T = TypeVar("T")

ASCENDING = 1
DESCENDING = -1


def _split_expression(text: str, kind: str, expected: str) -> tuple[str, str]:
    field, sep, rest = text.partition(":")
    field = field.strip()
    if not sep or not field:
        raise InvalidQueryError(
            code="invalid_query",
            message=f"Malformed {kind} expression; expected '{expected}'",
            details={"field": kind, "value": text},
        )
    return field, rest


def _require_listed_field(field: str, kind: str, fields: Collection[str]) -> None:
    if field not in fields:
        raise InvalidQueryError(
            code="invalid_query",
            message=f"Cannot {kind} on field '{field}'",
            details={"field": kind, "value": field, "allowed": sorted(fields)},
        )


@dataclass(frozen=True)
class SearchExpression:
    """Case-insensitive substring search on a single field."""

    field: str
    substring: str

    @classmethod
    def parse(cls, text: str) -> "SearchExpression":
        """Parse ``field:substring``, splitting on the first colon.

        Raises:
            InvalidQueryError: If there is no colon or the field name is empty.
        """
        field, substring = _split_expression(text, "search", "field:substring")
        return cls(field=field, substring=substring)

    def to_filter(self) -> dict[str, Any]:
        # Escaped so the user's text is matched literally, not as a regex
        return {self.field: {"$regex": re.escape(self.substring), "$options": "i"}}


@dataclass(frozen=True)
class SortExpression:
    """Single-field ordering."""

    field: str
    direction: int

    @classmethod
    def parse(cls, text: str) -> "SortExpression":
        """Parse ``field:direction``.

        Only the exact token ``asc`` sorts ascending; any other token,
        including typos and ``ASC``, sorts descending.

        Raises:
            InvalidQueryError: If there is no colon or the field name is empty.
        """
        field, token = _split_expression(text, "sort", "field:asc|desc")
        return cls(field=field, direction=ASCENDING if token == "asc" else DESCENDING)

    def to_sort_spec(self) -> SortSpec:
        return (self.field, self.direction)


def normalize(
    search: str | None,
    sort: str | None,
    fields: Collection[str],
) -> tuple[dict[str, Any], SortSpec | None]:
    """Translate raw search/sort text into a match filter and sort spec.

    Args:
        search: ``field:substring`` or None/empty for no filtering.
        sort: ``field:direction`` or None/empty for natural order.
        fields: Field names callers may search and sort on, normally the
            resource's public projection. Stored-only fields such as password
            hashes must not appear here.

    Returns:
        Tuple of (match_filter, sort_spec). An absent search yields ``{}``
        (match everything); an absent sort yields None.

    Raises:
        InvalidQueryError: On malformed expressions or a field outside ``fields``.
    """
    match_filter: dict[str, Any] = {}
    if search:
        search_expr = SearchExpression.parse(search)
        _require_listed_field(search_expr.field, "search", fields)
        match_filter = search_expr.to_filter()

    sort_spec = None
    if sort:
        sort_expr = SortExpression.parse(sort)
        _require_listed_field(sort_expr.field, "sort", fields)
        sort_spec = sort_expr.to_sort_spec()
    return match_filter, sort_spec


def _parse_positive_int(value: int | str, name: str) -> int:
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            parsed = None

    if parsed is None or parsed < 1:
        raise InvalidQueryError(
            code="invalid_query",
            message=f"{name} must be a positive integer",
            details={"field": name, "value": str(value)},
        )
    return parsed


def parse_page_params(page_number: int | str, page_size: int | str) -> tuple[int, int]:
    """Coerce page parameters (possibly query-string text) to positive ints.

    Raises:
        InvalidQueryError: If either value is not an integer >= 1.
    """
    return (
        _parse_positive_int(page_number, "page_number"),
        _parse_positive_int(page_size, "page_size"),
    )


async def paginate(
    store: AbstractDocumentStore,
    collection: str,
    match_filter: Filter,
    sort_spec: SortSpec | None,
    page_number: int | str,
    page_size: int | str,
    shape: Callable[[Mapping[str, Any]], T],
) -> ListEnvelope[T]:
    """Fetch one page of matching documents and wrap it in an envelope.

    Args:
        store: Document store to query.
        collection: Collection name.
        match_filter: Filter from ``normalize``.
        sort_spec: Sort spec from ``normalize``.
        page_number: 1-based page index (int or numeric text).
        page_size: Records per page (int or numeric text).
        shape: Projects a raw document to the resource's public model.

    Returns:
        ListEnvelope whose ``data`` holds the shaped records. A page past the
        end yields empty ``data`` and ``has_next_page=False``.

    Raises:
        InvalidQueryError: If page parameters are invalid.
        StoreUnavailableError: If the store fails.
    """
    page_number, page_size = parse_page_params(page_number, page_size)

    with translate_store_errors("count_matching", collection):
        total_count = await store.count_matching(collection, match_filter)

    total_pages = math.ceil(total_count / page_size)

    with translate_store_errors("fetch_page", collection):
        records = await store.fetch_page(
            collection,
            match_filter,
            sort_spec,
            (page_number - 1) * page_size,
            page_size,
        )

    data = [shape(record) for record in records]
    return ListEnvelope(
        page_number=page_number,
        page_size=page_size,
        count=len(data),
        total_pages=total_pages,
        has_previous_page=page_number > 1,
        has_next_page=page_number < total_pages,
        data=data,
    )

"""Pydantic schema for paginated list responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ListEnvelope(BaseModel, Generic[T]):
    """One page of a list query plus the pagination metadata."""

    page_number: int = Field(..., ge=1, description="1-based page index that was requested.")
    page_size: int = Field(..., ge=1, description="Maximum number of records per page.")
    count: int = Field(..., ge=0, description="Number of records returned on this page.")
    total_pages: int = Field(
        ..., ge=0, description="ceil(total matching records / page_size)."
    )
    has_previous_page: bool
    has_next_page: bool
    data: list[T] = Field(default_factory=list)

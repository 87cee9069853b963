"""Pydantic schemas for the items (inventory) resource."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field


class ItemPublic(BaseModel):
    """Public projection of an item document."""

    id: str
    name: str
    description: str
    quantity: int = Field(..., description="Units in stock.")
    price: float = Field(..., description="Unit price.")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ItemPublic":
        return cls(
            id=str(document["id"]),
            name=document["name"],
            description=document["description"],
            quantity=document["quantity"],
            price=document["price"],
        )


class ItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the item.")
    description: str = Field(..., min_length=1, description="Description of the item.")
    quantity: int = Field(..., ge=0, description="Units in stock.")
    price: float = Field(..., ge=0, description="Unit price.")


class ItemUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=0)
    price: float = Field(..., ge=0)

"""Item inventory service."""

from __future__ import annotations

import logging

from app.adapters.store.base import AbstractDocumentStore, translate_store_errors
from app.core.errors import NotFoundError
from app.schemas.items import ItemPublic
from app.schemas.listing import ListEnvelope
from app.services.listing import normalize, paginate

logger = logging.getLogger(__name__)

ITEMS_COLLECTION = "items"
ITEM_LIST_FIELDS = frozenset(ItemPublic.model_fields)


def _item_not_found(item_id: str) -> NotFoundError:
    return NotFoundError(
        code="item_not_found",
        message="Unknown item",
        details={"resource": "item", "resource_id": item_id},
    )


class ItemsService:
    """CRUD and listing over the items collection."""

    def __init__(self, store: AbstractDocumentStore) -> None:
        self._store = store

    async def create_item(
        self,
        name: str,
        description: str,
        quantity: int,
        price: float,
    ) -> ItemPublic:
        document = {
            "name": name,
            "description": description,
            "quantity": quantity,
            "price": price,
        }
        with translate_store_errors("insert", ITEMS_COLLECTION):
            item_id = await self._store.insert(ITEMS_COLLECTION, document)

        logger.info("items.created", extra={"item_id": item_id})
        return ItemPublic(id=item_id, **document)

    async def list_items(
        self,
        *,
        page_number: int | str,
        page_size: int | str,
        search: str | None = None,
        sort: str | None = None,
    ) -> ListEnvelope[ItemPublic]:
        match_filter, sort_spec = normalize(search, sort, ITEM_LIST_FIELDS)
        return await paginate(
            self._store,
            ITEMS_COLLECTION,
            match_filter,
            sort_spec,
            page_number,
            page_size,
            ItemPublic.from_document,
        )

    async def get_item(self, item_id: str) -> ItemPublic:
        with translate_store_errors("get", ITEMS_COLLECTION):
            document = await self._store.get(ITEMS_COLLECTION, item_id)
        if document is None:
            raise _item_not_found(item_id)
        return ItemPublic.from_document(document)

    async def update_item(self, item_id: str, quantity: int, price: float) -> ItemPublic:
        """Set the stock quantity and price of an item.

        Raises:
            NotFoundError: If the item does not exist.
        """
        with translate_store_errors("update", ITEMS_COLLECTION):
            updated = await self._store.update(
                ITEMS_COLLECTION, item_id, {"quantity": quantity, "price": price}
            )
        if not updated:
            raise _item_not_found(item_id)

        logger.info("items.updated", extra={"item_id": item_id})
        return await self.get_item(item_id)

    async def delete_item(self, item_id: str) -> None:
        with translate_store_errors("delete", ITEMS_COLLECTION):
            deleted = await self._store.delete(ITEMS_COLLECTION, item_id)
        if not deleted:
            raise _item_not_found(item_id)
        logger.info("items.deleted", extra={"item_id": item_id})

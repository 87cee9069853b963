from fastapi import APIRouter, Depends, Query

from app.core.auth import verify_api_key
from app.core.config import settings
from app.core.dependencies import get_items_service
from app.schemas.items import ItemCreateRequest, ItemPublic, ItemUpdateRequest
from app.schemas.listing import ListEnvelope
from app.schemas.users import ResourceId
from app.services.items_service import ItemsService

router = APIRouter(
    prefix="/items",
    tags=["Items"],
    dependencies=[Depends(verify_api_key)],
)


@router.post("", response_model=ItemPublic, status_code=201)
async def create_item(
    payload: ItemCreateRequest,
    items: ItemsService = Depends(get_items_service),
) -> ItemPublic:
    """Add an item to the inventory."""
    return await items.create_item(
        payload.name,
        payload.description,
        payload.quantity,
        payload.price,
    )


@router.get("", response_model=ListEnvelope[ItemPublic])
async def list_items(
    page_number: str = Query("1", description="1-based page index."),
    page_size: str | None = Query(None, description="Records per page (default from settings)."),
    search: str | None = Query(None, description="Substring search, e.g. `name:shirt`."),
    sort: str | None = Query(None, description="Ordering, e.g. `price:asc`. Any direction but `asc` sorts descending."),
    items: ItemsService = Depends(get_items_service),
) -> ListEnvelope[ItemPublic]:
    """List inventory items with search, sorting and pagination."""
    return await items.list_items(
        page_number=page_number,
        page_size=page_size or settings.app.default_page_size,
        search=search,
        sort=sort,
    )


@router.get("/{item_id}", response_model=ItemPublic)
async def get_item(
    item_id: str,
    items: ItemsService = Depends(get_items_service),
) -> ItemPublic:
    return await items.get_item(item_id)


@router.put("/{item_id}", response_model=ItemPublic)
async def update_item(
    item_id: str,
    payload: ItemUpdateRequest,
    items: ItemsService = Depends(get_items_service),
) -> ItemPublic:
    """Update the stock quantity and price of an item."""
    return await items.update_item(item_id, payload.quantity, payload.price)


@router.delete("/{item_id}", response_model=ResourceId)
async def delete_item(
    item_id: str,
    items: ItemsService = Depends(get_items_service),
) -> ResourceId:
    await items.delete_item(item_id)
    return ResourceId(id=item_id)

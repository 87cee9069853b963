from fastapi import APIRouter, Depends, Query

from app.core.auth import verify_api_key
from app.core.config import settings
from app.core.dependencies import get_users_service
from app.schemas.listing import ListEnvelope
from app.schemas.users import (
    ChangePasswordRequest,
    ResourceId,
    UserCreateRequest,
    UserPublic,
    UserUpdateRequest,
)
from app.services.users_service import UsersService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=ListEnvelope[UserPublic])
async def list_users(
    page_number: str = Query("1", description="1-based page index."),
    page_size: str | None = Query(None, description="Records per page (default from settings)."),
    search: str | None = Query(None, description="Substring search, e.g. `name:jo`."),
    sort: str | None = Query(None, description="Ordering, e.g. `email:asc` or `name:desc`."),
    users: UsersService = Depends(get_users_service),
) -> ListEnvelope[UserPublic]:
    """List users with search, sorting and pagination."""
    return await users.list_users(
        page_number=page_number,
        page_size=page_size or settings.app.default_page_size,
        search=search,
        sort=sort,
    )


@router.post("", response_model=UserPublic, status_code=201)
async def create_user(
    payload: UserCreateRequest,
    users: UsersService = Depends(get_users_service),
) -> UserPublic:
    return await users.create_user(payload.name, payload.email, payload.password)


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    users: UsersService = Depends(get_users_service),
) -> UserPublic:
    return await users.get_user(user_id)


@router.put("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    users: UsersService = Depends(get_users_service),
) -> UserPublic:
    return await users.update_user(user_id, payload.name, payload.email)


@router.delete("/{user_id}", response_model=ResourceId)
async def delete_user(
    user_id: str,
    users: UsersService = Depends(get_users_service),
) -> ResourceId:
    await users.delete_user(user_id)
    return ResourceId(id=user_id)


@router.patch("/{user_id}/change-password", response_model=ResourceId)
async def change_password(
    user_id: str,
    payload: ChangePasswordRequest,
    users: UsersService = Depends(get_users_service),
) -> ResourceId:
    """Change a user's password; the current password must be supplied."""
    await users.change_password(user_id, payload.old_password, payload.new_password)
    return ResourceId(id=user_id)

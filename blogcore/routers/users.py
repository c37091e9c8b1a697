import uuid

from fastapi import APIRouter, Depends

from blogcore.config import settings
from blogcore.dependencies import AdminUser, CurrentUser, DbSession, PaginationParams
from blogcore.schemas import Page, UserCreate, UserDetail, UserResponse, UserUpdate
from blogcore.services import user_service

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/users", tags=["users"])


@router.get("", response_model=Page[UserResponse])
async def list_users(
    current_user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams = Depends(),
):
    return await user_service.get_users(db, pagination.page, pagination.limit)


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(data: UserCreate, admin: AdminUser, db: DbSession):
    return await user_service.create_user(db, data)


@router.get("/me", response_model=UserDetail)
async def me(current_user: CurrentUser, db: DbSession):
    return await user_service.get_user(db, current_user.id)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(user_id: uuid.UUID, current_user: CurrentUser, db: DbSession):
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserDetail)
async def update_user(
    user_id: uuid.UUID, data: UserUpdate, current_user: CurrentUser, db: DbSession
):
    return await user_service.update_user(db, user_id, data, current_user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: uuid.UUID, admin: AdminUser, db: DbSession):
    await user_service.delete_user(db, user_id, admin)

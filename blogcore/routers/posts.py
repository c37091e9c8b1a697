import uuid

from fastapi import APIRouter, Depends

from blogcore.config import settings
from blogcore.dependencies import CurrentUser, DbSession, PaginationParams, post_filter_params
from blogcore.schemas import Page, PostCreate, PostFilter, PostResponse, PostUpdate, UserDetail
from blogcore.services import post_service, user_service

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/posts", tags=["posts"])


@router.get("", response_model=Page[PostResponse])
async def list_posts(
    db: DbSession,
    pagination: PaginationParams = Depends(),
    filters: PostFilter = Depends(post_filter_params),
):
    return await post_service.get_posts(db, pagination.page, pagination.limit, filters)


@router.get("/me", response_model=Page[PostResponse])
async def my_posts(
    current_user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams = Depends(),
):
    return await post_service.get_posts_by_author(
        db, current_user.id, pagination.page, pagination.limit
    )


@router.get("/by-author/{author_id}", response_model=Page[PostResponse])
async def posts_by_author(
    author_id: uuid.UUID,
    current_user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams = Depends(),
):
    return await post_service.get_posts_by_author(
        db, author_id, pagination.page, pagination.limit
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: uuid.UUID, db: DbSession):
    return await post_service.get_post(db, post_id)


@router.get("/{post_id}/author", response_model=UserDetail)
async def get_post_author(post_id: uuid.UUID, db: DbSession):
    post = await post_service.get_post(db, post_id)
    return await user_service.get_user(db, post.author_id)


@router.post("", status_code=201, response_model=PostResponse)
async def create_post(data: PostCreate, current_user: CurrentUser, db: DbSession):
    return await post_service.create_post(db, data, current_user)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: uuid.UUID, data: PostUpdate, current_user: CurrentUser, db: DbSession
):
    return await post_service.update_post(db, post_id, data, current_user)


@router.delete("/{post_id}", status_code=204)
async def delete_post(post_id: uuid.UUID, current_user: CurrentUser, db: DbSession):
    await post_service.delete_post(db, post_id, current_user)


@router.post("/{post_id}/publish", response_model=PostResponse)
async def publish_post(post_id: uuid.UUID, current_user: CurrentUser, db: DbSession):
    return await post_service.publish_post(db, post_id, current_user)


@router.post("/{post_id}/unpublish", response_model=PostResponse)
async def unpublish_post(post_id: uuid.UUID, current_user: CurrentUser, db: DbSession):
    return await post_service.unpublish_post(db, post_id, current_user)

import uuid
from typing import Annotated

import jwt
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blogcore.config import settings
from blogcore.database import get_db
from blogcore.exceptions import Forbidden, Unauthorized
from blogcore.models import User
from blogcore.schemas import PostFilter
from blogcore.security import decode_token
from blogcore.services import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


class PaginationParams:
    """
    Reusable FastAPI dependency that parses and validates pagination
    query parameters.

    Usage in a router::

        @router.get("/posts")
        async def list_posts(pagination: PaginationParams = Depends()):
            ...

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    limit:
        Number of items per page, at most ``settings.MAX_PAGE_SIZE``.
    """

    def __init__(
        self,
        page: int = Query(
            1,
            ge=1,
            description="Page number (1-based).",
        ),
        limit: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=settings.MAX_PAGE_SIZE,
            description="Number of items returned per page.",
        ),
    ) -> None:
        self.page = page
        self.limit = limit


def post_filter_params(
    published: bool | None = Query(None, description="Only posts with this published state."),
    author_id: uuid.UUID | None = Query(None, description="Only posts by this author."),
    search_term: str | None = Query(None, description="Case-sensitive substring of the title."),
) -> PostFilter:
    return PostFilter(published=published, author_id=author_id, search_term=search_term)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the bearer token to the acting ``User``; raise ``Unauthorized`` otherwise."""
    if credentials is None:
        raise Unauthorized("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired token")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthorized("Invalid token payload")

    return await auth_service.validate_user(db, user_id)


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]

"""
User service: CRUD and permission rules for the User aggregate.

Permission summary
------------------
- update: admin, or the user themselves.  Only admins may set ``role``.
- delete: admin only in practice (non-admins may only target themselves,
  and nobody may delete their own account).

Every check runs before any write, so a rejected call leaves the
session untouched.
"""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blogcore.config import settings
from blogcore.exceptions import AlreadyExists, Forbidden, InternalFailure, NotFound
from blogcore.models import User, UserRole
from blogcore.schemas import Page, UserCreate, UserResponse, UserUpdate
from blogcore.security import hash_password
from blogcore.services.pagination import paginate

logger = logging.getLogger(__name__)


async def _ensure_email_available(db: AsyncSession, email: str) -> None:
    if await get_user_by_email(db, email) is not None:
        raise AlreadyExists("Email already registered")


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Create a new user with a bcrypt-hashed password.

    Raises ``AlreadyExists`` when the email is taken; nothing is written
    in that case.
    """
    await _ensure_email_available(db, data.email)

    user = User(
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        password_hash=hash_password(data.password),
        role=data.role or UserRole.USER,
    )
    db.add(user)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to persist new user email=%s", data.email)
        raise InternalFailure("Failed to create user") from exc

    logger.info("User created id=%s role=%s", user.id, user.role.value)
    return user


async def get_users(
    db: AsyncSession,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> Page[UserResponse]:
    """Return one page of users, newest first.  Posts are not loaded."""
    return await paginate(db, User, page, limit, UserResponse)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Return *user_id* with its posts loaded, or raise ``NotFound``."""
    q = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.posts))
        # The acting user is usually already in the session with posts
        # noloaded; refresh it so the eager load applies.
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound(f'User with ID "{user_id}" not found')
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def update_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    data: UserUpdate,
    actor: User,
) -> User:
    """
    Partially update *user_id* on behalf of *actor*.

    Only fields present in the request payload change
    (``model_dump(exclude_unset=True)``); a new password is re-hashed.
    """
    user = await get_user(db, user_id)

    if not actor.is_admin and actor.id != user_id:
        raise Forbidden("You can only update your own profile")

    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email and new_email != user.email:
        await _ensure_email_available(db, new_email)

    if update_data.get("role") is not None and not actor.is_admin:
        raise Forbidden("Only admins can change user roles")

    password = update_data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field, value in update_data.items():
        # An explicit null leaves the stored value alone; every column is NOT NULL.
        if value is not None:
            setattr(user, field, value)

    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to update user id=%s", user_id)
        raise InternalFailure("Failed to update user") from exc

    logger.info("User updated id=%s by=%s fields=%s", user_id, actor.id, sorted(update_data))
    return user


async def delete_user(db: AsyncSession, user_id: uuid.UUID, actor: User) -> bool:
    """
    Delete *user_id* on behalf of *actor*.

    Nobody may delete their own account, admins included, so the only
    successful path is an admin removing a different user.
    """
    user = await get_user(db, user_id)

    if not actor.is_admin and actor.id != user_id:
        raise Forbidden("You can only delete your own account")

    if actor.id == user_id:
        raise Forbidden("You cannot delete your own account")

    try:
        await db.delete(user)
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete user id=%s", user_id)
        raise InternalFailure("Failed to delete user") from exc

    logger.info("User deleted id=%s by=%s", user_id, actor.id)
    return True

"""
Post service: business logic for the Post aggregate.

Design notes
------------
- Every mutating operation (update, delete, publish, unpublish) goes
  through ``_get_modifiable_post``: load, then the ownership check
  ``can_modify``, then the write.  Nothing is written for a rejected
  caller.
- ``author_id`` always comes from the authenticated caller and is never
  part of an update payload.
- ``joinedload(Post.author)`` is used for every read so responses carry
  the author without an extra query per row.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blogcore.config import settings
from blogcore.exceptions import Forbidden, InternalFailure, NotFound
from blogcore.models import Post, User
from blogcore.schemas import Page, PostCreate, PostFilter, PostResponse, PostUpdate
from blogcore.services.pagination import paginate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def can_modify(post: Post, user: User) -> bool:
    """Ownership check: admins may modify any post, everyone else only their own."""
    return user.is_admin or post.author_id == user.id


def _filter_clauses(filters: PostFilter | None) -> list:
    """Translate *filters* into a list of AND-ed WHERE clauses (empty = whole table)."""
    if filters is None:
        return []
    clauses = []
    if filters.published is not None:
        clauses.append(Post.published == filters.published)
    if filters.author_id:
        clauses.append(Post.author_id == filters.author_id)
    if filters.search_term:
        # LIKE with escaped wildcards; case-sensitive on Postgres and on
        # SQLite once install_sqlite_pragmas has run.
        clauses.append(Post.title.contains(filters.search_term, autoescape=True))
    return clauses


async def _flush(db: AsyncSession, failure_message: str, post_id=None) -> None:
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.exception("%s (post id=%s)", failure_message, post_id)
        raise InternalFailure(failure_message) from exc


async def _get_modifiable_post(
    db: AsyncSession, post_id: uuid.UUID, actor: User, action: str
) -> Post:
    post = await get_post(db, post_id)
    if not can_modify(post, actor):
        logger.warning("User %s denied %s on post %s", actor.id, action, post_id)
        raise Forbidden(f"You can only {action} your own posts")
    return post


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_post(db: AsyncSession, data: PostCreate, author: User) -> Post:
    """Create a post attributed to *author*; ``published`` defaults to False."""
    post = Post(
        title=data.title,
        content=data.content,
        published=data.published,
        author_id=author.id,
    )
    post.author = author
    db.add(post)
    await _flush(db, "Failed to create post")

    logger.info("Post created id=%s author=%s published=%s", post.id, author.id, post.published)
    return post


async def get_posts(
    db: AsyncSession,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    filters: PostFilter | None = None,
) -> Page[PostResponse]:
    """
    Return one page of posts matching every field set in *filters*,
    newest first, with authors loaded.
    """
    return await paginate(
        db,
        Post,
        page,
        limit,
        PostResponse,
        where=_filter_clauses(filters),
        options=(joinedload(Post.author),),
    )


async def get_posts_by_author(
    db: AsyncSession,
    author_id: uuid.UUID,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> Page[PostResponse]:
    """Same contract as ``get_posts`` with the predicate fixed to *author_id*."""
    return await get_posts(db, page, limit, PostFilter(author_id=author_id))


async def get_post(db: AsyncSession, post_id: uuid.UUID) -> Post:
    """Return *post_id* with its author loaded, or raise ``NotFound``."""
    q = (
        select(Post)
        .where(Post.id == post_id)
        .options(joinedload(Post.author))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    post = result.unique().scalar_one_or_none()
    if post is None:
        raise NotFound(f'Post with ID "{post_id}" not found')
    return post


async def update_post(
    db: AsyncSession, post_id: uuid.UUID, data: PostUpdate, actor: User
) -> Post:
    """
    Partially update a post owned by *actor* (or any post, for admins).

    Only fields explicitly set in the payload are modified; an explicit
    null leaves the stored value alone.
    """
    post = await _get_modifiable_post(db, post_id, actor, "update")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(post, field, value)

    await _flush(db, "Failed to update post", post_id)
    logger.info("Post updated id=%s by=%s fields=%s", post_id, actor.id, sorted(update_data))
    return post


async def delete_post(db: AsyncSession, post_id: uuid.UUID, actor: User) -> bool:
    post = await _get_modifiable_post(db, post_id, actor, "delete")

    await db.delete(post)
    await _flush(db, "Failed to delete post", post_id)
    logger.info("Post deleted id=%s by=%s", post_id, actor.id)
    return True


async def publish_post(db: AsyncSession, post_id: uuid.UUID, actor: User) -> Post:
    return await _set_published(db, post_id, actor, True)


async def unpublish_post(db: AsyncSession, post_id: uuid.UUID, actor: User) -> Post:
    return await _set_published(db, post_id, actor, False)


async def _set_published(
    db: AsyncSession, post_id: uuid.UUID, actor: User, published: bool
) -> Post:
    action = "publish" if published else "unpublish"
    post = await _get_modifiable_post(db, post_id, actor, action)

    post.published = published
    await _flush(db, f"Failed to {action} post", post_id)
    logger.info("Post %sed id=%s by=%s", action, post_id, actor.id)
    return post

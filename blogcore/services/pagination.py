"""
Offset/limit pagination shared by the user and post listings.

``paginate`` issues two statements against the caller's session: a COUNT
over the filtered table and the LIMIT/OFFSET page itself, newest first.
"""
import math
from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcore.schemas import Page

S = TypeVar("S", bound=BaseModel)


def page_metadata(total: int, page: int, limit: int) -> dict:
    """Return the derived envelope fields for *total* rows split into *limit*-sized pages."""
    total_pages = math.ceil(total / limit)
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }


async def paginate(
    db: AsyncSession,
    model,
    page: int,
    limit: int,
    schema: Type[S],
    where: Iterable[Any] = (),
    options: Iterable[Any] = (),
) -> Page[S]:
    """
    Return one page of *model* rows matching every clause in *where*,
    ordered by ``created_at`` descending, with items validated into *schema*.

    *options* are loader options (``joinedload`` etc.) applied to the row
    query only; ``unique()`` deduplicates joined rows.
    """
    where = tuple(where)

    count_q = select(func.count()).select_from(model).where(*where)
    total: int = (await db.execute(count_q)).scalar_one()

    rows_q = (
        select(model)
        .where(*where)
        .options(*options)
        .order_by(model.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(rows_q)
    rows = result.unique().scalars().all()

    return Page[schema](
        items=[schema.model_validate(row) for row in rows],
        **page_metadata(total, page, limit),
    )

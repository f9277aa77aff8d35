"""
Restaurant store - the query contract the core consumes.

Indexed lookups (slug, id, type), ordered listings, and per-field text search.
Every function takes an AsyncSession and never commits; mutations of the
denormalised score live in score_aggregator.
"""

from __future__ import annotations

import logging
from typing import Iterable, Literal, Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from madad.models import Restaurant

logger = logging.getLogger(__name__)

SortBy = Literal["madad", "userScore", "date"]

SEARCHABLE_FIELDS: tuple[str, ...] = (
    "name",
    "name_he",
    "address",
    "type",
    "type_he",
    "description",
    "description_he",
)


def _escape_like(term: str) -> str:
    """Escape LIKE metacharacters so user input is matched literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _query_terms(query: str) -> list[str]:
    """Split a query into distinct whitespace-separated terms, order preserved."""
    return list(dict.fromkeys(t for t in query.split() if t))


async def search_field(
    db: AsyncSession,
    field: str,
    query: str,
    limit: int,
) -> list[Restaurant]:
    """
    Text search over a single restaurant field.

    A row matches when any query term occurs in the field (case-insensitive).
    Rows matching more terms rank first; ties break on id for a stable order.
    """
    if field not in SEARCHABLE_FIELDS:
        raise ValueError(f"Field {field!r} is not searchable")

    terms = _query_terms(query)
    if not terms:
        return []

    column = getattr(Restaurant, field)
    conditions = [column.ilike(f"%{_escape_like(t)}%", escape="\\") for t in terms]

    relevance = case((conditions[0], 1), else_=0)
    for cond in conditions[1:]:
        relevance = relevance + case((cond, 1), else_=0)

    stmt = (
        select(Restaurant)
        .where(or_(*conditions))
        .order_by(relevance.desc(), Restaurant.id.asc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_restaurants(
    db: AsyncSession,
    type: Optional[str] = None,
    sort_by: SortBy = "madad",
    limit: Optional[int] = None,
) -> list[Restaurant]:
    """
    List restaurants, optionally filtered to one cuisine type.

    sort_by:
      madad     - editorial score, highest first
      userScore - user score, highest first (unreviewed counts as 0)
      date      - review date, newest first
    """
    stmt = select(Restaurant)
    if type:
        stmt = stmt.where(Restaurant.type == type)

    if sort_by == "userScore":
        stmt = stmt.order_by(func.coalesce(Restaurant.user_score, 0).desc(), Restaurant.id.asc())
    elif sort_by == "date":
        stmt = stmt.order_by(Restaurant.date.desc(), Restaurant.id.asc())
    else:
        stmt = stmt.order_by(Restaurant.madad_number.desc(), Restaurant.id.asc())

    if limit:
        stmt = stmt.limit(limit)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def featured(db: AsyncSession, limit: int) -> list[Restaurant]:
    """Top restaurants by editorial score."""
    return await list_restaurants(db, sort_by="madad", limit=limit)


async def get_restaurant(db: AsyncSession, restaurant_id: int) -> Optional[Restaurant]:
    return await db.get(Restaurant, restaurant_id)


async def get_by_slug(db: AsyncSession, slug: str) -> Optional[Restaurant]:
    result = await db.execute(select(Restaurant).where(Restaurant.slug == slug))
    return result.scalars().first()


async def get_many(db: AsyncSession, ids: Iterable[int]) -> dict[int, Restaurant]:
    """Fetch restaurants by id; ids with no row are simply absent from the result."""
    ids = list(ids)
    if not ids:
        return {}
    result = await db.execute(select(Restaurant).where(Restaurant.id.in_(ids)))
    return {r.id: r for r in result.scalars().all()}


async def get_types(db: AsyncSession) -> tuple[list[str], list[str]]:
    """Return (sorted English types, sorted Hebrew types), blanks excluded."""
    result = await db.execute(select(Restaurant.type, Restaurant.type_he))
    types: set[str] = set()
    types_he: set[str] = set()
    for type_en, type_he in result.all():
        if type_en:
            types.add(type_en)
        if type_he:
            types_he.add(type_he)
    return sorted(types), sorted(types_he)

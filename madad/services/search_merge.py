"""
Search merge engine - bilingual multi-field keyword search.

Flow:
  1. Fan out one text search per searchable field (7 in total), concurrently.
  2. Order the per-field batches by priority for the caller's language:
       name → type → address → description (preferred language),
       then name → type → description in the other language as a fallback.
  3. Concatenate batches, keeping the first occurrence of each restaurant.
  4. Truncate to the result budget and project to card records.

Batch order is fixed by field, not by which query finished first, so the
fan-out affects latency only, never ranking.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Literal, Sequence

from sqlalchemy.ext.asyncio import async_sessionmaker

from madad.config import settings
from madad.models import Restaurant
from madad.schemas.restaurant import RestaurantCard
from madad.services import restaurant_store
from madad.services.restaurant_store import SEARCHABLE_FIELDS

logger = logging.getLogger(__name__)

Lang = Literal["he", "en"]

# (field, query, limit) -> matching restaurants, best first
FieldSearch = Callable[[str, str, int], Awaitable[list[Restaurant]]]


def make_field_search(session_factory: async_sessionmaker) -> FieldSearch:
    """Return a FieldSearch that runs each query on its own session."""

    async def _search(field: str, query: str, limit: int) -> list[Restaurant]:
        async with session_factory() as session:
            return await restaurant_store.search_field(session, field, query, limit)

    return _search


def field_priority(lang: Lang) -> list[str]:
    """Merge order of the per-field batches for a caller's language."""
    if lang == "en":
        preferred, other = "", "_he"
    else:
        preferred, other = "_he", ""
    return [
        f"name{preferred}",
        f"type{preferred}",
        "address",
        f"description{preferred}",
        f"name{other}",
        f"type{other}",
        f"description{other}",
    ]


def field_limit(field: str) -> int:
    """Raw-hit cap for one field's query."""
    if field.startswith("description"):
        return settings.search_description_limit
    return settings.search_field_limit


def merge_batches(batches: Iterable[Sequence[Restaurant]], limit: int) -> list[Restaurant]:
    """Concatenate batches in order, first occurrence of each id wins."""
    seen: set[int] = set()
    merged: list[Restaurant] = []
    for batch in batches:
        for restaurant in batch:
            if restaurant.id in seen:
                continue
            seen.add(restaurant.id)
            merged.append(restaurant)
            if len(merged) >= limit:
                return merged
    return merged


async def search_by_name(
    query: str,
    lang: Lang,
    field_search: FieldSearch,
) -> list[RestaurantCard]:
    """
    Search restaurants by keyword across all bilingual text fields.

    Blank queries return [] without touching the store.
    """
    query = query.strip()
    if not query:
        return []

    batches = await asyncio.gather(
        *(field_search(field, query, field_limit(field)) for field in SEARCHABLE_FIELDS)
    )
    by_field = dict(zip(SEARCHABLE_FIELDS, batches))

    merged = merge_batches(
        (by_field[field] for field in field_priority(lang)),
        settings.search_result_limit,
    )
    logger.debug(
        "search_by_name q=%r lang=%s raw=%d merged=%d",
        query,
        lang,
        sum(len(b) for b in batches),
        len(merged),
    )
    return [RestaurantCard.model_validate(r) for r in merged]

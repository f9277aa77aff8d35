"""
Semantic search bridge - natural-language query → embedding → nearest
neighbours in ChromaDB → restaurant rows.

Flow:
  1. Embed the query (UpstreamError propagates; no keyword fallback).
  2. Query the vector index for the `limit` closest restaurants.
  3. Fetch those restaurants in one SELECT and emit them in vector-rank order
     with their similarity. Hits whose restaurant row is gone are skipped.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from madad.config import settings
from madad.schemas.restaurant import RestaurantDetail, SemanticSearchResult
from madad.services import restaurant_store
from madad.services.chroma_client import get_restaurants_collection, query_nearest
from madad.services.embedding import embed_query

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


async def natural_language_search(
    db: AsyncSession,
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[SemanticSearchResult]:
    """Rank restaurants by semantic similarity to a free-text query."""
    query = query.strip()
    if not query:
        return []
    limit = max(1, min(limit, settings.semantic_max_limit))

    embedding = await embed_query(query)

    def _index_query() -> list[tuple[int, float]]:
        return query_nearest(get_restaurants_collection(), embedding, limit)

    hits = await asyncio.to_thread(_index_query)
    restaurants = await restaurant_store.get_many(db, (rid for rid, _ in hits))

    results: list[SemanticSearchResult] = []
    for rid, similarity in hits:
        restaurant = restaurants.get(rid)
        if restaurant is None:
            logger.debug("Vector hit %s has no restaurant row; skipped", rid)
            continue
        detail = RestaurantDetail.model_validate(restaurant)
        results.append(SemanticSearchResult(**detail.model_dump(), similarity=similarity))
    return results

"""
Search endpoints.

  GET /search?q=&lang=          - bilingual keyword search (≤ 30 cards)
  GET /search/semantic?q=&limit= - natural-language vector search
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from madad.database import get_db, get_session_factory
from madad.schemas.restaurant import RestaurantCard, SemanticSearchResult
from madad.services.search_merge import Lang, make_field_search, search_by_name
from madad.services.semantic_search import DEFAULT_LIMIT, natural_language_search

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=list[RestaurantCard])
async def keyword_search(
    q: str = Query(default="", max_length=200),
    lang: Lang = Query(default="he"),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> list[RestaurantCard]:
    """Name/type/address/description search, native-language matches first."""
    return await search_by_name(q, lang, make_field_search(session_factory))


@router.get("/semantic", response_model=list[SemanticSearchResult])
async def semantic_search(
    q: str = Query(..., max_length=500),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> list[SemanticSearchResult]:
    """
    Natural-language search. Fails with 502 EMBEDDING_UNAVAILABLE when the
    embedding provider cannot be reached - no keyword fallback.
    """
    return await natural_language_search(db, q, limit)

"""
Restaurant browsing endpoints.

  GET /restaurants                     - listing, optional type filter and sort
  GET /restaurants/featured            - top by editorial score
  GET /restaurants/types               - distinct types per language
  GET /restaurants/{restaurant_id}/reviews - newest reviews
  GET /restaurants/{slug}              - full record
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from madad.config import settings
from madad.database import get_db
from madad.errors import NotFoundError
from madad.schemas.restaurant import RestaurantCard, RestaurantDetail, RestaurantTypes
from madad.schemas.review import ReviewRead
from madad.services import restaurant_store
from madad.services.restaurant_store import SortBy
from madad.services.reviews import list_reviews

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=list[RestaurantCard])
async def list_restaurants(
    type: Optional[str] = Query(default=None),
    sort_by: SortBy = Query(default="madad"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> list[RestaurantCard]:
    restaurants = await restaurant_store.list_restaurants(
        db, type=type, sort_by=sort_by, limit=limit
    )
    return [RestaurantCard.model_validate(r) for r in restaurants]


@router.get("/featured", response_model=list[RestaurantCard])
async def featured(
    limit: int = Query(default=settings.featured_limit, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> list[RestaurantCard]:
    restaurants = await restaurant_store.featured(db, limit)
    return [RestaurantCard.model_validate(r) for r in restaurants]


@router.get("/types", response_model=RestaurantTypes)
async def types(db: AsyncSession = Depends(get_db)) -> RestaurantTypes:
    en, he = await restaurant_store.get_types(db)
    return RestaurantTypes(en=en, he=he)


@router.get("/{restaurant_id}/reviews", response_model=list[ReviewRead])
async def restaurant_reviews(
    restaurant_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[ReviewRead]:
    reviews = await list_reviews(db, restaurant_id)
    return [ReviewRead.model_validate(r) for r in reviews]


@router.get("/{slug}", response_model=RestaurantDetail)
async def get_by_slug(slug: str, db: AsyncSession = Depends(get_db)) -> RestaurantDetail:
    restaurant = await restaurant_store.get_by_slug(db, slug)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    return RestaurantDetail.model_validate(restaurant)

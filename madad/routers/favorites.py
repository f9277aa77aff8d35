"""
Favourite endpoints.

  POST /favorites/{restaurant_id}/toggle - add/remove (auth required)
  GET  /favorites                        - favourite restaurants, newest first
  GET  /favorites/ids                    - favourite restaurant ids

Listings return [] for anonymous callers instead of failing.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from madad.database import get_db
from madad.routers.deps import get_current_user_id, require_user_id
from madad.schemas.favorite import FavoriteToggleResponse
from madad.schemas.restaurant import RestaurantCard
from madad.services import favorites as favorite_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.post("/{restaurant_id}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    restaurant_id: int,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
) -> FavoriteToggleResponse:
    favorited = await favorite_service.toggle_favorite(db, user_id, restaurant_id)
    return FavoriteToggleResponse(restaurant_id=restaurant_id, favorited=favorited)


@router.get("", response_model=list[RestaurantCard])
async def list_favorites(
    user_id: Optional[str] = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[RestaurantCard]:
    restaurants = await favorite_service.favorite_restaurants(db, user_id)
    return [RestaurantCard.model_validate(r) for r in restaurants]


@router.get("/ids", response_model=list[int])
async def list_favorite_ids(
    user_id: Optional[str] = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[int]:
    return await favorite_service.favorite_ids(db, user_id)

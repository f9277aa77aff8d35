"""Favourites - per-user set membership of restaurants."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from madad.errors import AuthenticationError, NotFoundError
from madad.models import Favorite, Restaurant

logger = logging.getLogger(__name__)


async def toggle_favorite(
    db: AsyncSession,
    user_id: Optional[str],
    restaurant_id: int,
) -> bool:
    """
    Flip membership of restaurant_id in the user's favourites.
    Returns True when the restaurant is now a favourite, False when removed.
    """
    if not user_id:
        raise AuthenticationError("Not authenticated")

    result = await db.execute(
        select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.restaurant_id == restaurant_id,
        )
    )
    existing = result.scalars().first()

    if existing is not None:
        await db.delete(existing)
        await db.commit()
        return False

    if await db.get(Restaurant, restaurant_id) is None:
        raise NotFoundError("Restaurant not found")

    db.add(
        Favorite(
            user_id=user_id,
            restaurant_id=restaurant_id,
            created_at=datetime.now(timezone.utc),
        )
    )
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent toggle inserted the same pair first; the end state is
        # still "favourited".
        await db.rollback()
        logger.info(
            "Concurrent favourite insert (user=%s restaurant=%s)", user_id, restaurant_id
        )
    return True


async def favorite_ids(db: AsyncSession, user_id: Optional[str]) -> list[int]:
    """Restaurant ids the user has favourited; [] when not signed in."""
    if not user_id:
        return []
    result = await db.execute(
        select(Favorite.restaurant_id).where(Favorite.user_id == user_id)
    )
    return list(result.scalars().all())


async def favorite_restaurants(db: AsyncSession, user_id: Optional[str]) -> list[Restaurant]:
    """The user's favourite restaurants, most recently favourited first."""
    if not user_id:
        return []
    result = await db.execute(
        select(Restaurant)
        .join(Favorite, Favorite.restaurant_id == Restaurant.id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    return list(result.scalars().all())

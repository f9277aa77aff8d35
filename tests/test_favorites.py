"""Tests for the favourite toggle and listings."""

import pytest
from sqlalchemy import func, select

from madad.errors import AuthenticationError, NotFoundError
from madad.models import Favorite
from madad.services import favorites as favorite_service
from tests.conftest import add_restaurant


async def _favorite_rows(db, user_id, restaurant_id) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Favorite)
        .where(Favorite.user_id == user_id, Favorite.restaurant_id == restaurant_id)
    )
    return result.scalar()


async def test_toggle_twice_adds_then_removes(db):
    restaurant = await add_restaurant(db, name="Hummus Bar")

    assert await favorite_service.toggle_favorite(db, "u1", restaurant.id) is True
    assert await _favorite_rows(db, "u1", restaurant.id) == 1

    assert await favorite_service.toggle_favorite(db, "u1", restaurant.id) is False
    assert await _favorite_rows(db, "u1", restaurant.id) == 0


async def test_toggle_is_per_user(db):
    restaurant = await add_restaurant(db, name="Hummus Bar")

    await favorite_service.toggle_favorite(db, "u1", restaurant.id)
    assert await favorite_service.toggle_favorite(db, "u2", restaurant.id) is True

    assert await _favorite_rows(db, "u1", restaurant.id) == 1
    assert await _favorite_rows(db, "u2", restaurant.id) == 1


async def test_toggle_requires_user(db):
    restaurant = await add_restaurant(db, name="Hummus Bar")

    with pytest.raises(AuthenticationError):
        await favorite_service.toggle_favorite(db, None, restaurant.id)
    assert await _favorite_rows(db, None, restaurant.id) == 0


async def test_toggle_unknown_restaurant(db):
    with pytest.raises(NotFoundError):
        await favorite_service.toggle_favorite(db, "u1", 777)


async def test_listings_newest_first(db):
    first = await add_restaurant(db, name="First")
    second = await add_restaurant(db, name="Second")
    await add_restaurant(db, name="Not a favourite")

    await favorite_service.toggle_favorite(db, "u1", first.id)
    await favorite_service.toggle_favorite(db, "u1", second.id)

    restaurants = await favorite_service.favorite_restaurants(db, "u1")
    ids = await favorite_service.favorite_ids(db, "u1")

    assert [r.name for r in restaurants] == ["Second", "First"]
    assert sorted(ids) == sorted([first.id, second.id])


async def test_listings_empty_for_anonymous(db):
    restaurant = await add_restaurant(db, name="First")
    await favorite_service.toggle_favorite(db, "u1", restaurant.id)

    assert await favorite_service.favorite_ids(db, None) == []
    assert await favorite_service.favorite_restaurants(db, None) == []

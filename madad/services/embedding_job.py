"""
Embedding job - out-of-band generation of restaurant vectors.

Embeds every restaurant that has no vector in the index yet. Failures are
logged per restaurant and skipped so one bad row does not stop the run.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from madad.errors import UpstreamError
from madad.models import Restaurant
from madad.services.chroma_client import (
    existing_ids,
    get_restaurants_collection,
    upsert_embedding,
)
from madad.services.embedding import embed_document

logger = logging.getLogger(__name__)

PAUSE_EVERY = 10
PAUSE_SECONDS = 0.5


def restaurant_document(restaurant: Restaurant) -> str:
    """Text embedded for a restaurant: all bilingual fields joined by '. '."""
    parts = [
        restaurant.name,
        restaurant.name_he,
        restaurant.type,
        restaurant.type_he,
        restaurant.address,
        restaurant.description,
        restaurant.description_he,
    ]
    return ". ".join(p for p in parts if p)


async def generate_missing_embeddings(session_factory: async_sessionmaker) -> dict[str, int]:
    """Embed and index every restaurant without a vector. Returns {updated, total}."""
    async with session_factory() as session:
        result = await session.execute(select(Restaurant).order_by(Restaurant.id))
        restaurants = list(result.scalars().all())

    collection = await asyncio.to_thread(get_restaurants_collection)
    indexed = await asyncio.to_thread(existing_ids, collection, [r.id for r in restaurants])
    missing = [r for r in restaurants if r.id not in indexed]
    logger.info("%d of %d restaurants need embeddings", len(missing), len(restaurants))

    updated = 0
    for restaurant in missing:
        try:
            embedding = await embed_document(restaurant_document(restaurant))
            await asyncio.to_thread(
                upsert_embedding,
                collection,
                restaurant.id,
                embedding,
                {"restaurant_id": restaurant.id, "type": restaurant.type},
            )
        except UpstreamError as exc:
            logger.error("Failed to embed restaurant %s (%s): %s", restaurant.id, restaurant.name, exc)
            continue
        except Exception as exc:
            logger.error("Failed to index restaurant %s (%s): %s", restaurant.id, restaurant.name, exc)
            continue
        updated += 1

        if updated % PAUSE_EVERY == 0:
            await asyncio.sleep(PAUSE_SECONDS)

    return {"updated": updated, "total": len(missing)}

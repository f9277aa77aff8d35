"""
ChromaDB access - the restaurant vector index.

One entry per restaurant, id = str(restaurant.id), cosine distance space.
All functions here are synchronous; async callers wrap them in
asyncio.to_thread.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable, Optional

import chromadb

from madad.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_chroma_client() -> Any:
    """Return the process-wide persistent Chroma client."""
    logger.info("Opening ChromaDB at %s", settings.chroma_path)
    return chromadb.PersistentClient(path=settings.chroma_path)


@lru_cache(maxsize=1)
def get_restaurants_collection() -> Any:
    """Return (creating if needed) the restaurant embedding collection."""
    return get_chroma_client().get_or_create_collection(
        name=settings.chroma_collection,
        metadata={"hnsw:space": "cosine"},
    )


def query_nearest(collection: Any, embedding: list[float], limit: int) -> list[tuple[int, float]]:
    """
    Nearest-neighbour lookup.
    Returns [(restaurant_id, similarity)] closest first; similarity = 1 - cosine distance.
    """
    count = collection.count()
    if count == 0:
        return []
    results = collection.query(
        query_embeddings=[embedding],
        n_results=min(limit, count),
        include=["distances"],
    )
    ids = (results.get("ids") or [[]])[0]
    distances = (results.get("distances") or [[]])[0]
    return [(int(rid), 1.0 - float(dist)) for rid, dist in zip(ids, distances)]


def upsert_embedding(
    collection: Any,
    restaurant_id: int,
    embedding: list[float],
    metadata: Optional[dict[str, Any]] = None,
) -> None:
    collection.upsert(
        ids=[str(restaurant_id)],
        embeddings=[embedding],
        metadatas=[metadata or {"restaurant_id": restaurant_id}],
    )


def existing_ids(collection: Any, restaurant_ids: Iterable[int]) -> set[int]:
    """Subset of restaurant_ids that already have a vector in the index."""
    ids = [str(rid) for rid in restaurant_ids]
    if not ids:
        return set()
    result = collection.get(ids=ids, include=[])
    return {int(rid) for rid in result.get("ids", [])}

"""
Embedding service - wraps Google text-embedding-004 (768 dimensions).

Query embeddings are cached in-process (TTLCache keyed by a hash of model and
text). Any provider failure raises UpstreamError; there is no retry and no
fallback, so one failed call fails the whole semantic-search request.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging

import google.generativeai as genai
from cachetools import TTLCache

from madad.config import settings
from madad.errors import UpstreamError

logger = logging.getLogger(__name__)

# Initialise the Google AI client
genai.configure(api_key=settings.google_api_key)

EMBEDDING_TIMEOUT_SECONDS = 20

_query_cache: TTLCache = TTLCache(
    maxsize=settings.embedding_cache_size,
    ttl=settings.embedding_cache_ttl,
)


def _cache_key(text: str) -> str:
    raw = f"{settings.embedding_model}:{text}"
    return hashlib.sha256(raw.encode()).hexdigest()[:20]


async def _embed(text: str, task_type: str) -> list[float]:
    try:
        response = await asyncio.wait_for(
            asyncio.to_thread(
                genai.embed_content,
                model=f"models/{settings.embedding_model}",
                content=text,
                task_type=task_type,
            ),
            timeout=EMBEDDING_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError as exc:
        logger.error("Embedding request timed out after %ds", EMBEDDING_TIMEOUT_SECONDS)
        raise UpstreamError("Embedding provider timed out") from exc
    except Exception as exc:
        logger.error("Embedding request failed: %s", exc)
        raise UpstreamError(f"Embedding provider error: {exc}") from exc

    embedding = response.get("embedding") if hasattr(response, "get") else None
    if not embedding or len(embedding) != settings.embedding_dimensions:
        logger.error(
            "Embedding provider returned %s values, expected %d",
            len(embedding) if embedding else 0,
            settings.embedding_dimensions,
        )
        raise UpstreamError("Embedding provider returned an invalid embedding")
    return [float(v) for v in embedding]


async def embed_query(text: str) -> list[float]:
    """Return the 768-dimensional embedding of a search query."""
    key = _cache_key(text)
    cached = _query_cache.get(key)
    if cached is not None:
        logger.debug("Query embedding cache HIT")
        return cached

    embedding = await _embed(text, "retrieval_query")
    _query_cache[key] = embedding
    return embedding


async def embed_document(text: str) -> list[float]:
    """Return the 768-dimensional embedding of a restaurant document."""
    return await _embed(text, "retrieval_document")


def clear_query_cache() -> None:
    _query_cache.clear()

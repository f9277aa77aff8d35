"""Health check endpoints - used by load balancers and uptime monitoring."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from madad import __version__
from madad.database import check_db_connectivity
from madad.services.chroma_client import get_restaurants_collection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe - returns 200 if the process is running."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe - checks DB connectivity and the vector index.
    Returns 200 with {"db": "ok", "vector_index": "ok"} when fully ready,
    or 503 with the failing component marked "error".
    """
    status: dict[str, str] = {}

    db_ok = await check_db_connectivity()
    status["db"] = "ok" if db_ok else "error"

    try:
        await asyncio.to_thread(lambda: get_restaurants_collection().count())
        status["vector_index"] = "ok"
    except Exception as exc:
        logger.warning("Vector index check failed: %s", exc)
        status["vector_index"] = "error"

    all_ok = all(v == "ok" for v in status.values())
    return JSONResponse(content=status, status_code=200 if all_ok else 503)

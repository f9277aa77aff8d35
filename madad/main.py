"""
Madad API - FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → open the vector index.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from madad import __version__
from madad.config import settings
from madad.database import check_db_connectivity, engine
from madad.errors import MadadError
from madad.models import Base
from madad.routers import favorites, health, restaurants, reviews, search
from madad.routers.deps import get_score_aggregator

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent - IF NOT EXISTS).
    2. Verify DB connectivity.
    3. Open the ChromaDB restaurant collection.
    On shutdown, wait for outstanding score recalculations.
    """
    logger.info("Starting Madad API (env=%s)", settings.app_env)

    # Step 1: create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified.")

    # Step 2: connectivity check
    ok = await check_db_connectivity()
    if not ok:
        logger.error("Database connectivity check FAILED at startup.")
    else:
        logger.info("Database connectivity verified.")

    # Step 3: warm ChromaDB
    from madad.services.chroma_client import get_restaurants_collection
    await asyncio.to_thread(get_restaurants_collection)
    logger.info("ChromaDB restaurants collection ready.")

    yield

    logger.info("Shutting down Madad API.")
    await get_score_aggregator().drain()
    await engine.dispose()


app = FastAPI(
    title="Madad API",
    description="Bilingual restaurant catalogue: search, reviews, and favourites.",
    version=__version__,
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(restaurants.router)
app.include_router(search.router)
app.include_router(reviews.router)
app.include_router(favorites.router)


# ── Exception handlers ───────────────────────────────────────────────────────

@app.exception_handler(MadadError)
async def madad_error_handler(request: Request, exc: MadadError) -> JSONResponse:
    """Translate domain errors into {"detail", "code"} responses."""
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers={"X-Error-Code": exc.code},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )

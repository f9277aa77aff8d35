"""
embed_restaurants.py - generate vectors for restaurants that have none.
Run after an import; safe to re-run (already-indexed restaurants are skipped).

Usage:
    python scripts/embed_restaurants.py
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from madad.database import AsyncSessionLocal, engine
from madad.services.embedding_job import generate_missing_embeddings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> None:
    result = await generate_missing_embeddings(AsyncSessionLocal)
    logger.info("Updated %d of %d restaurants.", result["updated"], result["total"])
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())

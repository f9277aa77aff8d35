"""
create_tables.py - create the restaurants, reviews and favorites tables.

The API lifespan does the same on startup; this script exists for deploys
that migrate before serving. Existing tables are left as they are.

Usage:
    python scripts/create_tables.py
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from madad.database import check_db_connectivity, engine
from madad.models import Base

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> int:
    try:
        if not await check_db_connectivity():
            logger.error("Database unreachable; no tables created.")
            return 1
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        tables = ", ".join(t.name for t in Base.metadata.sorted_tables)
        logger.info("Schema ready: %s", tables)
        return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

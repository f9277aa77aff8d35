"""
ingest.py - restaurant CSV import.

Usage:
    python scripts/ingest.py --csv data/restaurants.csv            # import new rows
    python scripts/ingest.py --csv data/restaurants.csv --dry-run  # parse, no DB writes
    python scripts/ingest.py --csv data/restaurants.csv --embed    # import, then embed
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from madad.database import AsyncSessionLocal, engine
from madad.models import Base
from madad.services.importer import insert_restaurants, load_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

BATCH_SIZE = 50


async def run_ingest(csv_path: str, dry_run: bool = False, embed: bool = False) -> None:
    """Full import pipeline."""
    try:
        await _ingest(csv_path, dry_run=dry_run, embed=embed)
    finally:
        await engine.dispose()


async def _ingest(csv_path: str, dry_run: bool, embed: bool) -> None:
    logger.info("Loading CSV: %s", csv_path)
    rows = load_csv(csv_path)
    if not rows:
        logger.error("No restaurants found in %s.", csv_path)
        sys.exit(1)

    if dry_run:
        logger.info("-- DRY RUN: parsed %d restaurants, no DB writes --", len(rows))
        for row in rows[:5]:
            logger.info("  %s (%s) madad=%.1f", row["name"] or row["name_he"], row["slug"], row["madad_number"])
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    inserted = skipped = 0
    batches = (len(rows) + BATCH_SIZE - 1) // BATCH_SIZE
    for i in range(0, len(rows), BATCH_SIZE):
        batch = rows[i : i + BATCH_SIZE]
        logger.info("Importing batch %d/%d (%d restaurants)...", i // BATCH_SIZE + 1, batches, len(batch))
        async with AsyncSessionLocal() as session:
            result = await insert_restaurants(session, batch)
        inserted += result["inserted"]
        skipped += result["skipped"]

    logger.info("Done. Inserted: %d, Skipped: %d, Total: %d", inserted, skipped, len(rows))

    if embed:
        from madad.services.embedding_job import generate_missing_embeddings

        result = await generate_missing_embeddings(AsyncSessionLocal)
        logger.info("Embeddings: %d of %d generated.", result["updated"], result["total"])


def main() -> None:
    parser = argparse.ArgumentParser(description="Import restaurants from CSV.")
    parser.add_argument("--csv", required=True, help="Path to the restaurants CSV")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    parser.add_argument("--embed", action="store_true", help="Generate missing embeddings afterwards")
    args = parser.parse_args()

    asyncio.run(run_ingest(args.csv, dry_run=args.dry_run, embed=args.embed))


if __name__ == "__main__":
    main()

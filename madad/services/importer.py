"""
Restaurant CSV import.

The CSV carries ten positional columns:
  name, nameHe, address, description, descriptionHe, type, typeHe,
  madad, date, url
Rows are inserted only when their slug is new, so re-running an import is
harmless.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from madad.models import Restaurant
from madad.utils.text import extract_video_id, slugify

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "name", "name_he", "address", "description", "description_he",
    "type", "type_he", "madad", "date", "url",
]

# Path segments routed before /restaurants/{slug}
RESERVED_SLUGS = frozenset({"featured", "types"})


def _clean(val: Any) -> str:
    if val is None or pd.isna(val):
        return ""
    return str(val).strip()


def _parse_madad(val: Any) -> float:
    """Parse the editorial score; 0 on blank or garbage."""
    try:
        return float(_clean(val))
    except ValueError:
        return 0.0


def parse_row(row: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    """Map one CSV row to Restaurant column values, or None if it has no name."""
    name = _clean(row.get("name"))
    name_he = _clean(row.get("name_he"))
    if not name and not name_he:
        return None

    url = _clean(row.get("url"))
    video_id = extract_video_id(url)
    slug = slugify(name) or slugify(name_he) or f"restaurant-{video_id}"
    if slug in RESERVED_SLUGS:
        slug = f"{slug}-restaurant"

    return {
        "name": name,
        "name_he": name_he,
        "address": _clean(row.get("address")),
        "description": _clean(row.get("description")),
        "description_he": _clean(row.get("description_he")),
        "type": _clean(row.get("type")),
        "type_he": _clean(row.get("type_he")),
        "madad_number": _parse_madad(row.get("madad")),
        "date": _clean(row.get("date")),
        "youtube_url": url,
        "video_id": video_id,
        "slug": slug,
    }


def load_csv(csv_path: str | Path) -> list[dict[str, Any]]:
    """Read and parse the restaurants CSV; rows without any name are dropped."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    if df.shape[1] < len(CSV_COLUMNS):
        raise ValueError(
            f"Expected at least {len(CSV_COLUMNS)} columns, found {df.shape[1]}"
        )
    df = df.iloc[:, : len(CSV_COLUMNS)]
    df.columns = CSV_COLUMNS

    parsed = [parse_row(row) for row in df.to_dict(orient="records")]
    rows = [r for r in parsed if r is not None]
    logger.info("Parsed %d restaurants from %d CSV rows.", len(rows), len(df))
    return rows


async def insert_restaurants(session: AsyncSession, rows: list[dict[str, Any]]) -> dict[str, int]:
    """Insert rows whose slug is not yet taken. Returns {inserted, skipped, total}."""
    result = await session.execute(select(Restaurant.slug))
    known: set[str] = set(result.scalars().all())

    inserted = skipped = 0
    for row in rows:
        if row["slug"] in known:
            skipped += 1
            continue
        session.add(Restaurant(**row))
        known.add(row["slug"])
        inserted += 1

    await session.commit()
    return {"inserted": inserted, "skipped": skipped, "total": len(rows)}

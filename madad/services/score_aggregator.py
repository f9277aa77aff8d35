"""
Score aggregator - keeps restaurants.user_score / user_review_count in sync
with the reviews table.

Every run re-reads the full review set for the restaurant and overwrites the
denormalised pair, so runs are idempotent and safe to retry. Concurrent runs
for the same restaurant race last-writer-wins; whichever finishes last wrote
a complete snapshot of committed reviews.

Scheduling:
  enqueue(rid, background)  - FastAPI BackgroundTasks when inside a request
  enqueue(rid)              - tracked asyncio task otherwise; drain() awaits them
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi import BackgroundTasks
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from madad.config import settings
from madad.models import Restaurant, Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreSummary:
    restaurant_id: int
    user_score: float
    user_review_count: int


def average_score(scores: Sequence[float]) -> float:
    """Mean of scores rounded half-up to one decimal; 0 when there are none."""
    if not scores:
        return 0.0
    # sum * 10 first: half-point scores keep the numerator exact
    return math.floor(sum(scores) * 10 / len(scores) + 0.5) / 10


class ScoreAggregator:
    """Recomputes a restaurant's review statistics from scratch."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> None:
        self._session_factory = session_factory
        self._max_attempts = max(1, max_attempts or settings.score_recalc_max_attempts)
        self._retry_delay = (
            settings.score_recalc_retry_delay if retry_delay is None else retry_delay
        )
        self._pending: set[asyncio.Task] = set()

    async def recalculate(self, restaurant_id: int) -> Optional[ScoreSummary]:
        """
        Read every review of the restaurant and patch its (user_score,
        user_review_count). Returns None when the restaurant no longer exists.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(Review.score).where(Review.restaurant_id == restaurant_id)
            )
            scores = [float(s) for s in result.scalars().all()]
            summary = ScoreSummary(
                restaurant_id=restaurant_id,
                user_score=average_score(scores),
                user_review_count=len(scores),
            )

            patched = await session.execute(
                update(Restaurant)
                .where(Restaurant.id == restaurant_id)
                .values(
                    user_score=summary.user_score,
                    user_review_count=summary.user_review_count,
                )
            )
            rowcount = patched.rowcount
            await session.commit()

        if rowcount == 0:
            logger.warning(
                "Score recalculation skipped: restaurant %s no longer exists",
                restaurant_id,
            )
            return None

        logger.debug(
            "Restaurant %s user_score=%.1f count=%d",
            restaurant_id,
            summary.user_score,
            summary.user_review_count,
        )
        return summary

    async def run(self, restaurant_id: int) -> Optional[ScoreSummary]:
        """
        Best-effort recalculation with retries on database errors.
        Never raises: the triggering review mutation has already committed.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await self.recalculate(restaurant_id)
            except SQLAlchemyError as exc:
                if attempt == self._max_attempts:
                    logger.error(
                        "Score recalculation for restaurant %s failed after %d attempts: %s",
                        restaurant_id,
                        attempt,
                        exc,
                    )
                    return None
                logger.warning(
                    "Score recalculation for restaurant %s failed (attempt %d/%d): %s",
                    restaurant_id,
                    attempt,
                    self._max_attempts,
                    exc,
                )
                await asyncio.sleep(self._retry_delay * attempt)
            except Exception as exc:
                # Driver/network failures outside SQLAlchemy are not retried
                logger.error(
                    "Score recalculation for restaurant %s aborted: %s",
                    restaurant_id,
                    exc,
                    exc_info=True,
                )
                return None
        return None

    def enqueue(
        self,
        restaurant_id: int,
        background: Optional[BackgroundTasks] = None,
    ) -> None:
        """Schedule run(restaurant_id) without waiting for it."""
        if background is not None:
            background.add_task(self.run, restaurant_id)
            return
        task = asyncio.create_task(self.run(restaurant_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every task started by enqueue() without a BackgroundTasks."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

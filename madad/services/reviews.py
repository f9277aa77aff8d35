"""
Review mutations - create / update / remove, each followed by a scheduled
score recalculation for the affected restaurant.

Validation and ownership are checked before any write. The one-review-per-
(user, restaurant) rule is enforced by a lookup before insert; the unique
constraint on the table backs it up for requests that race past the lookup.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from madad.config import settings
from madad.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from madad.models import Restaurant, Review
from madad.services.score_aggregator import ScoreAggregator

logger = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 10.0


def validate_review(score: float, text: str) -> str:
    """Check score range / granularity and text; return the trimmed text."""
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError("Score must be between 1 and 10")
    if (score * 2) != int(score * 2):
        raise ValidationError("Score must be in half-point steps")
    trimmed = text.strip()
    if not trimmed:
        raise ValidationError("A written review is required to submit a score")
    return trimmed


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise AuthenticationError("Not authenticated")
    return user_id


async def _get_owned_review(db: AsyncSession, review_id: int, user_id: str) -> Review:
    review = await db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    if review.user_id != user_id:
        raise AuthorizationError("Not authorized to modify this review")
    return review


async def find_user_review(
    db: AsyncSession, user_id: str, restaurant_id: int
) -> Optional[Review]:
    result = await db.execute(
        select(Review).where(
            Review.user_id == user_id,
            Review.restaurant_id == restaurant_id,
        )
    )
    return result.scalars().first()


async def list_reviews(db: AsyncSession, restaurant_id: int) -> list[Review]:
    """Newest reviews first, capped at REVIEW_PAGE_SIZE."""
    result = await db.execute(
        select(Review)
        .where(Review.restaurant_id == restaurant_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(settings.review_page_size)
    )
    return list(result.scalars().all())


async def create_review(
    db: AsyncSession,
    aggregator: ScoreAggregator,
    *,
    restaurant_id: int,
    user_id: Optional[str],
    user_name: str,
    score: float,
    text: str,
    background: Optional[BackgroundTasks] = None,
) -> Review:
    """Insert a user's review of a restaurant and schedule score recalculation."""
    user_id = _require_user(user_id)
    text = validate_review(score, text)

    if await db.get(Restaurant, restaurant_id) is None:
        raise NotFoundError("Restaurant not found")

    if await find_user_review(db, user_id, restaurant_id) is not None:
        logger.info("Duplicate review rejected (user=%s restaurant=%s)", user_id, restaurant_id)
        raise ConflictError("You have already reviewed this restaurant")

    review = Review(
        restaurant_id=restaurant_id,
        user_id=user_id,
        user_name=user_name.strip(),
        score=score,
        text=text,
        created_at=datetime.now(timezone.utc),
    )
    db.add(review)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Concurrent duplicate review rejected (user=%s restaurant=%s)", user_id, restaurant_id)
        raise ConflictError("You have already reviewed this restaurant") from exc

    aggregator.enqueue(restaurant_id, background)
    return review


async def update_review(
    db: AsyncSession,
    aggregator: ScoreAggregator,
    *,
    review_id: int,
    user_id: Optional[str],
    score: float,
    text: str,
    background: Optional[BackgroundTasks] = None,
) -> Review:
    """Owner-only edit of score and text, then score recalculation."""
    user_id = _require_user(user_id)
    review = await _get_owned_review(db, review_id, user_id)
    text = validate_review(score, text)

    review.score = score
    review.text = text
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    aggregator.enqueue(review.restaurant_id, background)
    return review


async def remove_review(
    db: AsyncSession,
    aggregator: ScoreAggregator,
    *,
    review_id: int,
    user_id: Optional[str],
    background: Optional[BackgroundTasks] = None,
) -> None:
    """Owner-only delete, then recalculation for the formerly-owning restaurant."""
    user_id = _require_user(user_id)
    review = await _get_owned_review(db, review_id, user_id)
    restaurant_id = review.restaurant_id

    await db.delete(review)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    aggregator.enqueue(restaurant_id, background)

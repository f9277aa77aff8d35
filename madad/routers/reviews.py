"""
Review endpoints - caller identity from the X-User-ID header.

  POST   /reviews              - create (one per user per restaurant)
  PATCH  /reviews/{review_id}  - owner-only edit
  DELETE /reviews/{review_id}  - owner-only delete

Each successful mutation schedules a background score recalculation.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from madad.database import get_db
from madad.routers.deps import get_score_aggregator, require_user_id
from madad.schemas.review import ReviewCreate, ReviewRead, ReviewUpdate
from madad.services import reviews as review_service
from madad.services.score_aggregator import ScoreAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    background: BackgroundTasks,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
    aggregator: ScoreAggregator = Depends(get_score_aggregator),
) -> ReviewRead:
    review = await review_service.create_review(
        db,
        aggregator,
        restaurant_id=body.restaurant_id,
        user_id=user_id,
        user_name=body.user_name,
        score=body.score,
        text=body.text,
        background=background,
    )
    return ReviewRead.model_validate(review)


@router.patch("/{review_id}", response_model=ReviewRead)
async def update_review(
    review_id: int,
    body: ReviewUpdate,
    background: BackgroundTasks,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
    aggregator: ScoreAggregator = Depends(get_score_aggregator),
) -> ReviewRead:
    review = await review_service.update_review(
        db,
        aggregator,
        review_id=review_id,
        user_id=user_id,
        score=body.score,
        text=body.text,
        background=background,
    )
    return ReviewRead.model_validate(review)


@router.delete("/{review_id}")
async def remove_review(
    review_id: int,
    background: BackgroundTasks,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
    aggregator: ScoreAggregator = Depends(get_score_aggregator),
) -> Response:
    await review_service.remove_review(
        db,
        aggregator,
        review_id=review_id,
        user_id=user_id,
        background=background,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

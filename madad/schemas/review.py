"""Pydantic schemas for the review endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    """
    Body for POST /reviews.

    Score and text are checked by the review service rather than here, so an
    out-of-range score or blank text surfaces as VALIDATION_ERROR.
    """

    restaurant_id: int
    user_name: str = Field("", max_length=200)
    score: float
    text: str = Field(..., max_length=5000)


class ReviewUpdate(BaseModel):
    """Body for PATCH /reviews/{review_id}."""

    score: float
    text: str = Field(..., max_length=5000)


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    user_id: str
    user_name: str
    score: float
    text: str
    created_at: datetime

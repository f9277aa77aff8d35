"""Pydantic schemas for restaurant listings, detail pages, and search results."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RestaurantCard(BaseModel):
    """
    Lightweight projection used for lists and search results.
    Omits the long-form descriptions (and never carries the embedding).
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    name_he: str
    address: str
    type: str
    type_he: str
    madad_number: float
    date: str
    youtube_url: str
    video_id: str
    user_score: Optional[float] = None
    user_review_count: Optional[int] = None


class RestaurantDetail(RestaurantCard):
    """Full restaurant record for the detail page."""

    description: str
    description_he: str


class SemanticSearchResult(RestaurantDetail):
    """A hydrated vector-search hit; similarity is cosine similarity (higher is closer)."""

    similarity: float


class RestaurantTypes(BaseModel):
    """Distinct cuisine types in each language, sorted."""

    en: list[str] = Field(default_factory=list)
    he: list[str] = Field(default_factory=list)

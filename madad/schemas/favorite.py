"""Pydantic schemas for the favourites endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class FavoriteToggleResponse(BaseModel):
    """Response for POST /favorites/{restaurant_id}/toggle."""

    restaurant_id: int
    favorited: bool

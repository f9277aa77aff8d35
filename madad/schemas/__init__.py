"""Pydantic schemas package."""

from madad.schemas.restaurant import (
    RestaurantCard,
    RestaurantDetail,
    RestaurantTypes,
    SemanticSearchResult,
)
from madad.schemas.review import ReviewCreate, ReviewRead, ReviewUpdate
from madad.schemas.favorite import FavoriteToggleResponse

__all__ = [
    "RestaurantCard", "RestaurantDetail", "RestaurantTypes", "SemanticSearchResult",
    "ReviewCreate", "ReviewRead", "ReviewUpdate",
    "FavoriteToggleResponse",
]

"""SQLAlchemy ORM models package."""

from madad.database import Base
from madad.models.restaurant import Restaurant
from madad.models.review import Review
from madad.models.favorite import Favorite

__all__ = ["Base", "Restaurant", "Review", "Favorite"]

"""Review ORM model - one review per (user, restaurant)."""

from sqlalchemy import (
    Column, Float, ForeignKey, Index, Integer, String, Text,
    TIMESTAMP, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from madad.database import Base


class Review(Base):
    """
    A user's scored review of a restaurant.
    Score is 1–10 in half-point steps; text is never empty.
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(128), nullable=False)
    user_name = Column(Text, nullable=False, server_default="")

    score = Column(Float, nullable=False)
    text = Column(Text, nullable=False)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    restaurant = relationship("Restaurant", back_populates="reviews")

    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_reviews_user_restaurant"),
        Index("ix_reviews_restaurant_id", "restaurant_id"),
        Index("ix_reviews_restaurant_created_at", "restaurant_id", "created_at"),
    )

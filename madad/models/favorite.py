"""Favorite ORM model - set membership of a restaurant in a user's favourites."""

from sqlalchemy import (
    Column, ForeignKey, Index, Integer, String, TIMESTAMP, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from madad.database import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    restaurant = relationship("Restaurant", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_favorites_user_restaurant"),
        Index("ix_favorites_user_id", "user_id"),
    )

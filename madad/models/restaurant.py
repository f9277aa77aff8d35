"""Restaurant ORM model with bilingual metadata."""

from sqlalchemy import Column, Float, Index, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.orm import relationship

from madad.database import Base


class Restaurant(Base):
    """
    A restaurant imported from the curated restaurants CSV.

    user_score / user_review_count are denormalised from the reviews table and
    are written only by the ScoreAggregator. The semantic-search embedding is
    stored in ChromaDB keyed by str(id), not in this table.
    """

    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(255), nullable=False, unique=True)

    name = Column(Text, nullable=False, server_default="")
    name_he = Column(Text, nullable=False, server_default="")
    address = Column(Text, nullable=False, server_default="")
    description = Column(Text, nullable=False, server_default="")
    description_he = Column(Text, nullable=False, server_default="")
    type = Column(Text, nullable=False, server_default="")
    type_he = Column(Text, nullable=False, server_default="")

    # Editorial score, 0–10, set at import time and never recomputed
    madad_number = Column(Float, nullable=False, server_default="0")
    date = Column(String(10), nullable=False, server_default="")   # YYYY-MM-DD
    youtube_url = Column(Text, nullable=False, server_default="")
    video_id = Column(String(32), nullable=False, server_default="")

    # Denormalised review stats (ScoreAggregator only)
    user_score = Column(Float, nullable=True)
    user_review_count = Column(Integer, nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    reviews = relationship(
        "Review", back_populates="restaurant", cascade="all, delete-orphan"
    )
    favorites = relationship(
        "Favorite", back_populates="restaurant", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_restaurants_type", "type"),
        Index("ix_restaurants_madad_number", "madad_number"),
        Index("ix_restaurants_date", "date"),
        Index("ix_restaurants_user_score", "user_score"),
    )

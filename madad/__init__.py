"""Madad - bilingual restaurant catalogue with search, reviews, and favourites."""

__version__ = "1.0.0"

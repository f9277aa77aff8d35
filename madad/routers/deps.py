"""Shared router dependencies: caller identity and the score aggregator."""

from __future__ import annotations

from typing import Optional

from fastapi import Header

from madad.database import AsyncSessionLocal
from madad.errors import AuthenticationError
from madad.services.score_aggregator import ScoreAggregator

# Module-level singleton - background recalculations share one tracker
_score_aggregator = ScoreAggregator(AsyncSessionLocal)


def get_score_aggregator() -> ScoreAggregator:
    return _score_aggregator


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> Optional[str]:
    """
    The caller's user id from the X-User-ID header, or None when absent.
    The header is trusted - identity verification happens upstream.
    """
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


async def require_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> str:
    """Like get_current_user_id, but rejects anonymous callers."""
    user_id = await get_current_user_id(x_user_id)
    if user_id is None:
        raise AuthenticationError("Not authenticated")
    return user_id

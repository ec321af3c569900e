"""Matching router - like/unlike and relationship listings"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import config
from ...auth import get_current_party
from ...database import get_db
from ...models import Party
from ...rate_limiter import create_party_rate_limiter
from ..profiles.schemas import ProfileResponse
from ..profiles.service import to_profile
from .schemas import LikeResponse, UnlikeResponse
from .service import MatchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dating", tags=["Matching"])

like_rate_limit = create_party_rate_limiter(
    limit=config.LIKE_RATE_LIMIT, window_seconds=3600, key_prefix="like"
)


def get_match_service(db: Session = Depends(get_db)) -> MatchService:
    """Dependency injection for MatchService"""
    return MatchService(db)


# ============================================================================
# LISTINGS (must be registered before /users/{target_id})
# ============================================================================


@router.get("/users/matches", response_model=list[ProfileResponse])
async def list_matches(
    party: Party = Depends(get_current_party),
    service: MatchService = Depends(get_match_service),
):
    """Get your own matches"""
    return [to_profile(p) for p in service.list_matches(party)]


@router.get("/users/liked-me", response_model=list[ProfileResponse])
async def list_liked_me(
    party: Party = Depends(get_current_party),
    service: MatchService = Depends(get_match_service),
):
    """Get everyone who liked you, so you can like them back"""
    return [to_profile(p) for p in service.list_liked_me(party)]


# ============================================================================
# LIKE / UNLIKE
# ============================================================================


@router.post("/users/{target_id}/like", response_model=LikeResponse)
async def like_user(
    target_id: str,
    party: Party = Depends(get_current_party),
    service: MatchService = Depends(get_match_service),
    _: None = Depends(like_rate_limit),
):
    """Like a user. If they already liked you, it's a match."""
    matched = service.like(party, target_id)
    if matched:
        return LikeResponse(message="It's a match! 💖", matched=True)
    return LikeResponse(message="Liked successfully", matched=False)


@router.delete("/users/{target_id}/like", response_model=UnlikeResponse)
async def unlike_user(
    target_id: str,
    party: Party = Depends(get_current_party),
    service: MatchService = Depends(get_match_service),
):
    """Withdraw a like. A match with this user is removed as well."""
    match_removed = service.unlike(party, target_id)
    return UnlikeResponse(message="Like removed", matchRemoved=match_removed)

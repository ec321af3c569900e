"""Profile router - public profile reads"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_party
from ...database import get_db
from ...models import Party
from .schemas import ProfileDetailResponse, ProfileResponse
from .service import ProfileDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dating", tags=["Profiles"])


def get_profile_directory(db: Session = Depends(get_db)) -> ProfileDirectory:
    """Dependency injection for ProfileDirectory"""
    return ProfileDirectory(db)


@router.get("/users", response_model=list[ProfileResponse])
async def list_profiles(
    party: Party = Depends(get_current_party),
    directory: ProfileDirectory = Depends(get_profile_directory),
):
    """List every active profile except your own"""
    return directory.list_profiles(party)


# NOTE: /users/matches and /users/liked-me live in the matching router, which
# is included before this one so they are not captured by /users/{target_id}
@router.get("/users/{target_id}", response_model=ProfileDetailResponse)
async def get_profile(
    target_id: str,
    party: Party = Depends(get_current_party),
    directory: ProfileDirectory = Depends(get_profile_directory),
):
    """View a profile along with whether you liked them, they liked you, or you matched"""
    return directory.get_profile(party, target_id)

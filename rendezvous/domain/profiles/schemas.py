"""Profile domain schemas - public views of a party"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PartyDisplay(BaseModel):
    """Minimal display fields inlined into notifications and appointments"""

    id: str
    name: str
    avatar: Optional[str] = None


class ProfileResponse(BaseModel):
    """Public profile. Never carries the raw like/match sets."""

    id: str
    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    createdAt: Optional[datetime] = None


class ProfileDetailResponse(ProfileResponse):
    """Public profile plus relationship flags relative to the viewer"""

    isLikedByMe: bool
    hasLikedMe: bool
    isMatch: bool

"""Profile service - read side of the profile collaborator"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import InvalidReference, InvalidTarget
from ...models import Party
from ...shared.validators import validate_uuid
from ..matching.repository import MatchRepository
from .schemas import PartyDisplay, ProfileDetailResponse, ProfileResponse

logger = logging.getLogger(__name__)


def to_display(party: Optional[Party]) -> Optional[PartyDisplay]:
    if party is None:
        return None
    return PartyDisplay(id=party.id, name=party.name, avatar=party.avatar)


def to_profile(party: Party) -> ProfileResponse:
    return ProfileResponse(
        id=party.id,
        name=party.name,
        age=party.age,
        gender=party.gender,
        bio=party.bio,
        avatar=party.avatar,
        createdAt=party.created_at,
    )


class ProfileDirectory:
    """Existence lookups and public views of parties"""

    def __init__(self, db: Session):
        self.db = db
        self.relations = MatchRepository()

    def get_active(self, party_id: str) -> Optional[Party]:
        return (
            self.db.query(Party).filter(Party.id == party_id, Party.is_active.is_(True)).first()
        )

    def require_active(self, party_id: str) -> Party:
        if not validate_uuid(party_id):
            raise InvalidReference("Invalid user id")
        party = self.get_active(party_id)
        if not party:
            raise InvalidTarget()
        return party

    def list_profiles(self, viewer: Party) -> list[ProfileResponse]:
        """All active parties except the viewer"""
        parties = (
            self.db.query(Party)
            .filter(Party.id != viewer.id, Party.is_active.is_(True))
            .order_by(Party.created_at.desc())
            .all()
        )
        return [to_profile(p) for p in parties]

    def get_profile(self, viewer: Party, target_id: str) -> ProfileDetailResponse:
        """
        Public profile of ``target_id`` with flags derived from the viewer's
        own relations. The target's relation sets are never read.
        """
        target = self.require_active(target_id)
        return ProfileDetailResponse(
            **to_profile(target).model_dump(),
            isLikedByMe=self.relations.has_like(self.db, viewer.id, target.id),
            hasLikedMe=self.relations.has_like(self.db, target.id, viewer.id),
            isMatch=self.relations.has_match(self.db, viewer.id, target.id),
        )

"""Notification domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from ..profiles.schemas import PartyDisplay

NotificationKind = Literal["like", "match", "date_scheduled"]


class NotificationResponse(BaseModel):
    """A notification with the sender's display fields inlined"""

    id: int
    kind: NotificationKind
    receiverId: str
    sender: Optional[PartyDisplay] = None
    read: bool
    createdAt: Optional[datetime] = None

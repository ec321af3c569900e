"""Notification router - notification inbox"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_party
from ...database import get_db
from ...models import Party
from .schemas import NotificationResponse
from .service import NotificationDispatcher, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dating", tags=["Notifications"])


def get_dispatcher(db: Session = Depends(get_db)) -> NotificationDispatcher:
    """Dependency injection for NotificationDispatcher"""
    return NotificationDispatcher(db)


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    party: Party = Depends(get_current_party),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Get your most recent notifications, newest first"""
    return [to_response(n) for n in dispatcher.list_notifications(party.id, limit)]

"""
Notification Dispatcher

Persists a notification first, then pushes it to the receiver's live channel
if one is registered. The stored record is what guarantees the receiver
eventually sees the event; the push is best effort, at most once, and never
fails the operation that triggered it.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ... import config
from ...models import Notification
from ..profiles.service import to_display
from ..realtime.registry import SessionRegistry, session_registry
from .repository import NotificationRepository
from .schemas import NotificationResponse

logger = logging.getLogger(__name__)

PUSH_EVENT = "receive_notification"


def to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        kind=notification.kind,
        receiverId=notification.receiver_id,
        sender=to_display(notification.sender),
        read=bool(notification.is_read),
        createdAt=notification.created_at,
    )


class NotificationDispatcher:
    """
    Service layer for notification fan-out.

    State transitions (like, match, date confirmation) call ``record`` inside
    their own transaction and ``deliver`` after it commits. ``notify`` is the
    standalone form of the same two steps, for a notification that is not
    tied to any other write.
    """

    def __init__(self, db: Session, registry: Optional[SessionRegistry] = None):
        self.db = db
        self.registry = registry if registry is not None else session_registry
        self.repo = NotificationRepository()

    def record(self, sender_id: str, receiver_id: str, kind: str) -> Notification:
        """
        Stage a notification inside the caller's transaction.
        Use this when the notification must commit atomically with a state
        change, then call ``deliver`` once the transaction has committed.
        """
        return self.repo.add(self.db, sender_id, receiver_id, kind)

    def deliver(self, notification: Notification) -> bool:
        """Push a committed notification if the receiver is online. Returns whether a push was issued."""
        channel = self.registry.lookup(notification.receiver_id)
        if channel is None:
            logger.debug(
                f"ℹ️ Party {notification.receiver_id} offline, {notification.kind} notification kept for later"
            )
            return False

        try:
            payload = to_response(notification).model_dump(mode="json")
            channel.push(PUSH_EVENT, payload)
        except Exception as e:
            logger.warning(
                f"⚠️ Failed to push {notification.kind} notification to {notification.receiver_id}: {e}"
            )
            return False

        logger.debug(f"📨 Pushed {notification.kind} notification to {notification.receiver_id}")
        return True

    def notify(self, receiver_id: str, kind: str, sender_id: str) -> Notification:
        """Persist and commit a notification, then push it"""
        notification = self.record(sender_id, receiver_id, kind)
        self.db.commit()
        self.db.refresh(notification)
        self.deliver(notification)
        return notification

    def list_notifications(self, receiver_id: str, limit: Optional[int] = None) -> list[Notification]:
        return self.repo.list_for_receiver(
            self.db, receiver_id, limit or config.NOTIFICATION_LIST_LIMIT
        )

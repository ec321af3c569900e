"""Notification repository - Database operations for notifications"""

from sqlalchemy.orm import Session, joinedload

from ...models import Notification


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def add(db: Session, sender_id: str, receiver_id: str, kind: str) -> Notification:
        """Stage a notification in the current transaction (flushed, not committed)"""
        notification = Notification(sender_id=sender_id, receiver_id=receiver_id, kind=kind)
        db.add(notification)
        db.flush()
        return notification

    @staticmethod
    def list_for_receiver(db: Session, receiver_id: str, limit: int) -> list[Notification]:
        """Newest first"""
        return (
            db.query(Notification)
            .options(joinedload(Notification.sender))
            .filter(Notification.receiver_id == receiver_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

"""
Match State Engine - owns like/unlike/match transitions.

A match is a mutual like, detected when the second like arrives. Every
transition runs in one transaction with both party rows locked, so the like,
the two match directions and the notifications it creates commit together
or not at all.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import AlreadyLiked, InvalidReference, NotLiked, SelfReference
from ...models import Notification, Party
from ...shared.transactions import run_in_transaction
from ...shared.validators import validate_uuid
from ..notifications.service import NotificationDispatcher
from ..profiles.service import ProfileDirectory
from .locks import PairLocks, pair_locks
from .repository import MatchRepository

logger = logging.getLogger(__name__)


class MatchService:
    """Service layer for like/match business logic"""

    def __init__(
        self,
        db: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        locks: Optional[PairLocks] = None,
    ):
        self.db = db
        self.repo = MatchRepository()
        self.directory = ProfileDirectory(db)
        self.dispatcher = dispatcher or NotificationDispatcher(db)
        self.locks = locks or pair_locks

    # ------------------------------------------------------------------
    # LIKE
    # ------------------------------------------------------------------

    def like(self, actor: Party, target_id: str) -> bool:
        """Like ``target_id``. Returns whether this like completed a match."""
        if actor.id == target_id:
            raise SelfReference("You cannot like yourself")
        target = self.directory.require_active(target_id)

        def apply() -> tuple[bool, list[Notification]]:
            self.repo.lock_parties(self.db, actor.id, target.id)
            if self.repo.has_like(self.db, actor.id, target.id):
                raise AlreadyLiked()

            self.repo.add_like(self.db, actor.id, target.id)

            # The target liked us earlier: this like completes the match
            if self.repo.has_like(self.db, target.id, actor.id):
                self.repo.add_match(self.db, actor.id, target.id)
                return True, [
                    self.dispatcher.record(target.id, actor.id, "match"),
                    self.dispatcher.record(actor.id, target.id, "match"),
                ]

            return False, [self.dispatcher.record(actor.id, target.id, "like")]

        with self.locks.hold(actor.id, target.id):
            matched, notifications = run_in_transaction(
                self.db, apply, f"like {actor.id} -> {target.id}"
            )

        if matched:
            logger.info(f"💖 Match between {actor.id} and {target.id}")
        else:
            logger.info(f"👍 {actor.id} liked {target.id}")

        for notification in notifications:
            self.dispatcher.deliver(notification)
        return matched

    # ------------------------------------------------------------------
    # UNLIKE
    # ------------------------------------------------------------------

    def unlike(self, actor: Party, target_id: str) -> bool:
        """
        Withdraw a like. Returns whether a match was removed.
        No notification is sent, the counterpart is not told about the lost match.
        """
        if actor.id == target_id:
            raise SelfReference("You cannot unlike yourself")
        if not validate_uuid(target_id):
            raise InvalidReference("Invalid user id")

        def apply() -> bool:
            self.repo.lock_parties(self.db, actor.id, target_id)
            if not self.repo.has_like(self.db, actor.id, target_id):
                raise NotLiked()

            self.repo.remove_like(self.db, actor.id, target_id)
            return self.repo.remove_match(self.db, actor.id, target_id)

        with self.locks.hold(actor.id, target_id):
            match_removed = run_in_transaction(
                self.db, apply, f"unlike {actor.id} -> {target_id}"
            )

        logger.info(
            f"👋 {actor.id} unliked {target_id}" + (" (match removed)" if match_removed else "")
        )
        return match_removed

    # ------------------------------------------------------------------
    # READS
    # ------------------------------------------------------------------

    def list_liked_me(self, party: Party) -> list[Party]:
        return self.repo.list_liked_by(self.db, party.id)

    def list_matches(self, party: Party) -> list[Party]:
        return self.repo.list_matches(self.db, party.id)

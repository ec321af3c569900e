"""Match repository - Database operations for likes and matches"""

from sqlalchemy.orm import Session

from ...models import Like, Match, Party


class MatchRepository:
    """Repository for like/match database operations"""

    @staticmethod
    def lock_parties(db: Session, *party_ids: str) -> list[Party]:
        """Row-lock the given parties in a stable order to avoid deadlocks"""
        return (
            db.query(Party)
            .filter(Party.id.in_(sorted(set(party_ids))))
            .order_by(Party.id)
            .with_for_update()
            .all()
        )

    @staticmethod
    def has_like(db: Session, liker_id: str, liked_id: str) -> bool:
        return (
            db.query(Like.id).filter(Like.liker_id == liker_id, Like.liked_id == liked_id).first()
            is not None
        )

    @staticmethod
    def add_like(db: Session, liker_id: str, liked_id: str) -> Like:
        like = Like(liker_id=liker_id, liked_id=liked_id)
        db.add(like)
        db.flush()
        return like

    @staticmethod
    def remove_like(db: Session, liker_id: str, liked_id: str) -> int:
        return (
            db.query(Like)
            .filter(Like.liker_id == liker_id, Like.liked_id == liked_id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def has_match(db: Session, party_id: str, counterpart_id: str) -> bool:
        return (
            db.query(Match.id)
            .filter(Match.party_id == party_id, Match.counterpart_id == counterpart_id)
            .first()
            is not None
        )

    @classmethod
    def add_match(cls, db: Session, a: str, b: str) -> None:
        """Write both directions of a match. Existing directions are left alone."""
        for party_id, counterpart_id in ((a, b), (b, a)):
            if not cls.has_match(db, party_id, counterpart_id):
                db.add(Match(party_id=party_id, counterpart_id=counterpart_id))
        db.flush()

    @staticmethod
    def remove_match(db: Session, a: str, b: str) -> bool:
        """Delete both directions of a match. Returns whether anything was removed."""
        removed = (
            db.query(Match)
            .filter(
                ((Match.party_id == a) & (Match.counterpart_id == b))
                | ((Match.party_id == b) & (Match.counterpart_id == a))
            )
            .delete(synchronize_session=False)
        )
        return removed > 0

    @staticmethod
    def list_liked_by(db: Session, party_id: str) -> list[Party]:
        """Active parties who liked ``party_id``, most recent first"""
        return (
            db.query(Party)
            .join(Like, Like.liker_id == Party.id)
            .filter(Like.liked_id == party_id, Party.is_active.is_(True))
            .order_by(Like.created_at.desc(), Like.id.desc())
            .all()
        )

    @staticmethod
    def list_matches(db: Session, party_id: str) -> list[Party]:
        """Active parties matched with ``party_id``, most recent first"""
        return (
            db.query(Party)
            .join(Match, Match.counterpart_id == Party.id)
            .filter(Match.party_id == party_id, Party.is_active.is_(True))
            .order_by(Match.created_at.desc(), Match.id.desc())
            .all()
        )

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Party(Base):
    """A registered person. Created by the profile service, never deleted here."""

    __tablename__ = "parties"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(20), nullable=True)
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Like(Base):
    """
    One directed like. A row backs both the liker's ``likes`` set and the
    liked party's ``likedBy`` set.
    """

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("liker_id", "liked_id", name="uq_likes_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    liker_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    liked_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Match(Base):
    """One direction of a mutual like. Always written in pairs."""

    __tablename__ = "matches"
    __table_args__ = (UniqueConstraint("party_id", "counterpart_id", name="uq_matches_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    party_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    counterpart_id = Column(String(36), ForeignKey("parties.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    counterpart = relationship("Party", foreign_keys=[counterpart_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String(36), ForeignKey("parties.id"), nullable=False)
    receiver_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)  # like, match, date_scheduled
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    sender = relationship("Party", foreign_keys=[sender_id])


class Availability(Base):
    """A submitter's free time windows for meeting one specific counterpart"""

    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint("submitter_id", "counterpart_id", name="uq_availability_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    submitter_id = Column(String(36), ForeignKey("parties.id"), nullable=False)
    counterpart_id = Column(String(36), ForeignKey("parties.id"), nullable=False)
    slots = Column(JSON, default=list, nullable=False)  # [{"date", "start", "end"}]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_date_status", "date", "status"),)

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    # Unordered pair; lookups match either order
    party_a_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    party_b_id = Column(String(36), ForeignKey("parties.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    # Status: scheduled, canceled
    status = Column(String(20), default="scheduled", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    party_a = relationship("Party", foreign_keys=[party_a_id])
    party_b = relationship("Party", foreign_keys=[party_b_id])

    def involves(self, party_id: str) -> bool:
        return party_id in (self.party_a_id, self.party_b_id)

    def counterpart_of(self, party_id: str):
        return self.party_b if self.party_a_id == party_id else self.party_a

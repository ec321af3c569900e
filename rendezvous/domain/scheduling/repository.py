"""Scheduling repository - Database operations for availabilities and appointments"""

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Availability


def _between(a: str, b: str):
    """Appointment filter matching the unordered pair (a, b)"""
    return or_(
        and_(Appointment.party_a_id == a, Appointment.party_b_id == b),
        and_(Appointment.party_a_id == b, Appointment.party_b_id == a),
    )


class AvailabilityRepository:
    """Repository for availability database operations"""

    @staticmethod
    def get(db: Session, submitter_id: str, counterpart_id: str) -> Optional[Availability]:
        return (
            db.query(Availability)
            .filter(
                Availability.submitter_id == submitter_id,
                Availability.counterpart_id == counterpart_id,
            )
            .first()
        )

    @classmethod
    def upsert(
        cls, db: Session, submitter_id: str, counterpart_id: str, slots: list[dict]
    ) -> Availability:
        """Replace the submitter's slots for this counterpart (flushed, not committed)"""
        availability = cls.get(db, submitter_id, counterpart_id)
        if availability:
            availability.slots = slots
        else:
            availability = Availability(
                submitter_id=submitter_id, counterpart_id=counterpart_id, slots=slots
            )
            db.add(availability)
        db.flush()
        return availability

    @staticmethod
    def delete_pair(db: Session, a: str, b: str) -> int:
        """Delete both directions of availability between a and b"""
        return (
            db.query(Availability)
            .filter(
                or_(
                    and_(Availability.submitter_id == a, Availability.counterpart_id == b),
                    and_(Availability.submitter_id == b, Availability.counterpart_id == a),
                )
            )
            .delete(synchronize_session=False)
        )


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def create(
        db: Session, party_a_id: str, party_b_id: str, date: str, start_time: str, end_time: str
    ) -> Appointment:
        appointment = Appointment(
            party_a_id=party_a_id,
            party_b_id=party_b_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            status="scheduled",
        )
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def find_scheduled_between(db: Session, a: str, b: str) -> Optional[Appointment]:
        """Earliest scheduled appointment between the pair, in either order"""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.party_a), joinedload(Appointment.party_b))
            .filter(_between(a, b), Appointment.status == "scheduled")
            .order_by(Appointment.date, Appointment.start_time)
            .first()
        )

    @staticmethod
    def find_exact(
        db: Session, a: str, b: str, date: str, start_time: str, end_time: str
    ) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                _between(a, b),
                Appointment.status == "scheduled",
                Appointment.date == date,
                Appointment.start_time == start_time,
                Appointment.end_time == end_time,
            )
            .first()
        )

    @staticmethod
    def scheduled_on_date(db: Session, date: str, party_ids: list[str]) -> list[Appointment]:
        """Scheduled appointments on ``date`` involving any of ``party_ids``"""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.party_a), joinedload(Appointment.party_b))
            .filter(
                Appointment.date == date,
                Appointment.status == "scheduled",
                or_(Appointment.party_a_id.in_(party_ids), Appointment.party_b_id.in_(party_ids)),
            )
            .order_by(Appointment.start_time)
            .all()
        )

    @staticmethod
    def list_for_party(db: Session, party_id: str) -> list[Appointment]:
        """Scheduled appointments of a party, soonest first"""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.party_a), joinedload(Appointment.party_b))
            .filter(
                or_(Appointment.party_a_id == party_id, Appointment.party_b_id == party_id),
                Appointment.status == "scheduled",
            )
            .order_by(Appointment.date, Appointment.start_time)
            .all()
        )

"""
Conflict Detector

Checks a candidate window against already confirmed appointments of both
parties. Warnings are advisory and never block confirmation.

The caller (party A) is told who their own conflicting date is with. For the
counterpart (party B) only a generic warning is produced, so the caller never
learns who B's other dates are with.
"""

import logging

from sqlalchemy.orm import Session

from ...shared.validators import format_hhmm
from .repository import AppointmentRepository
from .timeslots import TimeSlot

logger = logging.getLogger(__name__)

COUNTERPART_CONFLICT_WARNING = "Your match already has another date during this time."


class ConflictDetector:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def find_conflicts(self, party_a: str, party_b: str, candidate: TimeSlot) -> list[str]:
        """Human-readable warnings for appointments colliding with ``candidate``"""
        appointments = self.repo.scheduled_on_date(
            self.db, candidate.date.isoformat(), [party_a, party_b]
        )

        warnings = []
        for appointment in appointments:
            existing = TimeSlot.from_strings(
                appointment.date, appointment.start_time, appointment.end_time
            )
            if not existing.overlaps(candidate):
                continue

            if appointment.involves(party_a):
                other = appointment.counterpart_of(party_a)
                warnings.append(
                    f"You already have a date with {other.name} from "
                    f"{format_hhmm(existing.start)} to {format_hhmm(existing.end)} "
                    f"on {appointment.date}."
                )
            if appointment.involves(party_b):
                warnings.append(COUNTERPART_CONFLICT_WARNING)

        if warnings:
            logger.info(
                f"⚠️ {len(warnings)} scheduling conflict(s) for {party_a}/{party_b} at {candidate}"
            )
        return warnings

"""
Appointment Scheduler

Per ordered (submitter, counterpart) pair the flow is:

    no_submission -> awaiting_counterpart -> matched_pending_confirmation -> confirmed

submitAvailability stores the submitter's slots and, once both sides have
submitted, proposes the first common window together with conflict warnings.
Nothing is booked until one of the parties confirms that window.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import (
    DuplicateConfirmation,
    InvalidReference,
    NotMatched,
    SelfReference,
)
from ...models import Appointment, Notification, Party
from ...shared.transactions import run_in_transaction
from ...shared.validators import format_hhmm, validate_uuid
from ..matching.locks import PairLocks, pair_locks
from ..matching.repository import MatchRepository
from ..notifications.service import NotificationDispatcher
from ..profiles.service import ProfileDirectory, to_display
from .conflicts import ConflictDetector
from .intersection import intersect
from .repository import AppointmentRepository, AvailabilityRepository
from .schemas import (
    AppointmentResponse,
    ScheduleStatusResponse,
    SubmitAvailabilityResponse,
    TimeSlotSchema,
)
from .timeslots import TimeSlot

logger = logging.getLogger(__name__)

AWAITING_MESSAGE = "Availability saved. Waiting for your match to pick their times."
NO_COMMON_SLOT_MESSAGE = "No common time found yet. Please choose other times."
MATCHED_MESSAGE = "Found a time that works for both of you!"


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.public_id,
        partyA=to_display(appointment.party_a),
        partyB=to_display(appointment.party_b),
        date=appointment.date,
        start=appointment.start_time,
        end=appointment.end_time,
        status=appointment.status,
        createdAt=appointment.created_at,
    )


class AppointmentScheduler:
    """Service layer for availability and appointment business logic"""

    def __init__(
        self,
        db: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        min_overlap_minutes: Optional[int] = None,
        locks: Optional[PairLocks] = None,
    ):
        self.db = db
        self.availability = AvailabilityRepository()
        self.appointments = AppointmentRepository()
        self.relations = MatchRepository()
        self.directory = ProfileDirectory(db)
        self.conflicts = ConflictDetector(db)
        self.dispatcher = dispatcher or NotificationDispatcher(db)
        self.min_overlap_minutes = min_overlap_minutes
        self.locks = locks or pair_locks

    def _require_match(self, party: Party, counterpart_id: str) -> Party:
        if party.id == counterpart_id:
            raise SelfReference("You cannot schedule a date with yourself")
        counterpart = self.directory.require_active(counterpart_id)
        if not self.relations.has_match(self.db, party.id, counterpart.id):
            raise NotMatched()
        return counterpart

    # ------------------------------------------------------------------
    # SUBMIT AVAILABILITY
    # ------------------------------------------------------------------

    def submit_availability(
        self, submitter: Party, counterpart_id: str, slots: list[TimeSlot]
    ) -> SubmitAvailabilityResponse:
        """
        Replace the submitter's slots for this counterpart and look for a
        common window with the counterpart's slots, if they have submitted.
        """
        counterpart = self._require_match(submitter, counterpart_id)

        payload = [s.to_dict() for s in slots]

        # A concurrent first submission for the same pair can win the insert;
        # the retry then finds its row and replaces the slots
        run_in_transaction(
            self.db,
            lambda: self.availability.upsert(self.db, submitter.id, counterpart.id, payload),
            f"availability {submitter.id} -> {counterpart.id}",
        )

        logger.info(
            f"🗓️ {submitter.id} submitted {len(slots)} slot(s) for {counterpart.id}"
        )

        reverse = self.availability.get(self.db, counterpart.id, submitter.id)
        if reverse is None or not reverse.slots:
            return SubmitAvailabilityResponse(message=AWAITING_MESSAGE, matched=False)

        counterpart_slots = [TimeSlot.from_dict(d) for d in reverse.slots]
        window = intersect(slots, counterpart_slots, self.min_overlap_minutes)
        if window is None:
            logger.info(f"ℹ️ No common slot yet for {submitter.id}/{counterpart.id}")
            return SubmitAvailabilityResponse(message=NO_COMMON_SLOT_MESSAGE, matched=False)

        warnings = self.conflicts.find_conflicts(submitter.id, counterpart.id, window)
        logger.info(f"✅ Common slot {window} for {submitter.id}/{counterpart.id}")
        return SubmitAvailabilityResponse(
            message=MATCHED_MESSAGE,
            matched=True,
            commonSlot=TimeSlotSchema.from_slot(window),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # CONFIRM
    # ------------------------------------------------------------------

    def confirm_appointment(
        self, party: Party, counterpart_id: str, slot: TimeSlot
    ) -> Appointment:
        """
        Book ``slot`` with the counterpart. The window is taken as given, it is
        not re-checked against either party's availability or calendar.
        """
        counterpart = self._require_match(party, counterpart_id)
        values = slot.to_dict()

        def apply() -> tuple[Appointment, Notification]:
            self.relations.lock_parties(self.db, party.id, counterpart.id)
            if self.appointments.find_exact(
                self.db, party.id, counterpart.id, values["date"], values["start"], values["end"]
            ):
                raise DuplicateConfirmation()

            appointment = self.appointments.create(
                self.db, party.id, counterpart.id, values["date"], values["start"], values["end"]
            )
            self.availability.delete_pair(self.db, party.id, counterpart.id)
            notification = self.dispatcher.record(party.id, counterpart.id, "date_scheduled")
            return appointment, notification

        with self.locks.hold(party.id, counterpart.id):
            appointment, notification = run_in_transaction(
                self.db, apply, f"confirm {party.id} + {counterpart.id} at {slot}"
            )

        logger.info(
            f"📅 Date scheduled between {party.id} and {counterpart.id} "
            f"on {appointment.date} {format_hhmm(slot.start)}-{format_hhmm(slot.end)}"
        )
        self.dispatcher.deliver(notification)
        return appointment

    # ------------------------------------------------------------------
    # READS
    # ------------------------------------------------------------------

    def get_status(self, viewer: Party, counterpart_id: str) -> ScheduleStatusResponse:
        if viewer.id == counterpart_id:
            raise SelfReference("You cannot schedule a date with yourself")
        if not validate_uuid(counterpart_id):
            raise InvalidReference("Invalid user id")

        appointment = self.appointments.find_scheduled_between(self.db, viewer.id, counterpart_id)
        if appointment:
            return ScheduleStatusResponse(
                type="appointment", appointment=to_appointment_response(appointment)
            )

        mine = self.availability.get(self.db, viewer.id, counterpart_id)
        theirs = self.availability.get(self.db, counterpart_id, viewer.id)
        my_slots = [TimeSlotSchema(**d) for d in mine.slots] if mine and mine.slots else []
        return ScheduleStatusResponse(
            type="pending_availability",
            myAvailability=my_slots,
            partnerHasSubmitted=theirs is not None,
        )

    def list_appointments(self, party: Party) -> list[Appointment]:
        return self.appointments.list_for_party(self.db, party.id)

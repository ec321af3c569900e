"""Scheduling router - availability submission, confirmation and status"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import config
from ...auth import get_current_party
from ...database import get_db
from ...models import Party
from ...rate_limiter import create_party_rate_limiter
from .schemas import (
    AppointmentResponse,
    ConfirmAppointmentRequest,
    ConfirmAppointmentResponse,
    ScheduleStatusResponse,
    SubmitAvailabilityRequest,
    SubmitAvailabilityResponse,
)
from .service import AppointmentScheduler, to_appointment_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dating/schedule", tags=["Scheduling"])

availability_rate_limit = create_party_rate_limiter(
    limit=config.AVAILABILITY_RATE_LIMIT, window_seconds=3600, key_prefix="availability"
)


def get_scheduler(db: Session = Depends(get_db)) -> AppointmentScheduler:
    """Dependency injection for AppointmentScheduler"""
    return AppointmentScheduler(db)


@router.post("/availability", response_model=SubmitAvailabilityResponse)
async def submit_availability(
    data: SubmitAvailabilityRequest,
    party: Party = Depends(get_current_party),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
    _: None = Depends(availability_rate_limit),
):
    """Submit your free times for a match. Replaces anything submitted before."""
    slots = [s.to_slot() for s in data.slots]
    return scheduler.submit_availability(party, data.counterpartId, slots)


@router.post("/confirm", response_model=ConfirmAppointmentResponse)
async def confirm_appointment(
    data: ConfirmAppointmentRequest,
    party: Party = Depends(get_current_party),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """Confirm the common slot and book the date"""
    appointment = scheduler.confirm_appointment(party, data.counterpartId, data.to_slot())
    return ConfirmAppointmentResponse(
        message="Date confirmed! 🎉", appointment=to_appointment_response(appointment)
    )


@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments(
    party: Party = Depends(get_current_party),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """Get your scheduled dates"""
    return [to_appointment_response(a) for a in scheduler.list_appointments(party)]


@router.get("/status/{counterpart_id}", response_model=ScheduleStatusResponse)
async def get_schedule_status(
    counterpart_id: str,
    party: Party = Depends(get_current_party),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """Scheduling state with one match"""
    return scheduler.get_status(party, counterpart_id)

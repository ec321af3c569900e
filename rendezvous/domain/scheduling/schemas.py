"""Scheduling domain schemas - Pydantic models for validation"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_hhmm
from ..profiles.schemas import PartyDisplay
from .timeslots import TimeSlot


class TimeSlotSchema(BaseModel):
    """A same-day window, times in 24-hour HH:MM"""

    date: datetime.date
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)

    @model_validator(mode="after")
    def validate_order(self):
        # Zero-padded HH:MM strings order the same as the times they encode
        if self.start >= self.end:
            raise ValueError("end must be after start")
        return self

    def to_slot(self) -> TimeSlot:
        return TimeSlot.from_dict({"date": self.date.isoformat(), "start": self.start, "end": self.end})

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotSchema":
        return cls(**slot.to_dict())


class SubmitAvailabilityRequest(BaseModel):
    """Schema for submitting free time windows for one match"""

    counterpartId: str
    slots: list[TimeSlotSchema] = Field(default_factory=list, max_length=100)


class SubmitAvailabilityResponse(BaseModel):
    message: str
    matched: bool
    commonSlot: Optional[TimeSlotSchema] = None
    warnings: list[str] = Field(default_factory=list)


class ConfirmAppointmentRequest(TimeSlotSchema):
    """Schema for confirming the common slot returned by submitAvailability"""

    counterpartId: str


class AppointmentResponse(BaseModel):
    id: str
    partyA: Optional[PartyDisplay] = None
    partyB: Optional[PartyDisplay] = None
    date: str
    start: str
    end: str
    status: str
    createdAt: Optional[datetime.datetime] = None


class ConfirmAppointmentResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class ScheduleStatusResponse(BaseModel):
    """
    Either the confirmed appointment with the counterpart, or the viewer's own
    pending slots and whether the counterpart has submitted (never their slots).
    """

    type: Literal["appointment", "pending_availability"]
    appointment: Optional[AppointmentResponse] = None
    myAvailability: list[TimeSlotSchema] = Field(default_factory=list)
    partnerHasSubmitted: bool = False

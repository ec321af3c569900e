"""TimeSlot value type - a same-day window on a calendar date"""

from dataclasses import dataclass
import datetime
from typing import Optional

from ...shared.validators import format_hhmm, parse_hhmm


def to_minutes(value: datetime.time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeSlot:
    date: datetime.date
    start: datetime.time
    end: datetime.time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError("Time slot must end after it starts")

    @property
    def duration_minutes(self) -> int:
        return to_minutes(self.end) - to_minutes(self.start)

    def overlap_minutes(self, other: "TimeSlot") -> int:
        """Minutes shared with ``other``; 0 on different dates"""
        if self.date != other.date:
            return 0
        return max(
            0,
            min(to_minutes(self.end), to_minutes(other.end))
            - max(to_minutes(self.start), to_minutes(other.start)),
        )

    def overlaps(self, other: "TimeSlot") -> bool:
        """Strict overlap. Touching windows (10:00-11:00 and 11:00-12:00) do not overlap."""
        return self.overlap_minutes(other) > 0

    def intersection(self, other: "TimeSlot") -> Optional["TimeSlot"]:
        if not self.overlaps(other):
            return None
        return TimeSlot(
            date=self.date, start=max(self.start, other.start), end=min(self.end, other.end)
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "start": format_hhmm(self.start),
            "end": format_hhmm(self.end),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TimeSlot":
        return cls(
            date=datetime.date.fromisoformat(data["date"]),
            start=parse_hhmm(data["start"]),
            end=parse_hhmm(data["end"]),
        )

    @classmethod
    def from_strings(cls, day: str, start: str, end: str) -> "TimeSlot":
        return cls.from_dict({"date": day, "start": start, "end": end})

    def __str__(self) -> str:
        return f"{format_hhmm(self.start)}-{format_hhmm(self.end)} on {self.date.isoformat()}"

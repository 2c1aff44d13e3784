from pydantic import BaseModel, field_validator
from typing import Optional
from scheduling.visit_time import normalize_clock

WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

PERIODS = ("morning", "afternoon", "evening")


class WeeklySchedule(BaseModel):
    # None means "not configured", which reads as available
    sunday: Optional[bool] = None
    monday: Optional[bool] = None
    tuesday: Optional[bool] = None
    wednesday: Optional[bool] = None
    thursday: Optional[bool] = None
    friday: Optional[bool] = None
    saturday: Optional[bool] = None


class VisitingPeriod(BaseModel):
    enabled: bool = False
    start: Optional[str] = None
    end: Optional[str] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def validate_clock(cls, v):
        if v in (None, ""):
            return None
        return normalize_clock(v)


class VisitingHours(BaseModel):
    morning: Optional[VisitingPeriod] = None
    afternoon: Optional[VisitingPeriod] = None
    evening: Optional[VisitingPeriod] = None


class DoctorProfile(BaseModel):
    """Read-only view of a doctor's configuration used for scheduling."""

    id: Optional[str] = None
    full_name: str
    specialization: Optional[str] = None
    daily_patient_limit: int = 20
    is_available: bool = True
    unavailable_reason: Optional[str] = None
    weekly_schedule: Optional[WeeklySchedule] = None
    visiting_hours: Optional[VisitingHours] = None

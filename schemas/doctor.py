from pydantic import BaseModel, Field
from datetime import date
from typing import List, Optional
from models.doctor_schedule import VisitingHours, WeeklySchedule
from schemas.user import UserResponse


class DoctorResponse(UserResponse):
    qualification: Optional[str] = None
    fees: Optional[float] = None
    daily_patient_limit: int
    is_available: bool
    unavailable_reason: Optional[str] = None
    weekly_schedule: Optional[WeeklySchedule] = None
    visiting_hours: Optional[VisitingHours] = None


class PatientLimitUpdate(BaseModel):
    daily_patient_limit: int = Field(..., ge=1, le=100)


class AvailabilityUpdate(BaseModel):
    is_available: bool
    unavailable_reason: Optional[str] = None


class ScheduleUpdate(BaseModel):
    # Omitted fields keep their stored value
    weekly_schedule: Optional[WeeklySchedule] = None
    visiting_hours: Optional[VisitingHours] = None


class DoctorStats(BaseModel):
    doctor_id: str
    full_name: str
    specialization: Optional[str] = None
    date: date
    daily_patient_limit: int
    patient_count: int
    remaining_slots: int
    is_limit_reached: bool


class DoctorSlots(BaseModel):
    doctor_id: str
    date: date
    weekday: str
    is_date_available: bool
    slots: List[str]
    # No configured hours: any time on an available date is accepted
    unrestricted: bool

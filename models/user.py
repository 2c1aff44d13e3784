from beanie import Document
from pydantic import EmailStr, Field
from enum import Enum
from typing import Optional
from datetime import datetime
from models.doctor_schedule import DoctorProfile, VisitingHours, WeeklySchedule
from config import settings


class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    MEDICAL = "medical"


class User(Document):
    full_name: str
    email: EmailStr
    role: UserRole = UserRole.RECEPTIONIST
    mobile_number: Optional[str] = None
    specialization: Optional[str] = None
    qualification: Optional[str] = None
    fees: Optional[float] = None
    is_active: bool = True

    # Doctor scheduling configuration
    daily_patient_limit: int = settings.default_daily_patient_limit
    last_limit_reset_date: Optional[datetime] = None
    is_available: bool = True
    unavailable_reason: Optional[str] = None
    weekly_schedule: Optional[WeeklySchedule] = None
    visiting_hours: Optional[VisitingHours] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "users"

    @property
    def is_doctor(self) -> bool:
        return self.role == UserRole.DOCTOR

    def to_profile(self) -> DoctorProfile:
        return DoctorProfile(
            id=str(self.id) if self.id else None,
            full_name=self.full_name,
            specialization=self.specialization,
            daily_patient_limit=self.daily_patient_limit,
            is_available=self.is_available,
            unavailable_reason=self.unavailable_reason,
            weekly_schedule=self.weekly_schedule,
            visiting_hours=self.visiting_hours,
        )

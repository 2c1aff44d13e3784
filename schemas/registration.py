from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from models.patient import FeeStatus, Gender, PatientStatus
from scheduling.decisions import Decision
from scheduling.visit_time import normalize_clock, parse_visit_date


def _clean_date(v):
    if v in (None, ""):
        return None
    parse_visit_date(v)
    return v


def _clean_time(v):
    if v in (None, ""):
        return None
    return normalize_clock(v)


class PatientRegistration(BaseModel):
    full_name: str = Field(..., min_length=1)
    mobile_number: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=150)
    gender: Optional[Gender] = None
    disease: str = Field(..., min_length=1)
    blood_pressure: Optional[str] = None
    sugar_level: Optional[float] = Field(None, gt=0)
    doctor: str
    fees: float = Field(0, ge=0)
    fee_status: FeeStatus = FeeStatus.PENDING
    is_recheck: bool = False
    visit_date: Optional[str] = None
    visit_time: Optional[str] = None

    @field_validator("visit_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return _clean_date(v)

    @field_validator("visit_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return _clean_time(v)


class PatientStatusUpdate(BaseModel):
    status: PatientStatus
    reason: Optional[str] = None


class AppointmentCreate(BaseModel):
    patient_name: str = Field(..., min_length=1)
    mobile_number: str = Field(..., min_length=1)
    email: Optional[str] = None
    appointment_date: str
    appointment_time: str
    doctor: str
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointment_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return _clean_date(v)

    @field_validator("appointment_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return _clean_time(v)


class AppointmentReschedule(BaseModel):
    appointment_date: str
    appointment_time: str

    @field_validator("appointment_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return _clean_date(v)

    @field_validator("appointment_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return _clean_time(v)


class RegistrationResponse(BaseModel):
    success: bool = True
    message: str
    id: str
    token_number: Optional[int] = None
    visit_at: datetime
    remaining_slots: Optional[int] = None
    notification_sent: bool = False


class RejectionDetail(BaseModel):
    success: bool = False
    reason: str
    message: str
    limit_reached: bool
    doctor_name: Optional[str] = None
    unavailable_reason: Optional[str] = None
    current_count: Optional[int] = None
    daily_limit: Optional[int] = None
    available_slots: List[str] = Field(default_factory=list)

    @classmethod
    def from_decision(cls, decision: Decision) -> "RejectionDetail":
        return cls(
            reason=decision.reason.value,
            message=decision.message,
            limit_reached=decision.limit_reached,
            doctor_name=decision.doctor_name,
            unavailable_reason=decision.unavailable_reason,
            current_count=decision.current_count,
            daily_limit=decision.limit,
            available_slots=decision.available_slots,
        )

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from beanie import PydanticObjectId
from bson import ObjectId
from typing import Optional
from models.user import UserRole
from models.doctor_schedule import VisitingHours, WeeklySchedule


class DoctorCreate(BaseModel):
    full_name: str
    email: EmailStr
    mobile_number: Optional[str] = None
    specialization: Optional[str] = None
    qualification: Optional[str] = None
    fees: Optional[float] = Field(None, ge=0)
    daily_patient_limit: Optional[int] = Field(None, ge=1, le=100)
    weekly_schedule: Optional[WeeklySchedule] = None
    visiting_hours: Optional[VisitingHours] = None


class UserResponse(BaseModel):
    id: str
    full_name: str
    email: EmailStr
    role: UserRole
    mobile_number: Optional[str] = None
    specialization: Optional[str] = None
    is_active: bool

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        if isinstance(v, (ObjectId, PydanticObjectId)):
            return str(v)
        return v

    model_config = ConfigDict(from_attributes=True)
